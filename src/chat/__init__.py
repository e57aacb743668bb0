"""
Flooring chat assistant: relay service, client and prompts
"""

from .prompts import SYSTEM_PROMPT, GREETING, build_user_prompt
from .relay_client import ChatRelayClient, ChatRelayError

__all__ = [
    'SYSTEM_PROMPT',
    'GREETING',
    'build_user_prompt',
    'ChatRelayClient',
    'ChatRelayError',
]
