"""
Chat relay client used by the desktop app
"""

import copy

import requests

from utils.debug_logger import debug_logger


REQUEST_TIMEOUT_SECONDS = 90


class ChatRelayError(Exception):
    """Relay unreachable or returned an error; the message is safe to show"""


class ChatRelayClient:
    """Sends a question plus a snapshot copy to the relay's /api/chat endpoint"""

    def __init__(self, url, timeout=REQUEST_TIMEOUT_SECONDS, session=None):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def ask(self, message, snapshot):
        """Returns the assistant reply text"""
        payload = {'message': message, 'snapshot': copy.deepcopy(snapshot or {})}
        debug_logger.debug("Chat", "Sending question", {'url': self.url, 'chars': len(message or "")})
        try:
            response = self.session.post(self.url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            debug_logger.warning("Chat", "Relay unreachable", {'error': str(e)})
            raise ChatRelayError(f"Could not reach the chat service at {self.url}.")

        if not response.ok:
            raise ChatRelayError(f"Server error {response.status_code}. {self._error_text(response)}".strip())

        try:
            data = response.json()
        except ValueError:
            raise ChatRelayError("The chat service sent a reply that could not be read.")
        reply = data.get('reply') if isinstance(data, dict) else None
        if not isinstance(reply, str) or not reply.strip():
            return "No reply returned."
        return reply

    @staticmethod
    def _error_text(response):
        try:
            data = response.json()
        except ValueError:
            return (response.text or "")[:300]
        if isinstance(data, dict):
            return str(data.get('error') or "")
        return ""
