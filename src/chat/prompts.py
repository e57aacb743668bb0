"""
Prompt text for the flooring assistant
"""

import json


SYSTEM_PROMPT = """
You are an assistant for a Blueprint Flooring Estimator desktop app.

You ONLY help with:
- total square footage
- adding waste percentage (e.g. +10%)
- estimating cost if price per sq ft is provided
- explaining flooring math clearly

Be concise, professional, and practical.
If the question is unrelated, politely redirect to flooring topics.
""".strip()

GREETING = "Hi! I can help explain your saved selections, total sq ft, and simple flooring estimates."


def build_user_prompt(message, snapshot):
    """Question plus the estimate it is about"""
    return (
        "User question:\n"
        f"{message}\n\n"
        "Estimator snapshot (read-only):\n"
        f"{json.dumps(snapshot or {}, indent=2)}"
    )


def build_input(message, snapshot):
    """Message list for the Responses API"""
    return [
        {'role': 'system', 'content': SYSTEM_PROMPT},
        {'role': 'user', 'content': build_user_prompt(message, snapshot)},
    ]
