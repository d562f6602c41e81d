"""
Learner input helpers shared by the hosts.

Blank answers are filtered here, before they ever reach the interpreter.
"""

from typing import Optional, Sequence

from inquirylab.schemas import ChoiceOption


def normalize_learner_text(text: Optional[str]) -> Optional[str]:
    """
    Trim a typed answer.

    Returns:
        The trimmed text, or None if nothing but whitespace was entered
    """
    if text is None:
        return None
    text = text.strip()
    return text or None


def parse_choice_reply(reply: str, options: Sequence[ChoiceOption]) -> Optional[ChoiceOption]:
    """
    Map a typed reply to an option: a letter (A/b), a 1-based number or the label.

    Returns:
        The matching option, or None
    """
    reply = (normalize_learner_text(reply) or "").rstrip(".")
    if not reply:
        return None
    if len(reply) == 1 and reply.isascii() and reply.isalpha():
        index = ord(reply.upper()) - ord("A")
        return options[index] if 0 <= index < len(options) else None
    if reply.isascii() and reply.isdigit():
        index = int(reply) - 1
        return options[index] if 0 <= index < len(options) else None
    for option in options:
        if option.label == reply:
            return option
    return None
