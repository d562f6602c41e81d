"""inquirylab utilities."""

from .text import normalize_learner_text, parse_choice_reply

__all__ = ["normalize_learner_text", "parse_choice_reply"]
