"""
Chat renderer - Format tutor and learner messages for display.

Features:
- Lightweight markup: **bold**, *emphasis*, line breaks
- Variable tags ([自变量:温度], [因变量:...], [控制变量:...]) as colored badges
- Plain-text rendering of the same markup for terminals
- Simulated composing delay proportional to message length
"""

import html
import re
from typing import Sequence

from inquirylab.schemas import ChoiceOption


# Composing ("typing...") delay: 20 ms per character, capped at 1.5 s
TYPING_SECONDS_PER_CHAR = 0.02
MAX_TYPING_SECONDS = 1.5

AVATARS = {
    "ai": "🤖",
    "user": "👤",
    "system": "🔬",
}

BOLD_PATTERN = re.compile(r"\*\*(.*?)\*\*")
EM_PATTERN = re.compile(r"\*(.*?)\*")

# Tag label -> CSS modifier
VARIABLE_TAGS = {
    "自变量": "independent",
    "因变量": "dependent",
    "控制变量": "control",
}
VARIABLE_TAG_PATTERN = re.compile(r"\[(自变量|因变量|控制变量):(.*?)\]")


def get_chat_css() -> str:
    """Get CSS styles for the chat transcript."""
    return """
    <style>
    .chat-message {
        display: flex;
        gap: 0.6em;
        margin: 0.6em 0;
        align-items: flex-start;
    }
    .chat-message.user {
        flex-direction: row-reverse;
    }
    .chat-avatar {
        font-size: 1.4em;
        line-height: 1.6em;
    }
    .chat-content {
        padding: 0.7em 1em;
        border-radius: 12px;
        max-width: 85%;
        line-height: 1.6;
    }
    .chat-message.ai .chat-content {
        background: #f1f5f9;
        color: #1e293b;
        border-top-left-radius: 2px;
    }
    .chat-message.user .chat-content {
        background: #10b981;
        color: white;
        border-top-right-radius: 2px;
    }
    .chat-message.system .chat-content {
        background: #eff6ff;
        border: 1px solid #3b82f6;
        color: #1e3a8a;
        font-weight: 500;
    }
    .variable-tag {
        display: inline-block;
        padding: 0.1em 0.6em;
        margin: 0.2em 0;
        border-radius: 999px;
        font-size: 0.85em;
        font-weight: 600;
    }
    .variable-tag.independent {
        background: rgba(59, 130, 246, 0.15);
        color: #1d4ed8;
    }
    .variable-tag.dependent {
        background: rgba(16, 185, 129, 0.15);
        color: #047857;
    }
    .variable-tag.control {
        background: rgba(251, 191, 36, 0.2);
        color: #b45309;
    }
    .choice-letter {
        font-weight: 700;
        margin-right: 0.3em;
    }
    </style>
    """


def format_content(content: str) -> str:
    """
    Render tutor markup to HTML.

    The text is HTML-escaped first, so only the markup below produces tags.

    Args:
        content: Message text with **bold**, *em*, newlines and variable tags

    Returns:
        HTML string
    """
    text = html.escape(content, quote=False)
    text = BOLD_PATTERN.sub(r"<strong>\1</strong>", text)
    text = EM_PATTERN.sub(r"<em>\1</em>", text)
    text = text.replace("\n", "<br>")
    return VARIABLE_TAG_PATTERN.sub(
        lambda m: f'<span class="variable-tag {VARIABLE_TAGS[m.group(1)]}">{m.group(1)}: {m.group(2)}</span>',
        text,
    )


def format_user_text(text: str) -> str:
    """Learner text is shown as typed: escaped, no markup."""
    return html.escape(text, quote=False)


def format_plain(content: str) -> str:
    """Render tutor markup for a terminal (markers dropped, tags bracketed)."""
    text = BOLD_PATTERN.sub(r"\1", content)
    text = EM_PATTERN.sub(r"\1", text)
    return VARIABLE_TAG_PATTERN.sub(r"【\1: \2】", text)


def typing_delay(content: str) -> float:
    """Seconds to show the composing indicator before a message appears."""
    return min(len(content) * TYPING_SECONDS_PER_CHAR, MAX_TYPING_SECONDS)


def choice_letter(index: int) -> str:
    """A, B, C, ... for option buttons."""
    return chr(ord("A") + index)


def format_choice_label(index: int, option: ChoiceOption) -> str:
    return f"{choice_letter(index)}. {option.label}"


def render_message_html(role: str, content: str) -> str:
    """
    Render one transcript entry as a chat bubble.

    Args:
        role: "ai", "user" or "system"
        content: Raw message text

    Returns:
        HTML string for the bubble
    """
    body = format_user_text(content) if role == "user" else format_content(content)
    avatar = AVATARS.get(role, AVATARS["ai"])
    return f"""
    <div class="chat-message {role}">
        <div class="chat-avatar">{avatar}</div>
        <div class="chat-content">{body}</div>
    </div>
    """


def render_choices_plain(options: Sequence[ChoiceOption]) -> str:
    """Options as lettered lines for the terminal player."""
    return "\n".join(format_choice_label(i, option) for i, option in enumerate(options))
