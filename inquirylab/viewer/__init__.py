"""
inquirylab Viewer - Rendering components for the lesson.

This module provides:
- Chat formatting (markup, variable tags, composing delay)
- Lab bench model, data table and chart
- Progress bar helpers
- Transcript presentation shared by the hosts
"""

from .chat import (
    get_chat_css,
    format_content,
    format_user_text,
    format_plain,
    typing_delay,
    choice_letter,
    format_choice_label,
    render_message_html,
    render_choices_plain,
)

from .lab import (
    LabBench,
    experiment_dataframe,
    render_experiment_chart,
    setup_cjk_fonts,
    get_lab_css,
    render_group_html,
    render_tools_html,
    render_flow_chart_html,
    FAST_FORWARD_RESULTS,
    GROUP_TEMPERATURES,
    PREPARATION_CHECKLIST,
    FLOW_STEPS,
)

from .progress import (
    MODULE_LABELS,
    PhaseStatus,
    progress_percent,
    module_label_states,
)

from .transcript import (
    TranscriptEntry,
    TranscriptPresentation,
    RESEARCH_QUESTION,
)

__all__ = [
    # Chat
    "get_chat_css",
    "format_content",
    "format_user_text",
    "format_plain",
    "typing_delay",
    "choice_letter",
    "format_choice_label",
    "render_message_html",
    "render_choices_plain",
    # Lab
    "LabBench",
    "experiment_dataframe",
    "render_experiment_chart",
    "setup_cjk_fonts",
    "get_lab_css",
    "render_group_html",
    "render_tools_html",
    "render_flow_chart_html",
    "FAST_FORWARD_RESULTS",
    "GROUP_TEMPERATURES",
    "PREPARATION_CHECKLIST",
    "FLOW_STEPS",
    # Progress
    "MODULE_LABELS",
    "PhaseStatus",
    "progress_percent",
    "module_label_states",
    # Transcript
    "TranscriptEntry",
    "TranscriptPresentation",
    "RESEARCH_QUESTION",
]
