"""
Presentation - The rendering contract the interpreter drives.

Everything visible (chat bubbles, lab bench, charts, banners) lives behind
this interface. Calls are synchronous: returning from a call means the
content is displayed or the effect is complete.
"""

from typing import Any, Protocol, Sequence

from inquirylab.schemas import ChoiceOption, CourseSummary


class Presentation(Protocol):
    def render_message(self, content: str) -> None:
        """Show a tutor message in the transcript."""
        ...

    def render_choices(self, options: Sequence[ChoiceOption]) -> None:
        """Offer answer buttons; the click comes back through submit_choice."""
        ...

    def render_user_echo(self, text: str) -> None:
        """Show the learner's own answer in the transcript."""
        ...

    def run_presentation_action(self, action_name: str, params: dict[str, Any]) -> None:
        """Run a lab-bench effect (tools, groups, tables, charts)."""
        ...

    def reveal_auxiliary_panel(self) -> None:
        """Show the standing research question."""
        ...

    def report_progress(self, module: int) -> None:
        ...

    def report_course_complete(self, summary: CourseSummary) -> None:
        ...
