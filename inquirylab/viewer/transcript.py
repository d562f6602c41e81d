"""
Transcript presentation - Records what the interpreter shows.

The Streamlit host, the terminal player and the tests all render from the
same record: chat entries, offered choices, research question banner,
current module, lab bench and the final summary.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

from inquirylab.schemas import ChoiceOption, CourseSummary

from .lab import LabBench


RESEARCH_QUESTION = "🔬 科学问题：温度会不会影响酵母菌的呼吸速度？"


@dataclass
class TranscriptEntry:
    role: str     # "ai", "user" or "system"
    content: str


class TranscriptPresentation:
    """Presentation that keeps an in-memory transcript (and drives a LabBench)."""

    def __init__(
        self,
        state,
        lab: Optional[LabBench] = None,
        on_entry: Optional[Callable[[TranscriptEntry], None]] = None,
    ):
        """
        Initialize presentation.

        Args:
            state: LearnerState of the session
            lab: Lab bench for action steps (default: new LabBench(state))
            on_entry: Called with every new transcript entry (e.g. to print it)
        """
        self.state = state
        self.lab = lab if lab is not None else LabBench(state)
        self.on_entry = on_entry
        self.reset()

    def reset(self):
        self.entries: list[TranscriptEntry] = []
        self.choices: list[ChoiceOption] = []
        self.question_visible = False
        self.module = 1
        self.summary: Optional[CourseSummary] = None
        self.lab.reset()

    @property
    def completed(self) -> bool:
        return self.summary is not None

    def messages(self, role: Optional[str] = None) -> list[str]:
        """Entry texts, optionally for one role only."""
        return [entry.content for entry in self.entries if role is None or entry.role == role]

    def _add(self, role: str, content: str):
        entry = TranscriptEntry(role=role, content=content)
        self.entries.append(entry)
        if self.on_entry is not None:
            self.on_entry(entry)

    # -------------------------------------------------------------------------
    # Presentation interface
    # -------------------------------------------------------------------------

    def render_message(self, content: str):
        self._add("ai", content)

    def render_choices(self, options: Sequence[ChoiceOption]):
        self.choices = list(options)

    def render_user_echo(self, text: str):
        self.choices = []
        self._add("user", text)

    def run_presentation_action(self, action_name: str, params: dict[str, Any]):
        self.lab.execute(action_name, params)

    def reveal_auxiliary_panel(self):
        if not self.question_visible:
            self.question_visible = True
            self._add("system", RESEARCH_QUESTION)

    def report_progress(self, module: int):
        self.module = module

    def report_course_complete(self, summary: CourseSummary):
        self.summary = summary
