"""
Lesson step schemas for inquirylab.

Defines Pydantic models for the authored lesson script:
- Narration (message) and lab-bench action steps
- Multiple-choice and free-text question steps
- Reveal of the standing research question
- Conditional jumps (branch)

Every step carries a unique `id` and the lesson phase (`module`, 1..4) it
belongs to. Jumps refer to other steps by id.
"""

from typing import Annotated, Any, Callable, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .classifier import ClassifierPolicy
from .predicates import BranchPredicate


DEFAULT_MESSAGE_DELAY = 1.0  # seconds
DEFAULT_ACTION_DELAY = 0.5
REVEAL_DELAY = 0.5


class ChoiceOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str                        # text shown on the button and echoed back
    value: Any                        # stored under the step's state_key
    is_correct: Optional[bool] = None  # display hint only; grading uses correct_value


# -----------------------------------------------------------------------------
# Step types
# -----------------------------------------------------------------------------

class StepBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    id: str = Field(..., min_length=1)
    module: int = Field(..., ge=1, le=4)

    def references(self) -> list[tuple[str, str]]:
        """(field name, target step id) for every jump this step declares."""
        return []


class MessageStep(StepBase):
    type: Literal["message"] = "message"
    content: str
    auto_advance: bool = False
    delay: float = Field(DEFAULT_MESSAGE_DELAY, ge=0)


class ChoiceStep(StepBase):
    """
    Multiple-choice question.

    Grading happens only when `correct_value` is declared; a declared None
    still counts. Without it the choice is recorded and the lesson moves on.
    """
    type: Literal["choice"] = "choice"
    prompt_text: str
    options: list[ChoiceOption] = Field(..., min_length=1)
    state_key: Optional[str] = None
    correct_value: Any = None
    on_correct_step_id: Optional[str] = None
    on_incorrect_step_id: Optional[str] = None

    @property
    def has_correct_value(self) -> bool:
        return "correct_value" in self.model_fields_set

    def option_for(self, value: Any) -> Optional[ChoiceOption]:
        """First option carrying `value`, or None."""
        for option in self.options:
            if option.value == value:
                return option
        return None

    def references(self) -> list[tuple[str, str]]:
        refs = []
        if self.on_correct_step_id:
            refs.append(("on_correct_step_id", self.on_correct_step_id))
        if self.on_incorrect_step_id:
            refs.append(("on_incorrect_step_id", self.on_incorrect_step_id))
        return refs


class FreeInputStep(StepBase):
    type: Literal["free_input"] = "free_input"
    prompt_text: str
    state_key: Optional[str] = None
    classifier: Union[ClassifierPolicy, Callable[[str], Any], None] = None
    on_understood_step_id: Optional[str] = None
    on_not_understood_step_id: Optional[str] = None

    def references(self) -> list[tuple[str, str]]:
        refs = []
        if self.on_understood_step_id:
            refs.append(("on_understood_step_id", self.on_understood_step_id))
        if self.on_not_understood_step_id:
            refs.append(("on_not_understood_step_id", self.on_not_understood_step_id))
        return refs


class ActionStep(StepBase):
    """Lab-bench effect; name and params are opaque to the interpreter."""
    type: Literal["action"] = "action"
    action_name: str
    params: dict[str, Any] = {}
    auto_advance: bool = False
    delay: float = Field(DEFAULT_ACTION_DELAY, ge=0)


class RevealStep(StepBase):
    """Shows the research question banner, then always moves on."""
    type: Literal["reveal"] = "reveal"

    @property
    def auto_advance(self) -> bool:
        return True

    @property
    def delay(self) -> float:
        return REVEAL_DELAY


class BranchStep(StepBase):
    type: Literal["branch"] = "branch"
    predicate: Union[BranchPredicate, Callable[[Any], bool]]
    on_true_step_id: str
    on_false_step_id: str

    def references(self) -> list[tuple[str, str]]:
        return [
            ("on_true_step_id", self.on_true_step_id),
            ("on_false_step_id", self.on_false_step_id),
        ]


StepRecord = Annotated[
    Union[MessageStep, ChoiceStep, FreeInputStep, ActionStep, RevealStep, BranchStep],
    Field(discriminator="type"),
]

# Steps that present something and then (maybe) move on by themselves
PresentationStep = Union[MessageStep, ActionStep, RevealStep]
