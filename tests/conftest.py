"""Shared fixtures for inquirylab tests."""

import pytest

from inquirylab.classroom import (
    Interpreter,
    LearnerState,
    Scheduler,
    Script,
    load_default_script,
)
from inquirylab.schemas import (
    ActionStep,
    Always,
    BranchStep,
    ChoiceOption,
    ChoiceStep,
    FreeInputStep,
    AnyKeyword,
    MessageStep,
    RevealStep,
)
from inquirylab.viewer import TranscriptPresentation


class VirtualClock:
    """Manually advanced time source for the scheduler."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def clock():
    return VirtualClock()


@pytest.fixture
def scheduler(clock):
    return Scheduler(clock=clock)


@pytest.fixture
def state():
    return LearnerState()


@pytest.fixture
def presentation(state):
    return TranscriptPresentation(state)


@pytest.fixture(scope="session")
def lesson_script():
    return load_default_script()


@pytest.fixture
def small_script():
    """Message, choice with feedback, free input with classifier, reveal, end."""
    return Script([
        MessageStep(id="hello", module=1, content="你好", auto_advance=True, delay=1.0),
        ChoiceStep(
            id="pick",
            module=1,
            prompt_text="选一个",
            options=[
                ChoiceOption(label="甲", value="a"),
                ChoiceOption(label="乙", value="b"),
            ],
            state_key="picked",
            correct_value="a",
            on_correct_step_id="right",
            on_incorrect_step_id="wrong",
        ),
        MessageStep(id="right", module=1, content="对了", auto_advance=True),
        BranchStep(
            id="skip_wrong",
            module=1,
            predicate=Always(),
            on_true_step_id="ask",
            on_false_step_id="ask",
        ),
        MessageStep(id="wrong", module=1, content="错了", auto_advance=True),
        FreeInputStep(
            id="ask",
            module=2,
            prompt_text="看到了什么？",
            state_key="seen",
            classifier=AnyKeyword(keywords=["气泡"], signal="observed"),
            on_understood_step_id="good",
            on_not_understood_step_id="hint",
        ),
        MessageStep(id="good", module=2, content="很好", auto_advance=True),
        RevealStep(id="reveal", module=2),
        ActionStep(id="bench", module=2, action_name="show_chart", auto_advance=True),
        MessageStep(id="hint", module=2, content="再看看", auto_advance=True),
    ])


@pytest.fixture
def make_interpreter(state, presentation, scheduler):
    """Build an interpreter over the shared state, presentation and scheduler."""
    def _make(script, **kwargs):
        return Interpreter(script, state, presentation, scheduler, **kwargs)
    return _make
