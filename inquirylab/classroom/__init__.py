"""
inquirylab Classroom - Runtime for guided inquiry lessons.

This module provides:
- Script: ordered, id-addressed lesson steps
- LearnerState: the learner's answers and flags with change notification
- Scheduler: cancellable delayed callbacks for auto-advance
- Interpreter: the step state machine driven by the host
- Loader: lesson files to scripts
"""

from .state import (
    LearnerState,
    default_learner_state,
    initial_experiment_data,
    BULK_KEY,
    RESET_KEY,
)

from .script import (
    Script,
    UnresolvedReference,
)

from .scheduler import (
    Scheduler,
    ScheduledTask,
    AsyncioScheduler,
)

from .presentation import Presentation

from .summary import (
    PREDICTION_TEXTS,
    prediction_text,
    build_course_summary,
)

from .interpreter import (
    Interpreter,
    ExecutionCursor,
)

from .loader import (
    DEFAULT_LESSON_PATH,
    parse_steps,
    load_script,
    load_default_script,
)

__all__ = [
    # State
    "LearnerState",
    "default_learner_state",
    "initial_experiment_data",
    "BULK_KEY",
    "RESET_KEY",
    # Script
    "Script",
    "UnresolvedReference",
    # Scheduling
    "Scheduler",
    "ScheduledTask",
    "AsyncioScheduler",
    # Interpreter
    "Presentation",
    "Interpreter",
    "ExecutionCursor",
    # Summary
    "PREDICTION_TEXTS",
    "prediction_text",
    "build_course_summary",
    # Loading
    "DEFAULT_LESSON_PATH",
    "parse_steps",
    "load_script",
    "load_default_script",
]
