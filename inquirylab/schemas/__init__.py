"""
inquirylab Schemas - Pydantic models for guided inquiry lessons.

This module exports all schema classes for:
- Steps: the authored lesson script (messages, questions, actions, branches)
- Classifier: keyword policies for free-text answers
- Predicates: declarative branch conditions
- Session: interpreter status, experiment data, course summary
"""

# Step schemas
from .steps import (
    ChoiceOption,
    StepBase,
    MessageStep,
    ChoiceStep,
    FreeInputStep,
    ActionStep,
    RevealStep,
    BranchStep,
    StepRecord,
    PresentationStep,
    DEFAULT_MESSAGE_DELAY,
    DEFAULT_ACTION_DELAY,
    REVEAL_DELAY,
)

# Classifier schemas
from .classifier import (
    ClassificationResult,
    ClassifierPolicyBase,
    AnyKeyword,
    KeywordGroups,
    KeywordCount,
    NumberMention,
    ClassifierPolicy,
    CLASSIFIER_PRESETS,
    get_classifier_preset,
    contains_any,
)

# Predicate schemas
from .predicates import (
    PredicateBase,
    Always,
    StateEquals,
    BranchPredicate,
)

# Session schemas
from .session import (
    InterpreterStatus,
    ExperimentGroup,
    CourseSummary,
)

__all__ = [
    # Steps
    'ChoiceOption',
    'StepBase',
    'MessageStep',
    'ChoiceStep',
    'FreeInputStep',
    'ActionStep',
    'RevealStep',
    'BranchStep',
    'StepRecord',
    'PresentationStep',
    'DEFAULT_MESSAGE_DELAY',
    'DEFAULT_ACTION_DELAY',
    'REVEAL_DELAY',
    # Classifier
    'ClassificationResult',
    'ClassifierPolicyBase',
    'AnyKeyword',
    'KeywordGroups',
    'KeywordCount',
    'NumberMention',
    'ClassifierPolicy',
    'CLASSIFIER_PRESETS',
    'get_classifier_preset',
    'contains_any',
    # Predicates
    'PredicateBase',
    'Always',
    'StateEquals',
    'BranchPredicate',
    # Session
    'InterpreterStatus',
    'ExperimentGroup',
    'CourseSummary',
]
