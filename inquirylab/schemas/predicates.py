"""
Branch predicate schemas for inquirylab.

A branch step asks a predicate about the learner's state and jumps without
any learner interaction. Lesson files describe predicates declaratively; code
may pass any callable taking the state instead.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class PredicateBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: str

    def evaluate(self, state) -> bool:
        raise NotImplementedError

    def __call__(self, state) -> bool:
        return self.evaluate(state)


class Always(PredicateBase):
    """Constant outcome; used for unconditional jumps."""
    kind: Literal["always"] = "always"
    value: bool = True

    def evaluate(self, state) -> bool:
        return self.value


class StateEquals(PredicateBase):
    """True when a state variable equals the expected value."""
    kind: Literal["state_equals"] = "state_equals"
    key: str
    value: Any = None

    def evaluate(self, state) -> bool:
        return state.get(self.key) == self.value


BranchPredicate = Annotated[
    Union[Always, StateEquals],
    Field(discriminator="kind"),
]
