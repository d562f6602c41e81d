"""
LearnerState - In-memory record of one learner's answers and flags.

Holds every lesson variable for a single session:
- Progress (current module / step)
- Answers to each question
- Experiment data shown on the lab bench
- Interaction flags

Nothing is persisted; a restart returns everything to the defaults.
"""

import copy
import logging
from typing import Any, Callable, Mapping, Optional


logger = logging.getLogger(__name__)

Listener = Callable[[str, Any, dict], None]


class _Subscription:
    """One registration of a listener; the same listener may hold several."""
    __slots__ = ("listener",)

    def __init__(self, listener: Listener):
        self.listener = listener


BULK_KEY = "bulk"
RESET_KEY = "reset"


def initial_experiment_data() -> dict[str, dict[str, int]]:
    """Three temperature groups before the experiment has run."""
    return {
        "group1": {"temp": 10, "gas": 0},
        "group2": {"temp": 20, "gas": 0},
        "group3": {"temp": 30, "gas": 0},
    }


def default_learner_state() -> dict[str, Any]:
    """Fresh copy of the named defaults every session starts from."""
    return {
        # Progress
        "currentModule": 1,
        "currentStep": 0,
        "hasLearnedVariables": False,

        # Module 1: question focus
        "initialAnswer": "",
        "understoodConnection": False,

        # Module 2: experiment
        "independentVariable": None,
        "dependentVariable": None,
        "controlVariables": [],
        "measurementMethod": None,
        "groupCount": 0,
        "prediction": None,
        "experimentData": initial_experiment_data(),
        "experimentPhase": 0,
        "observedPhenomenon": False,

        # Module 3: conclusion
        "foundPattern": False,
        "conclusion": "",

        # Module 4: transfer
        "explainedPhenomenon": False,
        "transferAnswer": None,
        "reflection": "",

        # Interaction
        "waitingForInput": False,
        "lastAnswerCorrect": False,
        "lastAnalysis": None,
    }


class LearnerState:
    """
    Keyed store of lesson variables with change notification.

    Keys are not checked against a schema: a lesson may introduce any key.
    Listeners are called as listener(key, value, snapshot) where key is the
    variable name, "bulk" for bulk_update or "reset" for reset.
    """

    def __init__(self, defaults: Optional[Mapping[str, Any]] = None):
        """
        Initialize state.

        Args:
            defaults: Starting values (default: default_learner_state())
        """
        self._defaults = copy.deepcopy(dict(defaults)) if defaults is not None else None
        self._data = self._fresh_defaults()
        self._subscriptions: list[_Subscription] = []

    def _fresh_defaults(self) -> dict[str, Any]:
        if self._defaults is None:
            return default_learner_state()
        return copy.deepcopy(self._defaults)

    # -------------------------------------------------------------------------
    # Access
    # -------------------------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        """Value for key, or `default` when the key was never set."""
        return self._data.get(key, default)

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def snapshot(self) -> dict[str, Any]:
        """Deep copy of every variable."""
        return copy.deepcopy(self._data)

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def set(self, key: str, value: Any):
        """Overwrite one variable and notify listeners."""
        self._data[key] = value
        self._notify(key, value)

    def bulk_update(self, updates: Mapping[str, Any]):
        """Apply several variables as one change (single "bulk" notification)."""
        updates = dict(updates)
        self._data.update(updates)
        self._notify(BULK_KEY, updates)

    def reset(self):
        """Restore the defaults and notify listeners with "reset"."""
        self._data = self._fresh_defaults()
        self._notify(RESET_KEY, None)

    # -------------------------------------------------------------------------
    # Listeners
    # -------------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener.

        Returns:
            Function removing the listener; calling it again is a no-op
        """
        subscription = _Subscription(listener)
        self._subscriptions.append(subscription)

        def unsubscribe():
            # Removes this registration only, even if the listener was added twice
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

        return unsubscribe

    def _notify(self, key: str, value: Any):
        snapshot = self.snapshot()
        # Copy first: listeners may unsubscribe themselves or others mid-pass
        for subscription in list(self._subscriptions):
            if subscription not in self._subscriptions:
                continue
            try:
                subscription.listener(key, value, snapshot)
            except Exception:
                logger.exception(f"State listener failed on '{key}' change")
