"""
LearnerState tests for inquirylab.

Covers defaults, mutation and listener notification semantics.
"""

from inquirylab.classroom import (
    LearnerState,
    default_learner_state,
    initial_experiment_data,
    BULK_KEY,
    RESET_KEY,
)


class TestLearnerStateAccess:

    def test_defaults(self):
        state = LearnerState()
        assert state.get("currentModule") == 1
        assert state.get("prediction") is None
        assert state.get("waitingForInput") is False
        assert state.get("experimentData") == initial_experiment_data()

    def test_missing_key_returns_none(self):
        state = LearnerState()
        assert state.get("noSuchKey") is None
        assert state.get("noSuchKey", "fallback") == "fallback"
        assert "noSuchKey" not in state

    def test_arbitrary_keys_allowed(self):
        state = LearnerState()
        state.set("observation1", "20ml")
        assert state["observation1"] == "20ml"

    def test_snapshot_is_a_copy(self):
        state = LearnerState()
        snapshot = state.snapshot()
        snapshot["experimentData"]["group1"]["gas"] = 99
        assert state.get("experimentData")["group1"]["gas"] == 0

    def test_custom_defaults(self):
        state = LearnerState(defaults={"score": 0})
        state.set("score", 5)
        state.reset()
        assert state.snapshot() == {"score": 0}


class TestLearnerStateMutation:

    def test_set_notifies_with_snapshot(self):
        state = LearnerState()
        calls = []
        state.subscribe(lambda key, value, snapshot: calls.append((key, value, snapshot["prediction"])))
        state.set("prediction", "higher_more")
        assert calls == [("prediction", "higher_more", "higher_more")]

    def test_bulk_update_single_notification(self):
        state = LearnerState()
        calls = []
        state.subscribe(lambda key, value, snapshot: calls.append(key))
        state.bulk_update({"currentStep": 3, "currentModule": 2})
        assert calls == [BULK_KEY]
        assert state.get("currentStep") == 3
        assert state.get("currentModule") == 2

    def test_reset_restores_defaults(self):
        state = LearnerState()
        state.set("prediction", "no_effect")
        state.bulk_update({"experimentData": {"group1": {"temp": 10, "gas": 20}}})
        calls = []
        state.subscribe(lambda key, value, snapshot: calls.append((key, value)))
        state.reset()
        assert state.snapshot() == default_learner_state()
        assert calls == [(RESET_KEY, None)]

    def test_reset_twice_identical(self):
        state = LearnerState()
        state.set("conclusion", "温度越高气体越多")
        state.reset()
        first = state.snapshot()
        state.reset()
        assert state.snapshot() == first


class TestLearnerStateListeners:

    def test_multiple_listeners(self):
        state = LearnerState()
        a, b = [], []
        state.subscribe(lambda *args: a.append(args[0]))
        state.subscribe(lambda *args: b.append(args[0]))
        state.set("x", 1)
        assert a == ["x"]
        assert b == ["x"]

    def test_unsubscribe_idempotent(self):
        state = LearnerState()
        calls = []
        unsubscribe = state.subscribe(lambda *args: calls.append(args[0]))
        unsubscribe()
        unsubscribe()
        state.set("x", 1)
        assert calls == []

    def test_unsubscribe_removes_only_its_own_registration(self):
        state = LearnerState()
        calls = []

        def listener(key, value, snapshot):
            calls.append(key)

        unsubscribe_first = state.subscribe(listener)
        state.subscribe(listener)
        unsubscribe_first()
        unsubscribe_first()
        state.set("x", 1)
        assert calls == ["x"]

    def test_unsubscribe_self_during_notification(self):
        state = LearnerState()
        calls = []

        def once(key, value, snapshot):
            calls.append(key)
            unsubscribe()

        unsubscribe = state.subscribe(once)
        state.set("x", 1)
        state.set("y", 2)
        assert calls == ["x"]

    def test_unsubscribe_other_during_notification(self):
        state = LearnerState()
        calls = []

        def first(key, value, snapshot):
            calls.append("first")
            unsubscribe_second()

        state.subscribe(first)
        unsubscribe_second = state.subscribe(lambda *args: calls.append("second"))
        state.set("x", 1)
        # Removed before its turn in the same pass
        assert calls == ["first"]

    def test_failing_listener_does_not_stop_others(self):
        state = LearnerState()
        calls = []

        def broken(key, value, snapshot):
            raise RuntimeError("boom")

        state.subscribe(broken)
        state.subscribe(lambda *args: calls.append(args[0]))
        state.set("x", 1)
        assert calls == ["x"]
        assert state.get("x") == 1
