"""
Script graph tests for inquirylab, including the packaged lesson's integrity.
"""

import pytest

from inquirylab.classroom import Script, UnresolvedReference
from inquirylab.schemas import (
    Always,
    BranchStep,
    ChoiceOption,
    ChoiceStep,
    MessageStep,
)


def message(step_id, module=1):
    return MessageStep(id=step_id, module=module, content=step_id)


class TestScriptLookup:

    def test_length_and_order(self):
        script = Script([message("a"), message("b"), message("c")])
        assert len(script) == 3
        assert script.length == 3
        assert script.ids == ["a", "b", "c"]

    def test_step_at(self):
        script = Script([message("a"), message("b")])
        assert script.step_at(1).id == "b"

    def test_step_at_out_of_range(self):
        script = Script([message("a")])
        with pytest.raises(IndexError):
            script.step_at(1)
        with pytest.raises(IndexError):
            script.step_at(-1)

    def test_index_of_id(self):
        script = Script([message("a"), message("b")])
        assert script.index_of_id("b") == 1
        assert script.index_of_id("zzz") is None
        assert script.index_of_id(None) is None

    def test_step_by_id(self):
        script = Script([message("a")])
        assert script.step_by_id("a").id == "a"
        assert script.step_by_id("zzz") is None

    def test_duplicate_ids_rejected(self):
        with pytest.raises(ValueError):
            Script([message("a"), message("a")])

    def test_empty_script(self):
        script = Script([])
        assert len(script) == 0
        assert script.reachable_ids() == set()


class TestScriptGraph:

    def test_successors_linear(self):
        script = Script([message("a"), message("b")])
        assert script.successors("a") == ["b"]
        assert script.successors("b") == []

    def test_successors_branch_no_fallthrough(self):
        script = Script([
            BranchStep(id="br", module=1, predicate=Always(), on_true_step_id="c", on_false_step_id="c"),
            message("b"),
            message("c"),
        ])
        assert script.successors("br") == ["c"]
        assert "b" not in script.reachable_ids()

    def test_successors_choice(self):
        script = Script([
            ChoiceStep(
                id="q", module=1, prompt_text="?",
                options=[ChoiceOption(label="A", value="a")],
                correct_value="a",
                on_correct_step_id="right",
                on_incorrect_step_id="wrong",
            ),
            message("right"),
            message("wrong"),
        ])
        assert script.successors("q") == ["right", "wrong"]

    def test_unresolved_references(self):
        script = Script([
            BranchStep(id="br", module=1, predicate=Always(), on_true_step_id="a", on_false_step_id="gone"),
            message("a"),
        ])
        assert script.unresolved_references() == [
            UnresolvedReference(step_id="br", field="on_false_step_id", target_id="gone"),
        ]
        assert script.successors("br") == ["a"]

    def test_module_counts(self):
        script = Script([message("a", 1), message("b", 2), message("c", 2)])
        assert script.module_counts() == {1: 1, 2: 2}


class TestPackagedLesson:
    """The shipped lesson must be internally consistent."""

    def test_every_reference_resolves(self, lesson_script):
        assert lesson_script.unresolved_references() == []

    def test_every_step_reachable(self, lesson_script):
        assert lesson_script.reachable_ids() == set(lesson_script.ids)

    def test_starts_with_intro(self, lesson_script):
        assert lesson_script.step_at(0).id == "intro_1"

    def test_covers_all_modules(self, lesson_script):
        assert set(lesson_script.module_counts()) == {1, 2, 3, 4}

    def test_variable_independent_feedback(self, lesson_script):
        step = lesson_script.step_by_id("variable_independent")
        assert step.state_key == "independentVariable"
        assert step.correct_value == "temperature"
        assert step.on_correct_step_id == "variable_independent_correct"
        assert step.on_incorrect_step_id == "variable_independent_wrong"

    def test_prediction_choice_not_graded(self, lesson_script):
        step = lesson_script.step_by_id("prediction_choice")
        assert step.state_key == "prediction"
        assert not step.has_correct_value
