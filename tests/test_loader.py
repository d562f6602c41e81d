"""
Lesson loader tests for inquirylab.
"""

import logging

import pytest
import yaml
from pydantic import ValidationError

from inquirylab.classroom import load_script, parse_steps
from inquirylab.schemas import AnyKeyword, BranchStep, ChoiceStep, FreeInputStep, MessageStep, StateEquals


def write_lesson(tmp_path, records):
    path = tmp_path / "lesson.yaml"
    path.write_text(yaml.safe_dump(records, allow_unicode=True), encoding="utf-8")
    return path


class TestParseSteps:

    def test_all_step_types(self):
        script = parse_steps([
            {"id": "hi", "module": 1, "type": "message", "content": "你好", "auto_advance": True, "delay": 1.5},
            {"id": "q", "module": 2, "type": "choice", "prompt_text": "?",
             "options": [{"label": "A", "value": "a"}], "correct_value": "a"},
            {"id": "ask", "module": 2, "type": "free_input", "prompt_text": "?",
             "classifier": {"policy": "any_keyword", "keywords": ["泡"]}},
            {"id": "act", "module": 2, "type": "action", "action_name": "show_chart"},
            {"id": "rev", "module": 2, "type": "reveal"},
            {"id": "br", "module": 3, "type": "branch",
             "predicate": {"kind": "state_equals", "key": "prediction", "value": "higher_more"},
             "on_true_step_id": "hi", "on_false_step_id": "q"},
        ])
        assert [step.type for step in script] == ["message", "choice", "free_input", "action", "reveal", "branch"]
        assert isinstance(script.step_at(0), MessageStep)
        assert script.step_at(0).delay == 1.5
        assert isinstance(script.step_at(2).classifier, AnyKeyword)
        assert isinstance(script.step_at(5).predicate, StateEquals)

    def test_classifier_preset_by_name(self):
        script = parse_steps([
            {"id": "ask", "module": 3, "type": "free_input", "prompt_text": "?", "classifier": "pattern_description"},
        ])
        step = script.step_at(0)
        assert isinstance(step, FreeInputStep)
        assert step.classifier("温度越高气体越多").understood is True

    def test_unknown_preset(self):
        with pytest.raises(ValueError):
            parse_steps([{"id": "ask", "module": 1, "type": "free_input", "prompt_text": "?", "classifier": "mood"}])

    def test_unknown_step_type(self):
        with pytest.raises(ValidationError):
            parse_steps([{"id": "x", "module": 1, "type": "video"}])

    def test_module_out_of_range(self):
        with pytest.raises(ValidationError):
            parse_steps([{"id": "x", "module": 5, "type": "message", "content": "?"}])

    def test_duplicate_ids(self):
        with pytest.raises(ValueError):
            parse_steps([
                {"id": "x", "module": 1, "type": "message", "content": "a"},
                {"id": "x", "module": 1, "type": "message", "content": "b"},
            ])

    def test_unresolved_reference_warned(self, caplog):
        with caplog.at_level(logging.WARNING):
            script = parse_steps([
                {"id": "br", "module": 1, "type": "branch", "predicate": {"kind": "always"},
                 "on_true_step_id": "gone", "on_false_step_id": "gone"},
            ])
        assert isinstance(script.step_at(0), BranchStep)
        assert "gone" in caplog.text

    def test_correct_value_declared_in_yaml(self):
        script = parse_steps([
            {"id": "q", "module": 2, "type": "choice", "prompt_text": "?",
             "options": [{"label": "3个组", "value": 3}], "correct_value": 3},
            {"id": "p", "module": 2, "type": "choice", "prompt_text": "?",
             "options": [{"label": "高", "value": "higher_more"}]},
        ])
        graded, ungraded = list(script)
        assert isinstance(graded, ChoiceStep)
        assert graded.has_correct_value
        assert not ungraded.has_correct_value


class TestLoadScript:

    def test_load_list(self, tmp_path):
        path = write_lesson(tmp_path, [{"id": "hi", "module": 1, "type": "message", "content": "你好"}])
        script = load_script(path)
        assert script.ids == ["hi"]

    def test_load_mapping_with_steps(self, tmp_path):
        path = write_lesson(tmp_path, {"steps": [{"id": "hi", "module": 1, "type": "message", "content": "你好"}]})
        assert load_script(str(path)).ids == ["hi"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_script(tmp_path / "nope.yaml")

    def test_not_a_list(self, tmp_path):
        path = tmp_path / "lesson.yaml"
        path.write_text("just text", encoding="utf-8")
        with pytest.raises(ValueError):
            load_script(path)

    def test_packaged_lesson(self, lesson_script):
        assert len(lesson_script) > 50
        assert lesson_script.step_at(len(lesson_script) - 1).id == "end_message"
