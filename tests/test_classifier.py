"""
Free-text classifier tests for inquirylab.

Matching is literal substring membership; these tests pin that down.
"""

import pytest
from pydantic import ValidationError

from inquirylab.schemas import (
    ClassificationResult,
    AnyKeyword,
    KeywordGroups,
    KeywordCount,
    NumberMention,
    CLASSIFIER_PRESETS,
    get_classifier_preset,
    contains_any,
)


# Classifier of the opening question of the packaged lesson
OPENING_QUESTION = KeywordGroups(
    groups=[["温度", "热", "暖", "温暖"], ["酵母", "呼吸", "发酵", "菌"]],
    signals=["mentionsTemp", "mentionsYeast"],
)


class TestContainsAny:

    def test_substring_match(self):
        assert contains_any("温度越高", ["高"])

    def test_no_match(self):
        assert not contains_any("好吃", ["高", "多"])

    def test_empty_text(self):
        assert not contains_any("", ["高"])


class TestKeywordGroups:
    """Both concept groups must be mentioned."""

    def test_temperature_and_respiration_understood(self):
        result = OPENING_QUESTION("因为天气暖和，酵母呼吸变快")
        assert result.understood is True
        assert result.mentionsTemp is True
        assert result.mentionsYeast is True

    def test_unrelated_answer_not_understood(self):
        result = OPENING_QUESTION("因为它比较好吃")
        assert result.understood is False
        assert result.mentionsTemp is False
        assert result.mentionsYeast is False

    def test_only_one_group_not_understood(self):
        result = OPENING_QUESTION("因为暖气很热")
        assert result.understood is False
        assert result.mentionsTemp is True
        assert result.mentionsYeast is False

    def test_signals_omitted_when_not_named(self):
        policy = KeywordGroups(groups=[["温度"], ["高", "多", "增"]])
        result = policy("温度越高气体越多")
        assert result.understood is True
        assert result.as_dict() == {"understood": True}

    def test_empty_group_rejected(self):
        with pytest.raises(ValidationError):
            KeywordGroups(groups=[["温度"], []])

    def test_signal_count_must_match_groups(self):
        with pytest.raises(ValidationError):
            KeywordGroups(groups=[["温度"], ["酵母"]], signals=["only_one"])


class TestAnyKeyword:

    def test_single_keyword_suffices(self):
        policy = AnyKeyword(keywords=["气泡", "冒泡", "泡", "冒", "气体"], signal="observed")
        result = policy("水里在冒东西")
        assert result.understood is True
        assert result.observed is True

    def test_substring_inside_longer_word_counts(self):
        # "高" inside "高兴" still matches: no word-boundary checks
        policy = AnyKeyword(keywords=["高", "多", "增", "上升", "越", "规律"])
        assert policy("我很高兴").understood is True

    def test_no_case_folding(self):
        policy = AnyKeyword(keywords=["CO2"])
        assert policy("有CO2产生").understood is True
        assert policy("有co2产生").understood is False

    def test_requires_keywords(self):
        with pytest.raises(ValidationError):
            AnyKeyword(keywords=[])


class TestKeywordCount:

    def test_threshold_reached(self):
        policy = KeywordCount(keywords=["温度", "暖", "热", "快", "呼吸", "气体", "二氧化碳", "发酵"], threshold=2)
        result = policy("温度高，发酵快")
        assert result.understood is True
        assert result.matchCount == 3

    def test_below_threshold(self):
        policy = KeywordCount(keywords=["温度", "暖", "热", "快"], threshold=2)
        result = policy("因为温度")
        assert result.understood is False
        assert result.matchCount == 1

    def test_keyword_counted_once(self):
        policy = KeywordCount(keywords=["快", "热"], threshold=2)
        assert policy("快快快").understood is False

    def test_threshold_must_be_positive(self):
        with pytest.raises(ValidationError):
            KeywordCount(keywords=["a"], threshold=0)


class TestNumberMention:

    def test_digits_understood(self):
        assert NumberMention()("大约35毫升").understood is True

    def test_hint_understood(self):
        assert NumberMention(hints=["二十"])("二十毫升").understood is True

    def test_no_number(self):
        assert NumberMention(hints=["20"])("很多").understood is False


class TestPresets:

    def test_presets_available(self):
        assert set(CLASSIFIER_PRESETS) == {"understanding", "phenomenon_observation", "pattern_description"}

    def test_understanding_preset(self):
        result = get_classifier_preset("understanding")("温度影响酵母的呼吸")
        assert result.understood is True
        assert result.mentionsRespiration is True
        # 温度, 影响, 酵母, 呼吸
        assert result.matchCount == 4

    def test_understanding_preset_counts_without_understanding(self):
        result = get_classifier_preset("understanding")("天气冷了速度变慢")
        assert result.as_dict() == {
            "understood": False,
            "mentionsTemp": True,
            "mentionsRespiration": False,
            "matchCount": 3,
        }

    def test_pattern_preset(self):
        result = get_classifier_preset("pattern_description")("温度越高气体越多")
        assert result.understood is True
        assert result.foundPattern is True

    def test_unknown_preset(self):
        with pytest.raises(ValueError):
            get_classifier_preset("sentiment")


class TestClassificationResult:

    def test_extra_signals_kept(self):
        result = ClassificationResult(understood=False, observed=False)
        assert result.as_dict() == {"understood": False, "observed": False}
