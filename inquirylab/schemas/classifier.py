"""
Free-text classifier schemas for inquirylab.

A classifier decides whether a learner's free-text answer shows the idea the
question is after. All policies here are keyword based:
- AnyKeyword: any one keyword from a single list
- KeywordGroups: at least one keyword from every concept group
- KeywordCount: at least N distinct keywords from a larger list
- NumberMention: the answer quotes a number

Matching is literal substring membership (`keyword in text`). There is no case
folding, stemming, tokenization or word-boundary check, so "高" inside a longer
word still counts.
"""

import re
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ASCII digits only; str.isdigit / \d would also accept full-width digits
NUMBER_PATTERN = re.compile(r"[0-9]+")


class ClassificationResult(BaseModel):
    """
    Verdict for one learner answer.

    `understood` drives branching; every other field is an auxiliary signal
    (e.g. mentionsTemp) kept as an extra attribute.
    """
    model_config = ConfigDict(extra="allow")

    understood: bool

    def as_dict(self) -> dict:
        """Flat mapping of the verdict and its signals (stored as lastAnalysis)."""
        return self.model_dump()


def contains_any(text: str, keywords: list[str]) -> bool:
    """True if any keyword occurs in text as a plain substring."""
    return any(keyword in text for keyword in keywords)


# -----------------------------------------------------------------------------
# Policies
# -----------------------------------------------------------------------------

class ClassifierPolicyBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    policy: str

    def classify(self, text: str) -> ClassificationResult:
        raise NotImplementedError

    def __call__(self, text: str) -> ClassificationResult:
        return self.classify(text)


class AnyKeyword(ClassifierPolicyBase):
    """Understood when any one keyword appears."""
    policy: Literal["any_keyword"] = "any_keyword"
    keywords: list[str] = Field(..., min_length=1)
    signal: Optional[str] = None  # extra boolean field mirroring the verdict

    def classify(self, text: str) -> ClassificationResult:
        found = contains_any(text, self.keywords)
        signals = {self.signal: found} if self.signal else {}
        return ClassificationResult(understood=found, **signals)


class KeywordGroups(ClassifierPolicyBase):
    """
    Understood only when every concept group is mentioned.

    The authored lesson uses two disjoint groups, e.g. a temperature term AND
    a respiration term.
    """
    policy: Literal["keyword_groups"] = "keyword_groups"
    groups: list[list[str]] = Field(..., min_length=1)
    signals: Optional[list[str]] = None  # one signal name per group
    counted: Optional[list[str]] = None  # keywords tallied into matchCount

    @field_validator("groups")
    @classmethod
    def groups_not_empty(cls, v):
        if any(not group for group in v):
            raise ValueError("Keyword groups must not be empty")
        return v

    @field_validator("signals")
    @classmethod
    def one_signal_per_group(cls, v, info):
        groups = info.data.get("groups")
        if v is not None and groups is not None and len(v) != len(groups):
            raise ValueError("signals must name every keyword group")
        return v

    def classify(self, text: str) -> ClassificationResult:
        hits = [contains_any(text, group) for group in self.groups]
        signals = dict(zip(self.signals, hits)) if self.signals else {}
        if self.counted is not None:
            signals["matchCount"] = sum(1 for keyword in self.counted if keyword in text)
        return ClassificationResult(understood=all(hits), **signals)


class KeywordCount(ClassifierPolicyBase):
    """Understood when at least `threshold` distinct keywords appear."""
    policy: Literal["keyword_count"] = "keyword_count"
    keywords: list[str] = Field(..., min_length=1)
    threshold: int = Field(..., ge=1)

    def classify(self, text: str) -> ClassificationResult:
        count = sum(1 for keyword in self.keywords if keyword in text)
        return ClassificationResult(understood=count >= self.threshold, matchCount=count)


class NumberMention(ClassifierPolicyBase):
    """Understood when the answer contains a number (or one of the hint strings)."""
    policy: Literal["number_mention"] = "number_mention"
    hints: list[str] = []

    def classify(self, text: str) -> ClassificationResult:
        found = bool(NUMBER_PATTERN.search(text)) or contains_any(text, self.hints)
        return ClassificationResult(understood=found)


ClassifierPolicy = Annotated[
    Union[AnyKeyword, KeywordGroups, KeywordCount, NumberMention],
    Field(discriminator="policy"),
]


# -----------------------------------------------------------------------------
# Named presets (stand-alone analyzers, addressable by name from lesson files)
# -----------------------------------------------------------------------------

TEMPERATURE_TERMS = ["温度", "热", "暖", "冷", "凉"]
RESPIRATION_TERMS = ["呼吸", "酵母", "发酵"]
RATE_TERMS = ["快", "慢", "速度", "影响"]

CLASSIFIER_PRESETS: dict[str, ClassifierPolicyBase] = {
    # temperature <-> respiration connection
    "understanding": KeywordGroups(
        groups=[TEMPERATURE_TERMS, RESPIRATION_TERMS],
        signals=["mentionsTemp", "mentionsRespiration"],
        counted=TEMPERATURE_TERMS + RESPIRATION_TERMS + RATE_TERMS,
    ),
    # bubbles / gas seen in the beakers
    "phenomenon_observation": AnyKeyword(
        keywords=["气泡", "冒泡", "泡泡", "气体", "冒", "起泡"],
        signal="observed",
    ),
    # a trend described from the data
    "pattern_description": AnyKeyword(
        keywords=["越高", "越多", "越快", "增加", "上升", "温度高", "气体多", "规律"],
        signal="foundPattern",
    ),
}


def get_classifier_preset(name: str) -> ClassifierPolicyBase:
    """
    Look up a named classifier preset.

    Raises:
        ValueError: If no preset has that name
    """
    if name not in CLASSIFIER_PRESETS:
        raise ValueError(
            f"Unknown classifier preset: {name} (available: {', '.join(sorted(CLASSIFIER_PRESETS))})"
        )
    return CLASSIFIER_PRESETS[name]
