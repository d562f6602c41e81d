"""
Summary - End-of-course recap built from the learner's state.

Plain template filling: fixed lesson facts plus the learner's prediction and
the experiment data they produced.
"""

import logging
from typing import Any

from inquirylab.schemas import CourseSummary, ExperimentGroup


logger = logging.getLogger(__name__)

PREDICTION_TEXTS = {
    "higher_more": "温度越高，产气越多",
    "lower_more": "温度越低，产气越多",
    "no_effect": "温度不影响产气量",
}
UNRECORDED = "未记录"

SUMMARY_QUESTION = "温度是否会影响酵母菌呼吸作用的速度"
SUMMARY_VARIABLES = "自变量（温度）、因变量（CO₂体积）、控制变量（酵母量、糖量等）"
SUMMARY_CONCLUSION = "温度越高，酵母菌产生的二氧化碳越多（适用于10-40°C）"
SUMMARY_APPLICATION = "温度影响发面速度，冷藏可减缓发酵"


def prediction_text(prediction: Any) -> str:
    """Learner phrase for a prediction value ("未记录" if unknown)."""
    if isinstance(prediction, str):
        return PREDICTION_TEXTS.get(prediction, UNRECORDED)
    return UNRECORDED


def _experiment_groups(data: Any) -> dict[str, ExperimentGroup]:
    groups = {}
    if not isinstance(data, dict):
        return groups
    for name, values in data.items():
        if isinstance(values, ExperimentGroup):
            groups[name] = values
        elif isinstance(values, dict) and "temp" in values and "gas" in values:
            groups[name] = ExperimentGroup(temp=values["temp"], gas=values["gas"])
        else:
            logger.warning(f"Skipping malformed experiment group '{name}' in summary")
    return groups


def build_course_summary(state) -> CourseSummary:
    """
    Build the recap shown when the lesson ends.

    Args:
        state: LearnerState (anything with get(key))

    Returns:
        CourseSummary with the learner's prediction and experiment data
    """
    prediction = state.get("prediction")
    conclusion = state.get("conclusion")
    return CourseSummary(
        question=SUMMARY_QUESTION,
        variables=SUMMARY_VARIABLES,
        prediction=prediction,
        prediction_text=prediction_text(prediction),
        conclusion=SUMMARY_CONCLUSION,
        learner_conclusion=conclusion if isinstance(conclusion, str) else "",
        application=SUMMARY_APPLICATION,
        experiment_data=_experiment_groups(state.get("experimentData")),
    )
