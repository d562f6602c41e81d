"""
Session schemas for inquirylab.

Defines Pydantic models for a running lesson session:
- Interpreter status (state machine position)
- Experiment data groups
- End-of-course summary
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel


class InterpreterStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    AWAITING_CHOICE = "awaiting_choice"
    AWAITING_TEXT = "awaiting_text"
    FINISHED = "finished"


class ExperimentGroup(BaseModel):
    temp: int  # °C
    gas: int   # ml of CO2 after one hour


class CourseSummary(BaseModel):
    """Learner-facing recap shown once the lesson ends."""
    question: str
    variables: str
    prediction: Optional[Any] = None  # raw value chosen by the learner
    prediction_text: str
    conclusion: str
    learner_conclusion: str = ""      # the learner's own words, if given
    application: str
    experiment_data: dict[str, ExperimentGroup] = {}

    @property
    def items(self) -> list[str]:
        """Summary bullet lines, in display order."""
        return [
            f"探究问题：{self.question}",
            f"实验变量：{self.variables}",
            f"你的预测：{self.prediction_text}",
            f"实验结论：{self.conclusion}",
            f"生活应用：{self.application}",
        ]

    def gas_values(self) -> list[int]:
        """Gas volumes ordered by group name (group1, group2, ...)."""
        return [self.experiment_data[name].gas for name in sorted(self.experiment_data)]
