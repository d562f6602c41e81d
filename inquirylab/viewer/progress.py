"""
Progress display helpers for the four lesson phases.
"""

from enum import Enum


MODULE_LABELS = ["问题聚焦", "实验探究", "得出结论", "迁移应用"]


class PhaseStatus(str, Enum):
    COMPLETED = "completed"
    ACTIVE = "active"
    PENDING = "pending"


def progress_percent(module: int) -> float:
    """Progress bar fill for the current module (half a phase in, capped at 100)."""
    return min(((module - 1) / len(MODULE_LABELS)) * 100 + 12.5, 100.0)


def module_label_states(module: int) -> list[tuple[str, PhaseStatus]]:
    """Each phase label with its status relative to the current module."""
    states = []
    for index, label in enumerate(MODULE_LABELS):
        label_module = index + 1
        if label_module < module:
            status = PhaseStatus.COMPLETED
        elif label_module == module:
            status = PhaseStatus.ACTIVE
        else:
            status = PhaseStatus.PENDING
        states.append((label, status))
    return states
