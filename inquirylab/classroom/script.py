"""
Script - The authored lesson as an ordered, id-addressed step graph.

Provides:
- Step lookup by position and by id
- Jump-target resolution (unknown ids resolve to None)
- Graph view: declared jumps, successors, unresolved references
"""

from dataclasses import dataclass
from typing import Iterator, Optional, Sequence

from inquirylab.schemas import StepBase


@dataclass(frozen=True)
class UnresolvedReference:
    """A jump whose target id is not in the script."""
    step_id: str
    field: str
    target_id: str


class Script:
    """
    Read-only lesson script.

    Steps keep their authored order (linear fall-through follows it) and are
    also indexed by id so jumps survive reordering of the content.
    """

    def __init__(self, steps: Sequence[StepBase]):
        """
        Build the script.

        Args:
            steps: Step records in authored order

        Raises:
            ValueError: If two steps share an id
        """
        self._steps: tuple[StepBase, ...] = tuple(steps)
        self._index: dict[str, int] = {}
        for idx, step in enumerate(self._steps):
            if step.id in self._index:
                raise ValueError(f"Duplicate step id: {step.id}")
            self._index[step.id] = idx

    def __len__(self) -> int:
        return len(self._steps)

    def __iter__(self) -> Iterator[StepBase]:
        return iter(self._steps)

    @property
    def length(self) -> int:
        return len(self._steps)

    @property
    def ids(self) -> list[str]:
        return [step.id for step in self._steps]

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def step_at(self, index: int) -> StepBase:
        """Step at an authored position (IndexError past the end)."""
        if index < 0:
            raise IndexError(f"Step index out of range: {index}")
        return self._steps[index]

    def index_of_id(self, step_id: Optional[str]) -> Optional[int]:
        """Position of the step with this id, or None if there is none."""
        if step_id is None:
            return None
        return self._index.get(step_id)

    def step_by_id(self, step_id: str) -> Optional[StepBase]:
        idx = self.index_of_id(step_id)
        return self._steps[idx] if idx is not None else None

    # -------------------------------------------------------------------------
    # Graph
    # -------------------------------------------------------------------------

    def successors(self, step_id: str) -> list[str]:
        """
        Ids that may run right after this step.

        Declared jumps first, then the linear fall-through (except for branch
        steps, which always jump). Unresolved targets are left out.
        """
        idx = self.index_of_id(step_id)
        if idx is None:
            return []
        step = self._steps[idx]

        result = []
        for _, target in step.references():
            if target in self._index and target not in result:
                result.append(target)

        if step.type != "branch" and idx + 1 < len(self._steps):
            next_id = self._steps[idx + 1].id
            if next_id not in result:
                result.append(next_id)
        return result

    def unresolved_references(self) -> list[UnresolvedReference]:
        """Every declared jump whose target id does not exist."""
        missing = []
        for step in self._steps:
            for field, target in step.references():
                if target not in self._index:
                    missing.append(UnresolvedReference(step.id, field, target))
        return missing

    def reachable_ids(self, start_id: Optional[str] = None) -> set[str]:
        """Ids reachable from the first step (or `start_id`)."""
        if not self._steps:
            return set()
        start = start_id or self._steps[0].id
        seen = set()
        frontier = [start]
        while frontier:
            current = frontier.pop()
            if current in seen or current not in self._index:
                continue
            seen.add(current)
            frontier.extend(self.successors(current))
        return seen

    def module_counts(self) -> dict[int, int]:
        """Number of steps authored for each module."""
        counts: dict[int, int] = {}
        for step in self._steps:
            counts[step.module] = counts.get(step.module, 0) + 1
        return counts
