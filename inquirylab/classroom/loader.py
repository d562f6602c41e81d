"""
Lesson loader - Build a Script from an authored YAML lesson file.

A lesson file is a YAML list of step records (see inquirylab.schemas.steps).
A free-input step may name a classifier preset with a plain string instead of
spelling out the policy.
"""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import TypeAdapter

from inquirylab.schemas import StepRecord, get_classifier_preset

from .script import Script


logger = logging.getLogger(__name__)

DEFAULT_LESSON_PATH = Path(__file__).resolve().parent.parent / "lessons" / "yeast_respiration.yaml"

_STEPS_ADAPTER = TypeAdapter(list[StepRecord])


def _resolve_presets(records: list[dict[str, Any]]) -> list[dict[str, Any]]:
    resolved = []
    for record in records:
        classifier = record.get("classifier") if isinstance(record, dict) else None
        if isinstance(classifier, str):
            record = {**record, "classifier": get_classifier_preset(classifier)}
        resolved.append(record)
    return resolved


def parse_steps(records: list[dict[str, Any]]) -> Script:
    """
    Validate raw step records and build the script.

    Raises:
        pydantic.ValidationError: If a record is malformed
        ValueError: If step ids repeat or a classifier preset is unknown
    """
    steps = _STEPS_ADAPTER.validate_python(_resolve_presets(records))
    script = Script(steps)
    for ref in script.unresolved_references():
        logger.warning(
            f"Step '{ref.step_id}' jumps to unknown step '{ref.target_id}' ({ref.field}); "
            "the lesson will end there"
        )
    return script


def load_script(path: str | Path) -> Script:
    """
    Load a lesson script from a YAML file.

    Args:
        path: Path to the lesson file

    Returns:
        Script in authored order

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not a list of step records
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Lesson file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        records = yaml.safe_load(f)

    if isinstance(records, dict):
        records = records.get("steps")
    if not isinstance(records, list):
        raise ValueError(f"Lesson file must contain a list of steps: {path}")

    script = parse_steps(records)
    logger.info(f"Loaded {len(script)} steps from {path.name}")
    return script


def load_default_script() -> Script:
    """Load the packaged yeast respiration lesson."""
    return load_script(DEFAULT_LESSON_PATH)
