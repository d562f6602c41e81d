#!/usr/bin/env python3
"""
check_lesson.py - Validate a lesson file before it is played.

Reports malformed records, duplicate step ids, jumps to unknown steps,
steps no path can reach, and per-module step counts. Exits with status 1
when a problem is found.

Usage:
  python scripts/check_lesson.py
  python scripts/check_lesson.py --lesson my_lesson.yaml
"""

import argparse
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from pydantic import ValidationError

from inquirylab.classroom import Script, load_script
from inquirylab.config import settings
from inquirylab.viewer import MODULE_LABELS

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def find_issues(script: Script) -> list[str]:
    """Problems that would make part of the lesson unplayable."""
    issues = [
        f"{ref.step_id}.{ref.field} -> unknown step '{ref.target_id}'"
        for ref in script.unresolved_references()
    ]
    reachable = script.reachable_ids()
    for step_id in script.ids:
        if step_id not in reachable:
            issues.append(f"{step_id} can never be reached")
    return issues


def main():
    parser = argparse.ArgumentParser(
        description="Validate a guided inquiry lesson file",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        "--lesson",
        type=Path,
        default=settings.LESSON_PATH,
        help="Path to lesson YAML (default: INQUIRYLAB_LESSON_PATH or packaged lesson)"
    )

    args = parser.parse_args()

    logger.info(f"Checking {args.lesson}...")
    try:
        script = load_script(args.lesson)
    except FileNotFoundError as e:
        logger.error(str(e))
        sys.exit(1)
    except ValidationError as e:
        logger.error(f"Malformed step records:\n{e}")
        sys.exit(1)
    except ValueError as e:
        # duplicate ids, unknown classifier presets
        logger.error(str(e))
        sys.exit(1)

    for module, count in sorted(script.module_counts().items()):
        label = MODULE_LABELS[module - 1] if module <= len(MODULE_LABELS) else ""
        logger.info(f"  Module {module} {label}: {count} steps")

    issues = find_issues(script)
    if issues:
        logger.warning(f"Found {len(issues)} issues:")
        for issue in issues:
            logger.warning(f"  - {issue}")
        sys.exit(1)

    logger.info(f"  All {len(script)} steps OK")


if __name__ == "__main__":
    main()
