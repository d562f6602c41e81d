#!/usr/bin/env python3
"""
play_lesson.py - Play a lesson in the terminal.

Prints the tutor's messages, waits through auto-advance delays and reads
answers from stdin: choices by letter (A/B/C) or number, free text as typed.

Usage:
  python scripts/play_lesson.py
  python scripts/play_lesson.py --fast
  python scripts/play_lesson.py --lesson my_lesson.yaml --time-scale 0.5
"""

import argparse
import logging
import sys
import time
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from inquirylab.classroom import Interpreter, LearnerState, Scheduler, load_script
from inquirylab.config import settings
from inquirylab.schemas import CourseSummary, InterpreterStatus
from inquirylab.utils import normalize_learner_text, parse_choice_reply
from inquirylab.viewer import (
    TranscriptEntry,
    TranscriptPresentation,
    format_plain,
    render_choices_plain,
    typing_delay,
)

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

PREFIXES = {
    "ai": "🤖 ",
    "user": "👤 ",
    "system": "",
}


# -----------------------------------------------------------------------------
# Output
# -----------------------------------------------------------------------------

def make_printer(simulate_typing: bool):
    """Transcript callback printing each entry (after a composing pause)."""
    def print_entry(entry: TranscriptEntry):
        if entry.role == "user":
            # Already visible where the learner typed it
            return
        if simulate_typing and entry.role == "ai":
            time.sleep(typing_delay(entry.content))
        print()
        print(PREFIXES.get(entry.role, "") + format_plain(entry.content))
    return print_entry


def print_summary(summary: CourseSummary):
    print()
    print("=" * 50)
    print("🔬 探究总结")
    print("=" * 50)
    for item in summary.items:
        print(f"• {item}")
    if summary.experiment_data:
        gas = " / ".join(f"{group.temp}°C: {group.gas}ml" for group in summary.experiment_data.values())
        print(f"• 实验数据：{gas}")


# -----------------------------------------------------------------------------
# Main
# -----------------------------------------------------------------------------

def play(interpreter: Interpreter, presentation: TranscriptPresentation, scheduler: Scheduler, sleep):
    interpreter.start()
    while True:
        scheduler.run_until_idle(sleep=sleep)
        status = interpreter.status

        if status == InterpreterStatus.FINISHED:
            return

        if status == InterpreterStatus.AWAITING_CHOICE:
            print(render_choices_plain(presentation.choices))
            option = parse_choice_reply(input("> "), presentation.choices)
            if option is None:
                print("请输入选项的字母或编号。")
                continue
            interpreter.submit_choice(option)

        elif status == InterpreterStatus.AWAITING_TEXT:
            text = normalize_learner_text(input("> "))
            if text is None:
                print("请先输入你的回答。")
                continue
            interpreter.submit_text(text)

        elif interpreter.awaiting_advance:
            input("（按回车继续）")
            interpreter.advance()

        else:
            logger.error(f"Interpreter stalled in state {status.value}")
            return


def main():
    parser = argparse.ArgumentParser(
        description="Play a guided inquiry lesson in the terminal",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        "--lesson",
        type=Path,
        default=settings.LESSON_PATH,
        help="Path to lesson YAML (default: INQUIRYLAB_LESSON_PATH or packaged lesson)"
    )
    parser.add_argument(
        "--time-scale",
        type=float,
        default=settings.TIME_SCALE,
        help="Multiplier for auto-advance delays (default: INQUIRYLAB_TIME_SCALE or 1.0)"
    )
    parser.add_argument(
        "--fast",
        action="store_true",
        help="No delays at all (same as --time-scale 0)"
    )

    args = parser.parse_args()
    time_scale = 0.0 if args.fast else args.time_scale
    if time_scale < 0:
        parser.error("--time-scale must be >= 0")

    script = load_script(args.lesson)

    state = LearnerState()
    presentation = TranscriptPresentation(state, on_entry=make_printer(simulate_typing=time_scale > 0))
    scheduler = Scheduler()
    interpreter = Interpreter(script, state, presentation, scheduler, time_scale=time_scale)

    try:
        play(interpreter, presentation, scheduler, sleep=time.sleep if time_scale > 0 else None)
    except (EOFError, KeyboardInterrupt):
        print()
        logger.info("Session ended before the lesson finished")
        interpreter.reset()
        return

    if presentation.summary is not None:
        print_summary(presentation.summary)


if __name__ == "__main__":
    main()
