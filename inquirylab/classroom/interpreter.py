"""
Interpreter - Plays a lesson script to one learner.

Provides:
- The step state machine (idle, running, awaiting a choice or text, finished)
- Typed resumption methods for the host (advance, submit_choice, submit_text)
- Cancellable auto-advance through a scheduler
- Branch evaluation and id-based jumps
- The end-of-course summary

Authoring mistakes and host mistakes never raise out of the interpreter:
unresolved jumps end the lesson, calls in the wrong state are rejected
(return False) and collaborator failures are logged.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from inquirylab.schemas import (
    ActionStep,
    BranchStep,
    ChoiceOption,
    ChoiceStep,
    ClassificationResult,
    CourseSummary,
    FreeInputStep,
    InterpreterStatus,
    MessageStep,
    PresentationStep,
    RevealStep,
    StepBase,
)

from .presentation import Presentation
from .scheduler import CancellableTask, Scheduler, SchedulerLike
from .script import Script
from .state import LearnerState, Listener
from .summary import build_course_summary


logger = logging.getLogger(__name__)


@dataclass
class ExecutionCursor:
    """Position in the script plus the outstanding auto-advance, if any."""
    current_index: int = 0
    pending_resume: Optional[CancellableTask] = None


class Interpreter:
    """
    Step runner for a single lesson session.

    One instance owns one LearnerState. Only one resumption method may be
    called at a time, and only while the interpreter waits for it.
    """

    def __init__(
        self,
        script: Script,
        state: Optional[LearnerState],
        presentation: Presentation,
        scheduler: Optional[SchedulerLike] = None,
        *,
        time_scale: float = 1.0,
        summary_builder: Callable[[LearnerState], CourseSummary] = build_course_summary,
    ):
        """
        Initialize interpreter.

        Args:
            script: Lesson script to play
            state: Learner state (None creates a fresh LearnerState)
            presentation: Rendering collaborator
            scheduler: Source of delayed callbacks (default: Scheduler())
            time_scale: Multiplier for every auto-advance delay (0 = no wait)
            summary_builder: Builds the end-of-course summary from the state
        """
        if time_scale < 0:
            raise ValueError(f"time_scale must be >= 0, got {time_scale}")
        self.script = script
        self.state = state if state is not None else LearnerState()
        self.presentation = presentation
        self.scheduler = scheduler if scheduler is not None else Scheduler()
        self.time_scale = time_scale
        self.summary_builder = summary_builder

        self.cursor = ExecutionCursor()
        self._status = InterpreterStatus.IDLE
        self._awaiting_advance = False
        self._completion_reported = False
        # Bumped on reset so a timer that slipped past cancel() is ignored
        self._generation = 0

    # -------------------------------------------------------------------------
    # Read-only view
    # -------------------------------------------------------------------------

    @property
    def status(self) -> InterpreterStatus:
        return self._status

    @property
    def current_index(self) -> int:
        return self.cursor.current_index

    @property
    def current_step(self) -> Optional[StepBase]:
        """Step under the cursor; None before start and after the end."""
        if self._status in (InterpreterStatus.IDLE, InterpreterStatus.FINISHED):
            return None
        if 0 <= self.cursor.current_index < len(self.script):
            return self.script.step_at(self.cursor.current_index)
        return None

    @property
    def pending_resume(self) -> Optional[CancellableTask]:
        return self.cursor.pending_resume

    @property
    def awaiting_advance(self) -> bool:
        """True while a non-auto-advancing message or action waits for advance()."""
        return self._awaiting_advance

    def subscribe_to_state(self, listener: Listener) -> Callable[[], None]:
        """Subscribe to LearnerState changes; returns the unsubscribe function."""
        return self.state.subscribe(listener)

    # -------------------------------------------------------------------------
    # Host controls
    # -------------------------------------------------------------------------

    def start(self) -> bool:
        """
        Begin the lesson at the first step.

        Returns:
            False if the lesson already started (use reset() or restart())
        """
        if self._status != InterpreterStatus.IDLE:
            logger.warning(f"start() ignored: interpreter is {self._status.value}; reset first")
            return False
        logger.info(f"Starting lesson ({len(self.script)} steps)")
        self._status = InterpreterStatus.RUNNING
        self._run_from(0)
        return True

    def advance(self) -> bool:
        """
        Move past a message or action step that does not auto-advance.

        Returns:
            False if no such step is waiting
        """
        if self._status != InterpreterStatus.RUNNING or not self._awaiting_advance:
            logger.warning(f"advance() ignored: interpreter is {self._status.value}")
            return False
        self._awaiting_advance = False
        self._run_from(self.cursor.current_index + 1)
        return True

    def submit_choice(self, option: Any) -> bool:
        """
        Answer the current choice step.

        Args:
            option: The ChoiceOption clicked, or the value of one of the step's options

        Returns:
            False if no choice is awaited or the option is not offered by this step
        """
        if self._status != InterpreterStatus.AWAITING_CHOICE:
            logger.warning(f"submit_choice() ignored: interpreter is {self._status.value}")
            return False
        index = self.cursor.current_index
        step = self.script.step_at(index)

        if isinstance(option, ChoiceOption):
            # Stale buttons from an earlier step carry options this step never offered
            matched = option if option in step.options else None
        else:
            matched = step.option_for(option)
        if matched is None:
            logger.warning(f"submit_choice() ignored: no option {option!r} on '{step.id}'")
            return False
        option = matched

        self._status = InterpreterStatus.RUNNING
        self._present("render_user_echo", option.label)
        if step.state_key:
            self.state.set(step.state_key, option.value)

        target = None
        if step.has_correct_value:
            correct = option.value == step.correct_value
            self.state.set("lastAnswerCorrect", correct)
            target = step.on_correct_step_id if correct else step.on_incorrect_step_id
            logger.debug(f"Choice '{step.id}': {option.value!r} -> {'correct' if correct else 'incorrect'}")

        self._jump_or_next(index, target)
        return True

    def submit_text(self, text: str) -> bool:
        """
        Answer the current free-input step.

        Args:
            text: The learner's answer, stored verbatim

        Returns:
            False if no text is awaited or the text is blank
        """
        if self._status != InterpreterStatus.AWAITING_TEXT:
            logger.warning(f"submit_text() ignored: interpreter is {self._status.value}")
            return False
        if not isinstance(text, str) or not text.strip():
            logger.warning("submit_text() ignored: blank answer")
            return False
        index = self.cursor.current_index
        step = self.script.step_at(index)

        self._status = InterpreterStatus.RUNNING
        self.state.set("waitingForInput", False)
        self._present("render_user_echo", text)
        if step.state_key:
            self.state.set(step.state_key, text)

        target = None
        if step.classifier is not None:
            result = self._classify(step, text)
            self.state.set("lastAnalysis", result.as_dict())
            if result.understood:
                target = step.on_understood_step_id
            else:
                target = step.on_not_understood_step_id
            logger.debug(f"Free input '{step.id}': understood={result.understood}")

        self._jump_or_next(index, target)
        return True

    def reset(self):
        """
        Cancel any pending auto-advance, restore the defaults and rewind.

        Safe to call in any state; calling it twice is the same as once.
        """
        self._cancel_pending()
        self._generation += 1
        self.state.reset()
        self.cursor = ExecutionCursor()
        self._status = InterpreterStatus.IDLE
        self._awaiting_advance = False
        self._completion_reported = False

    def restart(self) -> bool:
        """reset() followed by start()."""
        self.reset()
        return self.start()

    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------

    def _run_from(self, index: int):
        """Execute steps from `index`, collapsing branch chains, until one suspends."""
        hops = 0
        while True:
            if index >= len(self.script):
                self._finish()
                return
            step = self.script.step_at(index)
            self._mark_position(index, step)

            if not isinstance(step, BranchStep):
                self._execute(step)
                return

            hops += 1
            if hops > len(self.script):
                logger.warning(f"Branch cycle detected at '{step.id}'; ending lesson")
                self._finish()
                return
            target_id = step.on_true_step_id if self._evaluate(step) else step.on_false_step_id
            target = self.script.index_of_id(target_id)
            if target is None:
                logger.warning(f"Unresolved jump target '{target_id}' from '{step.id}'; ending lesson")
                self._finish()
                return
            index = target

    def _mark_position(self, index: int, step: StepBase):
        self.cursor.current_index = index
        logger.debug(f"Step {index} '{step.id}' ({step.type})")
        self.state.bulk_update({"currentStep": index, "currentModule": step.module})
        self._present("report_progress", step.module)

    def _execute(self, step: StepBase):
        if isinstance(step, ChoiceStep):
            # Status first: the collaborator may answer before returning
            self._status = InterpreterStatus.AWAITING_CHOICE
            self._present("render_message", step.prompt_text)
            self._present("render_choices", list(step.options))
        elif isinstance(step, FreeInputStep):
            self._status = InterpreterStatus.AWAITING_TEXT
            self.state.set("waitingForInput", True)
            self._present("render_message", step.prompt_text)
        elif isinstance(step, MessageStep):
            self._status = InterpreterStatus.RUNNING
            self._present("render_message", step.content)
            self._after_presentation(step)
        elif isinstance(step, ActionStep):
            self._status = InterpreterStatus.RUNNING
            self._present("run_presentation_action", step.action_name, dict(step.params))
            self._after_presentation(step)
        elif isinstance(step, RevealStep):
            self._status = InterpreterStatus.RUNNING
            self._present("reveal_auxiliary_panel")
            self._after_presentation(step)
        else:
            logger.warning(f"Unknown step type '{step.type}' at '{step.id}'; skipping")
            self._run_from(self.cursor.current_index + 1)

    def _after_presentation(self, step: PresentationStep):
        # The collaborator may have reset or moved the lesson while presenting
        if self._status != InterpreterStatus.RUNNING or self.script.step_at(self.cursor.current_index) is not step:
            return
        if step.auto_advance:
            self._schedule_next(step.delay)
        else:
            self._awaiting_advance = True

    def _schedule_next(self, delay: float):
        index = self.cursor.current_index
        generation = self._generation

        def resume():
            if generation != self._generation or self.cursor.current_index != index:
                return
            self.cursor.pending_resume = None
            self._run_from(index + 1)

        self._cancel_pending()
        self.cursor.pending_resume = self.scheduler.call_later(delay * self.time_scale, resume)

    def _jump_or_next(self, index: int, target_id: Optional[str]):
        """Jump to target_id when given, otherwise fall through to the next step."""
        if target_id is None:
            self._run_from(index + 1)
            return
        target = self.script.index_of_id(target_id)
        if target is None:
            step = self.script.step_at(index)
            logger.warning(f"Unresolved jump target '{target_id}' from '{step.id}'; ending lesson")
            self._finish()
            return
        self._run_from(target)

    def _finish(self):
        self._cancel_pending()
        self.cursor.current_index = len(self.script)
        self._status = InterpreterStatus.FINISHED
        self._awaiting_advance = False
        if self._completion_reported:
            return
        self._completion_reported = True
        logger.info("Lesson finished")
        try:
            summary = self.summary_builder(self.state)
        except Exception:
            logger.exception("Failed to build course summary")
            return
        self._present("report_course_complete", summary)

    def _cancel_pending(self):
        if self.cursor.pending_resume is not None:
            self.cursor.pending_resume.cancel()
            self.cursor.pending_resume = None

    # -------------------------------------------------------------------------
    # Step helpers
    # -------------------------------------------------------------------------

    def _evaluate(self, step: BranchStep) -> bool:
        try:
            return bool(step.predicate(self.state))
        except Exception:
            logger.exception(f"Branch predicate failed at '{step.id}'; taking the false branch")
            return False

    def _classify(self, step: FreeInputStep, text: str) -> ClassificationResult:
        try:
            result = step.classifier(text)
        except Exception:
            logger.exception(f"Classifier failed at '{step.id}'; treating answer as not understood")
            return ClassificationResult(understood=False)
        if isinstance(result, ClassificationResult):
            return result
        if isinstance(result, Mapping):
            fields = dict(result)
            fields["understood"] = bool(fields.get("understood", False))
            return ClassificationResult(**fields)
        return ClassificationResult(understood=bool(result))

    def _present(self, method_name: str, *args):
        """Call the collaborator; a failure is logged and the lesson goes on."""
        try:
            getattr(self.presentation, method_name)(*args)
        except Exception:
            logger.exception(f"Presentation call {method_name} failed")
