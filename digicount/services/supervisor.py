"""Recognition-cycle supervisor: owns the session lifecycle.

State machine::

    IDLE -> STARTING -> LISTENING -> (CYCLE_ENDING -> LISTENING)* -> STOPPED

The supervisor holds the only references to the active recognition task and
the audio path. Every asynchronous callback it hands out is bound to a
session or cycle token; a callback whose token is no longer current is
dropped, which is how late results after ``stop`` and results from a
replaced cycle are ignored.
"""

import time
import logging
import threading
from datetime import datetime
from functools import partial
from typing import Callable, List, Optional

from pubsub import pub

from ..audio.base import AbstractAudioSource
from ..errors import RecognizerUnavailableError
from ..models.events import AudioEvent, SessionEvent
from ..models.session import SessionLog
from ..models.transcription import DigitMappingPolicy, TranscriptionUpdate
from ..models.ui import CounterSnapshot, SupervisorState
from ..topics import SESSION_LIFECYCLE
from ..transcription.base import AbstractRecognitionBackend, RecognitionTask
from ..transcription.normalizer import digits_from
from ..transcription.reconciler import SegmentReconciler
from ..transcription.transcript_builder import PauseAwareTranscriptBuilder, DEFAULT_PAUSE_THRESHOLD
from .counter_state import CounterState
from .permissions import AbstractPermissionProvider
from .session_log_store import SessionLogStore
from .session_timer import SessionTimer, DEFAULT_TICK_INTERVAL

logger = logging.getLogger(__name__)

_ACTIVE_STATES = (SupervisorState.LISTENING, SupervisorState.CYCLE_ENDING)


class RecognitionCycleSupervisor:
    """Runs counting sessions against an audio source and a recognizer."""

    def __init__(self,
                 audio_source: AbstractAudioSource,
                 backend: AbstractRecognitionBackend,
                 permissions: AbstractPermissionProvider,
                 log_store: SessionLogStore,
                 counter_state: Optional[CounterState] = None,
                 policy: DigitMappingPolicy = DigitMappingPolicy.AGGRESSIVE,
                 pause_threshold: float = DEFAULT_PAUSE_THRESHOLD,
                 timer_interval: float = DEFAULT_TICK_INTERVAL,
                 clock: Callable[[], float] = time.monotonic,
                 wall_clock: Callable[[], datetime] = datetime.now):
        """Initialize the supervisor.

        Args:
            audio_source: Audio capture collaborator
            backend: Recognition collaborator
            permissions: Speech and microphone authorization collaborator
            log_store: Receives a SessionLog for every stopped session
            counter_state: Observable state; created if not given
            policy: Initial word→digit mapping policy
            pause_threshold: Gap in seconds that produces a pause marker
            timer_interval: Elapsed-time refresh cadence in seconds
            clock: Monotonic clock for pause detection and the timer
            wall_clock: Clock for session start and end times
        """
        self.audio_source = audio_source
        self.backend = backend
        self.permissions = permissions
        self.log_store = log_store
        self.counter_state = counter_state or CounterState(policy=policy)
        self.clock = clock
        self.wall_clock = wall_clock

        self.reconciler = SegmentReconciler()
        self.builder = PauseAwareTranscriptBuilder(pause_threshold)
        self.timer = SessionTimer(interval=timer_interval, clock=clock)

        self._lock = threading.RLock()
        self._state = SupervisorState.IDLE
        self._policy = policy
        self._session_token = 0
        self._cycle_token = 0
        self._task: Optional[RecognitionTask] = None
        self._audio_running = False
        self._session_start: Optional[datetime] = None

        self.counter_state.update(policy=policy, state=self._state)
        logger.info("RecognitionCycleSupervisor initialized")

    # ------------------------------------------------------------------
    # Read-only views

    @property
    def state(self) -> SupervisorState:
        with self._lock:
            return self._state

    @property
    def is_recording(self) -> bool:
        with self._lock:
            return self._state in _ACTIVE_STATES

    @property
    def policy(self) -> DigitMappingPolicy:
        with self._lock:
            return self._policy

    @property
    def snapshot(self) -> CounterSnapshot:
        return self.counter_state.snapshot

    @property
    def sessions(self) -> List[SessionLog]:
        return self.log_store.logs

    # ------------------------------------------------------------------
    # Controls

    def start(self) -> None:
        """Start a new session, finalizing any session still running."""
        with self._lock:
            if self._state is SupervisorState.STARTING or self._state in _ACTIVE_STATES:
                self.stop()

            self._session_token += 1
            token = self._session_token
            self.reconciler.reset()
            self.builder.reset()
            self._session_start = self.wall_clock()
            self.timer.on_tick = partial(self._on_tick, token)
            self.timer.start()
            self._transition(SupervisorState.STARTING,
                             count=0, transcript="", elapsed_text="00:00", is_recording=False)
            logger.info(f"Session {token} starting")

        self.permissions.request_speech_access(partial(self._on_speech_access, token))

    def stop(self) -> Optional[SessionLog]:
        """Stop the active session and record its log.

        Safe to call at any time; does nothing when no session is running.

        Returns:
            The new SessionLog, or None if nothing was recording
        """
        with self._lock:
            if self._state is SupervisorState.STARTING:
                self._abort("stopped before listening began")
                return None
            if self._state not in _ACTIVE_STATES:
                return None

            self.timer.stop()
            self._session_token += 1
            self._teardown_recognition()

            log = SessionLog(
                start_time=self._session_start or self.wall_clock(),
                end_time=self.wall_clock(),
                total_digits=self.builder.count,
                transcript=self.builder.transcript,
            )
            self._session_start = None
            self._transition(SupervisorState.STOPPED, is_recording=False)
            self._publish("stopped", session_id=log.id, total_digits=log.total_digits)
            logger.info(f"Session stopped: {log.summary}")
            self.log_store.add(log)
            return log

    def reset_counter(self) -> None:
        """Stop any session and zero the counter, keeping the session logs."""
        with self._lock:
            self.stop()
            self.reconciler.reset()
            self.builder.reset()
            self.timer.reset()
            self.counter_state.update(count=0, transcript="", elapsed_text="00:00")
            logger.info("Counter reset")

    def clear_all(self) -> None:
        """Stop any session, zero the counter and delete every session log."""
        with self._lock:
            self.reset_counter()
            self.log_store.clear()

    def delete_session(self, log_id: str) -> bool:
        return self.log_store.delete(log_id)

    def set_policy(self, policy: DigitMappingPolicy) -> None:
        """Switch the mapping policy; applies to segments reconciled from now on."""
        with self._lock:
            self._policy = policy
            self.counter_state.update(policy=policy)
            logger.info(f"Mapping policy set to {policy.value}")

    # ------------------------------------------------------------------
    # Permission flow

    def _on_speech_access(self, token: int, granted: bool) -> None:
        with self._lock:
            if not self._is_starting(token):
                return
            if not granted:
                self._abort("speech recognition permission denied")
                return
        self.permissions.request_microphone_access(partial(self._on_microphone_access, token))

    def _on_microphone_access(self, token: int, granted: bool) -> None:
        with self._lock:
            if not self._is_starting(token):
                return
            if not granted:
                self._abort("microphone permission denied")
                return

            try:
                self._setup_audio()
            except OSError as e:
                logger.error(f"Audio setup failed: {e}")
                self._abort("audio setup failed")
                return
            if not self._start_cycle():
                self._abort("speech recognizer unavailable")
                return
            self._publish("started")

    def _is_starting(self, token: int) -> bool:
        if token != self._session_token or self._state is not SupervisorState.STARTING:
            logger.debug(f"Ignoring permission answer for stale session {token}")
            return False
        return True

    # ------------------------------------------------------------------
    # Recognition cycles

    def _setup_audio(self) -> None:
        self.audio_source.install_tap(self._on_audio)
        self._audio_running = True
        self.audio_source.start()

    def _start_cycle(self) -> bool:
        """Begin a recognition cycle on the current audio path."""
        if not self.backend.is_available():
            logger.error("Speech recognizer is not available")
            return False

        self.reconciler.reset()
        self._cycle_token += 1
        cycle = self._cycle_token
        try:
            self._task = self.backend.start_task(
                on_update=partial(self._on_update, cycle),
                on_error=partial(self._on_error, cycle),
            )
        except RecognizerUnavailableError as e:
            logger.error(f"Could not start recognition cycle: {e}")
            self._task = None
            return False

        self._transition(SupervisorState.LISTENING, is_recording=True)
        logger.debug(f"Recognition cycle {cycle} listening")
        return True

    def _restart_cycle(self, reason: str) -> None:
        self._transition(SupervisorState.CYCLE_ENDING)
        logger.info(f"Restarting recognition cycle: {reason}")
        old_task = self._task
        self._task = None
        if old_task is not None:
            old_task.cancel()

        if self._start_cycle():
            self._publish("cycle_restarted", reason=reason)
        else:
            # The session already holds counted digits; keep them.
            self.stop()

    def _on_audio(self, event: AudioEvent) -> None:
        task = self._task
        if task is not None:
            task.append_audio(event)

    def _on_update(self, cycle: int, update: TranscriptionUpdate) -> None:
        with self._lock:
            if cycle != self._cycle_token or self._state not in _ACTIVE_STATES:
                logger.debug(f"Ignoring update from inactive cycle {cycle}")
                return

            digits: List[str] = []
            for segment in self.reconciler.reconcile(update.segments):
                digits.extend(digits_from(segment.text.lower(), self._policy))

            if digits:
                self.builder.append_digits(digits, self.clock())
                self.counter_state.update(count=self.builder.count, transcript=self.builder.transcript)
                logger.debug(f"Counted {len(digits)} digits, total {self.builder.count}")

            if update.is_final:
                self._restart_cycle("final result")

    def _on_error(self, cycle: int, error: Exception) -> None:
        with self._lock:
            if cycle != self._cycle_token or self._state not in _ACTIVE_STATES:
                logger.debug(f"Ignoring error from inactive cycle {cycle}: {error}")
                return
            logger.warning(f"Recognition error, recovering: {error}")
            self._restart_cycle(f"error: {error}")

    def _on_tick(self, token: int, elapsed_text: str) -> None:
        # A tick racing with stop() is simply skipped
        if not self._lock.acquire(blocking=False):
            return
        try:
            if token != self._session_token:
                return
            if self._state is SupervisorState.STARTING or self._state in _ACTIVE_STATES:
                self.counter_state.update(elapsed_text=elapsed_text)
        finally:
            self._lock.release()

    # ------------------------------------------------------------------
    # Teardown

    def _teardown_recognition(self) -> None:
        self._cycle_token += 1
        task = self._task
        self._task = None
        if task is not None:
            task.end_audio()
            task.cancel()
        if self._audio_running:
            self.audio_source.stop()
            self.audio_source.remove_tap()
            self._audio_running = False

    def _abort(self, reason: str) -> None:
        """End a session that never produced a log."""
        logger.warning(f"Session aborted: {reason}")
        self.timer.stop()
        self._session_token += 1
        self._teardown_recognition()
        self._session_start = None
        self._transition(SupervisorState.STOPPED, is_recording=False)
        self._publish("aborted", reason=reason)

    def _transition(self, new_state: SupervisorState, **changes) -> None:
        if new_state is not self._state:
            logger.debug(f"Supervisor {self._state.value} -> {new_state.value}")
        self._state = new_state
        self.counter_state.update(state=new_state, **changes)

    def _publish(self, event_type: str, **metadata) -> None:
        pub.sendMessage(SESSION_LIFECYCLE, event=SessionEvent(event_type=event_type, metadata=metadata))
