"""Rich renderables for the live counter, session logs and verification."""

import logging
import threading
from typing import Optional, Sequence

from pubsub import pub
from rich.align import Align
from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..models.audio import AudioStats
from ..models.session import SessionLog
from ..models.transcription import DigitMappingPolicy
from ..models.ui import CounterSnapshot, SupervisorState
from ..models.verification import VerificationResult
from ..topics import COUNTER_STATE

logger = logging.getLogger(__name__)

_STATE_LABELS = {
    SupervisorState.IDLE: ("⏹️  IDLE", "bold yellow"),
    SupervisorState.STARTING: ("⏳ STARTING", "bold blue"),
    SupervisorState.LISTENING: ("🔴 LISTENING", "bold red"),
    SupervisorState.CYCLE_ENDING: ("🔄 RESTARTING CYCLE", "bold magenta"),
    SupervisorState.STOPPED: ("⏹️  STOPPED", "bold yellow"),
}


class CounterScreen:
    """Keeps the latest counter snapshot and renders it.

    Subscribes to the counter state topic; ``render`` always draws one
    consistent snapshot.
    """

    def __init__(self, topic: str = COUNTER_STATE):
        self.topic = topic
        self._lock = threading.Lock()
        self._snapshot = CounterSnapshot()
        pub.subscribe(self._on_state, topic)
        logger.debug(f"CounterScreen subscribed to {topic}")

    @property
    def snapshot(self) -> CounterSnapshot:
        with self._lock:
            return self._snapshot

    def _on_state(self, snapshot: CounterSnapshot) -> None:
        with self._lock:
            self._snapshot = snapshot

    def close(self) -> None:
        """Stop listening for state changes."""
        if pub.isSubscribed(self._on_state, self.topic):
            pub.unsubscribe(self._on_state, self.topic)

    def render(self,
               snapshot: Optional[CounterSnapshot] = None,
               audio_stats: Optional[AudioStats] = None) -> Panel:
        snapshot = snapshot or self.snapshot
        label, style = _STATE_LABELS[snapshot.state]
        mapping = "aggressive" if snapshot.policy is DigitMappingPolicy.AGGRESSIVE else "strict"

        header = Text.assemble((label, style), "   ", (snapshot.elapsed_text, "dim"))
        count = Text(str(snapshot.count), style="bold blue")
        transcript = Text(snapshot.transcript or "…", style="white")

        rows = [
            Align.center(header),
            Align.center(count),
            Panel(transcript, title="Transcript", border_style="dim"),
            Text(f"Word mapping: {mapping}", style="dim"),
        ]
        if audio_stats is not None:
            rows.append(render_audio_level(audio_stats))
        return Panel(Group(*rows), title="🎙️  DigiCount", border_style="blue")


def render_audio_level(stats: AudioStats) -> Text:
    """Microphone peak level as a 20-cell bar."""
    level = min(max(stats.peak_level, 0.0), 1.0)
    peak_bar = "█" * int(level * 20)
    return Text.assemble(
        ("Audio: ", "dim"),
        (f"[{peak_bar:<20}]", "green"),
        (f" {stats.peak_level:.3f}", "dim"),
    )


def render_sessions(logs: Sequence[SessionLog]) -> Table:
    """Table of session logs, oldest first."""
    table = Table(title="Session Log")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Summary")
    table.add_column("Transcript", overflow="fold")
    for log in logs:
        table.add_row(log.id[:8], log.summary, log.transcript)
    return table


def render_session_detail(log: SessionLog) -> Panel:
    """Full transcript of one session."""
    return Panel(Text(log.transcript or "(no digits)"), title=log.summary, subtitle=log.id)


def render_verification(result: VerificationResult) -> Table:
    """The five verification counts with labels."""
    table = Table(title="Results", show_header=False)
    table.add_column("Label")
    table.add_column("Count", justify="right")
    table.add_row("Expected", str(result.total_expected))
    table.add_row("✅ Correct", str(result.correct), style="green")
    table.add_row("❌ Wrong", str(result.wrong), style="red")
    table.add_row("🕳  Missing", str(result.missing), style="yellow")
    table.add_row("– Pauses", str(result.pause_markers), style="dim")
    return table
