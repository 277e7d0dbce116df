"""Main application entry point for DigiCount."""

import sys
import time
import argparse
import logging
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.live import Live

from .config import DigiCountConfig
from .errors import DigiCountError
from .models.transcription import DigitMappingPolicy
from .models.ui import SupervisorState
from .services.reference_digits import ReferenceDigits
from .services.session_log_store import SessionLogStore
from .services.verification import VerificationScorer
from .storage.key_value_store import JsonKeyValueStore
from .storage.log_storage import LogStorage
from .ui.counter_screen import CounterScreen, render_sessions, render_session_detail, render_verification

logger = logging.getLogger(__name__)

EXIT_INVALID_INPUT = 2


def build_log_store(config: DigiCountConfig) -> SessionLogStore:
    """Create the session log store over the configured data directory."""
    store_path = Path(config.get_data_directory()) / "store.json"
    log_store = SessionLogStore(LogStorage(JsonKeyValueStore(str(store_path))))
    log_store.load()
    return log_store


class Server:
    """Wires the live counting session to the microphone and recognizer."""

    def __init__(self, config: DigiCountConfig, console: Console):
        self.config = config
        self.console = console
        self.should_exit = False

    def init(self, policy: Optional[DigitMappingPolicy] = None):
        # Hardware and cloud adapters are only needed for live counting
        from .audio.capture import AudioCapture
        from .services.permissions import LocalPermissionProvider
        from .services.supervisor import RecognitionCycleSupervisor
        from .transcription.google_backend import GoogleStreamingBackend

        logger.info("Initializing services...")
        sample_rate = self.config.get('audio.sample_rate', 16000)
        chunk_size = self.config.get('audio.chunk_size', 1024)
        channels = self.config.get('audio.channels', 1)
        logger.info(f"Audio settings: {sample_rate}Hz, {chunk_size} samples/chunk, {channels} channels")

        credentials_path = self.config.get_google_credentials_path()
        self.backend = GoogleStreamingBackend(
            credentials_path=credentials_path,
            sample_rate=sample_rate,
            language=self.config.get('google_cloud.language', 'en-US'),
        )
        self.log_store = build_log_store(self.config)
        self.screen = CounterScreen()
        self.audio_capture = AudioCapture(sample_rate=sample_rate, chunk_size=chunk_size, channels=channels)
        self.supervisor = RecognitionCycleSupervisor(
            audio_source=self.audio_capture,
            backend=self.backend,
            permissions=LocalPermissionProvider(credentials_path),
            log_store=self.log_store,
            policy=policy or self.config.get_mapping_policy(),
            pause_threshold=self.config.get_pause_threshold(),
            timer_interval=float(self.config.get('counting.timer_interval_seconds', 0.25)),
        )

    def run(self, duration: Optional[int]):
        refresh = float(self.config.get('counting.timer_interval_seconds', 0.25))
        deadline = time.monotonic() + duration if duration is not None else None
        try:
            self.supervisor.start()
            with Live(self._render(), console=self.console, refresh_per_second=8) as live:
                while not self.should_exit:
                    live.update(self._render())
                    if deadline is not None and time.monotonic() >= deadline:
                        break
                    if self.supervisor.state is SupervisorState.STOPPED:
                        break
                    time.sleep(refresh)
        finally:
            self.cleanup()

    def _render(self):
        return self.screen.render(audio_stats=self.audio_capture.get_recording_stats())

    def cleanup(self):
        log = self.supervisor.stop()
        self.screen.close()
        self.backend.cleanup()
        if log is not None:
            self.console.print(f"📝 {log.summary}")
            if log.transcript:
                self.console.print(log.transcript)


def setup_logging(config: DigiCountConfig, level: str = "INFO") -> None:
    """Set up logging configuration from YAML config."""
    log_file_path = config.get('logging.file_path', 'data/logs/digicount.log')
    console_output = config.get('logging.console_output', True)

    log_dir = Path(log_file_path).parent
    log_dir.mkdir(parents=True, exist_ok=True)

    handlers = []

    # File handler - always write to file
    file_handler = logging.FileHandler(log_file_path)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
    ))
    handlers.append(file_handler)

    # Console handler - only if enabled in config
    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
        handlers.append(console_handler)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level.upper()))
    for handler in handlers:
        root_logger.addHandler(handler)

    logger.info("=" * 50)
    logger.info("DigiCount starting up")
    logger.info(f"Log file: {log_file_path}")
    logger.info(f"Log level set to: {level}")
    logger.info("=" * 50)


def positive_int(value: str) -> int:
    """argparse type for counts and durations that must be at least 1."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"'{value}' is not an integer")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {number}")
    return number


def run_count(args, config: DigiCountConfig, console: Console) -> int:
    policy = DigitMappingPolicy.STRICT if args.strict else None
    server = Server(config, console)
    server.init(policy)
    try:
        server.run(args.duration)
    except KeyboardInterrupt:
        server.should_exit = True
        console.print("\n👋 Goodbye!")
    return 0


def run_verify(args, config: DigiCountConfig, console: Console) -> int:
    if args.transcript:
        candidate = Path(args.transcript).read_text(encoding='utf-8')
    else:
        candidate = sys.stdin.read()

    scorer = VerificationScorer(ReferenceDigits.from_config(config))
    result = scorer.verify(args.expected, candidate)
    if result is None:
        console.print(f"❌ '{args.expected}' is not a positive digit count", style="red")
        return EXIT_INVALID_INPUT

    console.print(render_verification(result))
    return 0


def run_logs(args, config: DigiCountConfig, console: Console) -> int:
    log_store = build_log_store(config)

    if args.action == "list":
        console.print(render_sessions(log_store.logs))
        return 0

    if args.action == "clear":
        log_store.clear()
        console.print("🗑️  All session logs cleared")
        return 0

    if not args.session_id:
        console.print(f"❌ 'logs {args.action}' needs a session id", style="red")
        return EXIT_INVALID_INPUT

    matches = [log for log in log_store.logs if log.id.startswith(args.session_id)]
    if len(matches) != 1:
        console.print(f"❌ No unique session matches '{args.session_id}'", style="red")
        return EXIT_INVALID_INPUT

    if args.action == "show":
        console.print(render_session_detail(matches[0]))
    else:
        log_store.delete(matches[0].id)
        console.print(f"🗑️  Deleted {matches[0].summary}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="digicount",
        description="DigiCount - count spoken digits and verify recited transcripts",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Path to configuration YAML file (default: built-in settings)"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set logging level (default: from config, else INFO)"
    )
    parser.add_argument(
        "--version",
        action="version",
        version="DigiCount v0.1.0"
    )
    commands = parser.add_subparsers(dest="command", required=True)

    count = commands.add_parser("count", help="Count spoken digits from the microphone")
    count.add_argument("--strict", action="store_true",
                       help="Map only zero..nine, not homophones like 'oh' or 'tree'")
    count.add_argument("--duration", type=positive_int,
                       help="Stop automatically after this many seconds")

    verify = commands.add_parser("verify", help="Score a transcript against the reference digits")
    verify.add_argument("--expected", required=True,
                        help="How many digits the transcript should contain")
    verify.add_argument("--transcript", type=str,
                        help="File holding the transcript (default: read stdin)")

    logs = commands.add_parser("logs", help="Manage the session log")
    logs.add_argument("action", choices=["list", "show", "delete", "clear"])
    logs.add_argument("session_id", nargs="?", help="Session id or unique id prefix")

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for DigiCount."""
    args = build_parser().parse_args(argv)
    console = Console()

    try:
        config = DigiCountConfig(args.config)
        setup_logging(config, args.log_level or config.get('logging.level', 'INFO'))

        handlers = {"count": run_count, "verify": run_verify, "logs": run_logs}
        exit_code = handlers[args.command](args, config, console)
    except (DigiCountError, OSError) as e:
        console.print(f"❌ Error: {e}", style="red")
        logging.error(f"Application error: {e}")
        sys.exit(1)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
