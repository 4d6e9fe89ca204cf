"""Finvoice entry point.

Usage:
    python -m finvoice [OPTIONS]

Options:
    --config PATH      Path to YAML config file
    --profile NAME     Profile name (dev, prod, test)
    --language LANG    Reply and recognition language (es, en)
    --log-level LEVEL  Override the configured log level
    --once TEXT        Process a single utterance and exit
    --voice            Capture one spoken session instead of reading text
    --help             Show this help message
    --version          Show version
"""

import argparse
import logging
import sys
import threading
import time
from pathlib import Path
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from . import __version__
from .config.loader import load_config
from .config.profiles import detect_profile
from .errors import ConfigError

if TYPE_CHECKING:
    from .config import FinvoiceConfig
    from .router.orchestrator import InteractionResult, Orchestrator

EXIT_WORDS = {"exit", "quit", "salir"}


def setup_logging(level: str) -> None:
    """Configure logging based on config."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="finvoice",
        description="Finvoice - bilingual voice/text command pipeline for personal finances",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m finvoice                              # Text REPL with auto-detected profile
  python -m finvoice --language en                # Replies in English
  python -m finvoice --once "cuánto gasté este mes"
  python -m finvoice --profile prod --voice       # One spoken session

Environment:
  FINVOICE_PROFILE    Set profile (dev, prod, test)
""",
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to YAML config file",
        metavar="PATH",
    )

    parser.add_argument(
        "--profile",
        choices=["dev", "prod", "test"],
        help="Configuration profile to use",
    )

    parser.add_argument(
        "--language",
        choices=["es", "en"],
        help="Language for replies and recognition",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override the configured log level",
    )

    parser.add_argument(
        "--once",
        metavar="TEXT",
        help="Process a single utterance and exit",
    )

    parser.add_argument(
        "--voice",
        action="store_true",
        help="Capture one spoken session with the configured engines",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Finvoice v{__version__}",
    )

    return parser.parse_args(argv)


def print_result(orchestrator: "Orchestrator", result: "InteractionResult") -> None:
    """Print the reply (unless the speech engine already printed it) and suggestions."""
    from .tts import ConsoleSpeechEngine

    speech = orchestrator.speech
    if speech is None or not isinstance(speech.engine, ConsoleSpeechEngine):
        print(f"🤖 {result.response}")

    if result.awaiting_confirmation:
        return
    labels = " | ".join(s.text for s in orchestrator.suggestions())
    if labels:
        print(f"   💡 {labels}")


def wait_for_speech(orchestrator: "Orchestrator", timeout: float = 120.0) -> None:
    """Block until a reply spoken through the system voice has finished."""
    from .tts import PlaybackStatus, SubprocessSpeechEngine

    speech = orchestrator.speech
    if speech is None or not isinstance(speech.engine, SubprocessSpeechEngine):
        return
    deadline = time.monotonic() + timeout
    while (
        speech.status is not PlaybackStatus.STOPPED
        and time.monotonic() < deadline
    ):
        time.sleep(0.1)


def run_repl(orchestrator: "Orchestrator") -> int:
    """Read utterances from stdin until EOF or an exit word."""
    prompt = "tú> " if orchestrator.language == "es" else "you> "
    while True:
        try:
            line = input(prompt)
        except EOFError:
            print()
            return 0
        text = line.strip()
        if not text:
            continue
        if text.lower() in EXIT_WORDS:
            return 0
        result = orchestrator.process(text)
        print_result(orchestrator, result)


def run_voice(orchestrator: "Orchestrator", config: "FinvoiceConfig", use_mock: bool) -> int:
    """Run one capture session and answer what was said."""
    from .audio import default_resources
    from .stt import MockRecognizer, UtteranceCapture, create_recognizer

    logger = logging.getLogger("finvoice")
    recognizer = create_recognizer(config.stt, use_mock=use_mock)
    if isinstance(recognizer, MockRecognizer):
        logger.warning("Voice mode with the mock recognizer: nothing will be heard")

    capture = UtteranceCapture(
        recognizer,
        language=orchestrator.language,
        max_duration_seconds=config.capture.max_duration_seconds,
        resources=default_resources(),
    )
    orchestrator.attach_capture(capture)

    session_ended = threading.Event()
    capture.on_end = session_ended.set

    print("🎤 Escuchando..." if orchestrator.language == "es" else "🎤 Listening...")
    if not capture.start():
        return 1

    # The session always ends at the capture cutoff
    session_ended.wait(timeout=config.capture.max_duration_seconds + 5)
    transcript = capture.transcript
    if transcript:
        print(f"📝 {transcript}")

    wait_for_speech(orchestrator)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for finvoice.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    load_dotenv()
    args = parse_args(argv)

    # Load configuration
    try:
        if args.config:
            config = load_config(path=args.config)
        elif args.profile:
            config = load_config(profile=args.profile)
        else:
            config = load_config(profile=detect_profile().value)
    except FileNotFoundError as e:
        print(f"Error: Config file not found: {e}", file=sys.stderr)
        return 1
    except ConfigError as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    if args.language:
        config.locale.language = args.language

    setup_logging(args.log_level or config.logging.level)
    logger = logging.getLogger("finvoice")
    logger.info(f"Finvoice v{__version__}")
    logger.info(f"Profile: {args.profile or detect_profile().value}")
    logger.info(f"Language: {config.locale.language}")

    from .router.orchestrator import create_orchestrator

    use_mock = config.testing.use_mock_engines
    orchestrator = create_orchestrator(config, use_mock=use_mock)

    try:
        if args.once is not None:
            result = orchestrator.process(args.once)
            print_result(orchestrator, result)
            wait_for_speech(orchestrator)
            return 0 if result.error is None else 2
        if args.voice:
            return run_voice(orchestrator, config, use_mock)
        return run_repl(orchestrator)
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")
        return 0
    finally:
        orchestrator.close()
        logger.info("Finvoice shut down")


if __name__ == "__main__":
    sys.exit(main())
