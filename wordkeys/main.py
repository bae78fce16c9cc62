"""Main entry point for the wordkeys application.

Parses the command line, sets up logging, opens the speech engine and the
MIDI session, and runs the event loop until interrupted.
"""

import logging
import sys
from argparse import ArgumentParser
from queue import SimpleQueue
from typing import List, Optional

from wordkeys import constants
from wordkeys.app import App, AppEvent, run_loop
from wordkeys.config import Config, ConfigError, init_config
from wordkeys.dispatch import Dispatcher
from wordkeys.display import ConsoleDisplay, ConsolePrompt
from wordkeys.midi import MidoDeviceAccess, PortWatcher
from wordkeys.session import MidiSession
from wordkeys.source import TextSource
from wordkeys.speech import Pyttsx3Speaker, SpeechError


def main_with_config(config: Config) -> None:
    """Run the application with the given configuration.

    Args:
        config: The validated configuration.
    """
    display = ConsoleDisplay(sys.stdout)
    prompt = ConsolePrompt(sys.stdout)
    events: SimpleQueue[AppEvent] = SimpleQueue()
    access = MidoDeviceAccess(events.put)
    source = TextSource(text=config.text, path=config.text_file)
    logging.info("starting speech engine")
    speaker = Pyttsx3Speaker(voice_hints=config.voice_hints, max_pending=config.max_pending)
    try:
        dispatcher = Dispatcher(
            speaker, display, rate=config.rate, volume=config.volume
        )
        session = MidiSession(
            access,
            prompt,
            display,
            dispatcher.on_note,
            preferred_port=config.port,
            omni=config.omni,
        )
        app = App(session, dispatcher, source, PortWatcher(access.input_names))
        try:
            app.start()
            logging.info("ready")
            run_loop(app, events, config.poll_interval)
        except KeyboardInterrupt:
            pass
        finally:
            app.close()
    finally:
        logging.info("stopping speech engine")
        speaker.close()


def make_parser() -> ArgumentParser:
    """Create the command-line argument parser.

    Returns:
        An ArgumentParser configured with all the command-line options.
    """
    parser = ArgumentParser(
        description="Speak the next word of a text on every MIDI note-on."
    )
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument("--text", help="text to perform")
    parser.add_argument("--text-file", help="file to perform, reloaded when changed")
    parser.add_argument("--port", help="MIDI input to use when several are present")
    parser.add_argument("--rate", type=float, default=constants.DEFAULT_RATE)
    parser.add_argument("--volume", type=float, default=constants.DEFAULT_VOLUME)
    parser.add_argument(
        "--voice",
        action="append",
        help="preferred voice name fragment (repeatable)",
    )
    parser.add_argument(
        "--max-pending", type=int, default=constants.DEFAULT_MAX_PENDING
    )
    parser.add_argument(
        "--poll-interval", type=float, default=constants.DEFAULT_POLL_INTERVAL
    )
    parser.add_argument(
        "--omni", action="store_true", help="accept note-on on every channel"
    )
    return parser


def configure_logging(log_level: str) -> None:
    """Configure the logging system with the specified log level.

    Args:
        log_level: The logging level (e.g., 'DEBUG', 'INFO', 'WARNING').
    """
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(filename)s:%(lineno)d -- %(message)s",
        level=log_level,
    )


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the wordkeys application."""
    parser = make_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    try:
        config = init_config(args)
    except ConfigError as e:
        parser.error(str(e))
    try:
        main_with_config(config)
    except SpeechError as e:
        logging.error("%s", e)
        sys.exit(1)
    logging.info("done")


if __name__ == "__main__":
    main()
