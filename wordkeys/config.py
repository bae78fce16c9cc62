"""Configuration for the wordkeys application.

The Config dataclass collects everything the command line can change;
init_config validates parsed arguments and fills in defaults from the
constants module.
"""

from __future__ import annotations

from argparse import Namespace
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from wordkeys import constants


@dataclass(frozen=True)
class Config:
    """Application settings."""

    text: Optional[str] = None  # Literal text to perform
    text_file: Optional[Path] = None  # File to perform, reloaded on change
    port: Optional[str] = None  # Preferred MIDI input when several exist
    rate: float = constants.DEFAULT_RATE
    volume: float = constants.DEFAULT_VOLUME
    voice_hints: List[str] = field(
        default_factory=lambda: list(constants.DEFAULT_VOICE_HINTS)
    )
    max_pending: int = constants.DEFAULT_MAX_PENDING
    poll_interval: float = constants.DEFAULT_POLL_INTERVAL
    omni: bool = False  # Accept note-on on every channel


class ConfigError(ValueError):
    """Raised when settings are out of range or contradict each other."""


def init_config(args: Namespace) -> Config:
    """Build and validate the configuration from parsed arguments.

    Args:
        args: Arguments from the parser made by main.make_parser.

    Returns:
        The validated configuration.

    Raises:
        ConfigError: If a setting is invalid.
    """
    if args.text is not None and args.text_file is not None:
        raise ConfigError("--text and --text-file are mutually exclusive")
    if args.rate <= 0:
        raise ConfigError(f"--rate must be positive, got {args.rate}")
    if not 0.0 <= args.volume <= 1.0:
        raise ConfigError(f"--volume must be between 0 and 1, got {args.volume}")
    if args.max_pending < 1:
        raise ConfigError(f"--max-pending must be at least 1, got {args.max_pending}")
    if args.poll_interval <= 0:
        raise ConfigError(f"--poll-interval must be positive, got {args.poll_interval}")
    return Config(
        text=args.text,
        text_file=Path(args.text_file) if args.text_file is not None else None,
        port=args.port,
        rate=args.rate,
        volume=args.volume,
        voice_hints=list(args.voice) if args.voice else list(constants.DEFAULT_VOICE_HINTS),
        max_pending=args.max_pending,
        poll_interval=args.poll_interval,
        omni=args.omni,
    )
