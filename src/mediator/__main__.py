"""Mediator entrypoint. Loads config, registers listeners, broadcasts one event."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Any

from loguru import logger

from mediator import __version__
from mediator.config import CONFIG_DEFAULTS, Config, cfg, load_config_with_env
from mediator.core.errors import BadListenerError, MediatorConfigurationError
from mediator.instantiation import ImportInstantiator
from mediator.notifier import EventMediator


class InterceptHandler(logging.Handler):
    """Route stdlib logging records into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        msg = record.getMessage().replace("{", "{{").replace("}", "}}")
        logger.patch(
            lambda r: r.update(
                name=record.name,
                function=record.funcName,
                line=record.lineno,
            ),
        ).opt(exception=record.exc_info).log(level, msg)


def _safe_message_filter(record: Any) -> bool:
    """Escape braces/angles in log messages to prevent format/tag errors."""
    if isinstance(record.get("message"), str):
        msg = record["message"]
        msg = msg.replace("{", "{{").replace("}", "}}").replace("<", "\\<")
        record["message"] = msg
    return True


def setup_logging(verbose: bool = False) -> None:
    """Configure loguru. Replace default logging.
    Level: verbose=True or LOG_LEVEL=DEBUG enables DEBUG; otherwise INFO."""
    level = "INFO"
    if verbose:
        level = "DEBUG"
    else:
        env_level = (os.environ.get("LOG_LEVEL") or "").upper()
        if env_level in ("DEBUG", "INFO", "WARNING", "ERROR"):
            level = env_level

    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format=("<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan> | {message}"),
        filter=_safe_message_filter,
    )
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)


def reload_config(config_path: Path) -> Config:
    """Load config from path over the defaults and update global cfg."""
    data = load_config_with_env(config_path, defaults=CONFIG_DEFAULTS)
    cfg.reload(data)
    return cfg


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Broadcast an event to the listeners registered in a config file")
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path("mediator.yaml"),
        help="Path to config file (default: mediator.yaml)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument("event", help="Event name to broadcast")
    parser.add_argument("args", nargs="*", help="Positional arguments passed to each listener")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entrypoint."""
    args = build_parser().parse_args(argv)

    setup_logging(args.verbose)

    if not args.config.exists():
        logger.error("Config file not found: {}", args.config)
        sys.exit(1)

    try:
        config = reload_config(args.config)
    except MediatorConfigurationError as exc:
        logger.error("Invalid config {}: {}", args.config, exc)
        sys.exit(1)
    logger.info("Config loaded from {}", args.config)

    mediator = EventMediator.from_config(config, ImportInstantiator())
    logger.info("Mediator ready: {} event(s) with listeners", len(mediator.keys()))

    try:
        invoked = mediator.notify(args.event, *args.args)
    except BadListenerError as exc:
        logger.error("Broadcast of {} failed: {}", args.event, exc)
        sys.exit(1)

    logger.info(
        "{}: {} of {} listener(s) invoked",
        args.event,
        invoked,
        mediator.count(args.event),
    )
    print(invoked)


if __name__ == "__main__":
    main()
