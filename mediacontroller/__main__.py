#!/usr/bin/env python3
"""
Media Session Monitor

Starts a MediaManager and prints one line per relayed event.

Usage:
    python -m mediacontroller                      # WinRT on Windows, demo elsewhere
    python -m mediacontroller --provider memory    # scripted demo
    python -m mediacontroller --duration 60 --metrics

    # Or configure through the environment
    MEDIACONTROLLER_LOG_LEVEL=DEBUG MEDIACONTROLLER_LOG_JSON=1 python -m mediacontroller
"""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import sys
from typing import NoReturn, Optional, Sequence

from mediacontroller import __version__
from mediacontroller.core import constants as C
from mediacontroller.core.config import MediaControllerConfig
from mediacontroller.core.errors import MediaControllerError
from mediacontroller.core.types import (
    MediaMetadata,
    PlaybackInfo,
    PlaybackStatus,
)
from mediacontroller.observability.logging import LogLevel, StructuredLogger, setup_logging
from mediacontroller.observability.metrics import MetricsCollector
from mediacontroller.providers.memory import InMemoryGateway, InMemorySessionAdapter
from mediacontroller.providers.protocols import ProviderGateway
from mediacontroller.session.manager import MediaManager

log = StructuredLogger("mediacontroller.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mediacontroller",
        description="Print media session events from the system media transport controls",
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--provider",
        choices=sorted(C.BACKENDS),
        default=None,
        help="Session provider (default: winrt on Windows, memory elsewhere)",
    )
    parser.add_argument(
        "--duration",
        type=float,
        default=None,
        help="Stop after this many seconds (default: run until Ctrl-C; "
             "the memory demo ends when its script finishes)",
    )
    parser.add_argument(
        "--log-level",
        choices=[level.name for level in LogLevel],
        default=None,
        help="Minimum log level",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit logs as JSON lines",
    )
    parser.add_argument(
        "--metrics",
        action="store_true",
        help="Print Prometheus metrics on exit",
    )
    return parser


def _apply_overrides(
    config: MediaControllerConfig,
    args: argparse.Namespace,
) -> MediaControllerConfig:
    provider = config.provider
    observability = config.observability
    if args.provider:
        provider = dataclasses.replace(provider, backend=args.provider)
    if args.log_level:
        observability = dataclasses.replace(observability, log_level=args.log_level)
    if args.json_logs:
        observability = dataclasses.replace(observability, log_json=True)
    if args.metrics:
        observability = dataclasses.replace(observability, metrics_enabled=True)
    return dataclasses.replace(config, provider=provider, observability=observability)


def _create_gateway(backend: str) -> ProviderGateway:
    if backend == C.BACKEND_WINRT:
        from mediacontroller.providers.winrt import WinRTGateway
        return WinRTGateway()
    return InMemoryGateway()


def _attach_printers(manager: MediaManager) -> None:
    manager.new_source.subscribe(
        lambda record: print(f"+ {record.source_id}")
    )
    manager.removed_source.subscribe(
        lambda record: print(f"- {record.source_id}")
    )
    manager.playback_changed.subscribe(
        lambda record, info: print(f"  {record.source_id}: {info.status.name.lower()}")
    )
    manager.song_changed.subscribe(
        lambda record, song: print(f"  {record.source_id}: now playing {song}")
    )


async def run_demo_script(gateway: InMemoryGateway, step: float = C.DEMO_STEP_SECONDS) -> None:
    """Drive the in-memory provider through a typical session lifetime."""
    spotify = InMemorySessionAdapter(
        "Spotify.exe",
        metadata=MediaMetadata(title="Intro", artist="The xx", album_title="xx"),
    )
    vlc = InMemorySessionAdapter(
        "VideoLAN.VLC",
        metadata=MediaMetadata(title="Big Buck Bunny"),
    )

    gateway.add_session(spotify)
    await asyncio.sleep(step)
    gateway.add_session(vlc)
    await asyncio.sleep(step)
    spotify.set_metadata(MediaMetadata(title="Crystalised", artist="The xx", album_title="xx"))
    await asyncio.sleep(step)
    spotify.set_playback(PlaybackInfo(PlaybackStatus.PAUSED))
    await asyncio.sleep(step)
    vlc.close()
    # The platform drops a closed session from its list without a second notification
    gateway.remove_session(vlc.source_id, notify=False)
    await asyncio.sleep(step)
    # Spotify is known to vanish without reporting CLOSED
    gateway.remove_session(spotify.source_id)
    await asyncio.sleep(step)


async def monitor(
    config: MediaControllerConfig,
    duration: Optional[float] = None,
) -> None:
    gateway = _create_gateway(config.provider.backend)
    metrics = MetricsCollector.get_instance()
    manager = MediaManager(gateway, config=config.manager, metrics=metrics)
    _attach_printers(manager)

    async with manager:
        if isinstance(gateway, InMemoryGateway) and duration is None:
            await run_demo_script(gateway)
        else:
            try:
                await asyncio.wait_for(asyncio.Event().wait(), timeout=duration)
            except asyncio.TimeoutError:
                pass
        await manager.drain()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config_result = MediaControllerConfig.from_env()
    if config_result.is_err():
        print(config_result.error, file=sys.stderr)
        return 2
    config = _apply_overrides(config_result.unwrap(), args)

    validation = config.validate()
    if validation.is_err():
        print(f"Validation error: {validation.error}", file=sys.stderr)
        return 2

    setup_logging(
        LogLevel.from_name(config.observability.log_level),
        json_output=config.observability.log_json,
    )
    log.debug("Configuration loaded", backend=config.provider.backend)

    try:
        asyncio.run(monitor(config, args.duration))
    except KeyboardInterrupt:
        print("\nInterrupted")
    except MediaControllerError as e:
        log.error("Media controller failed", error=e.to_dict())
        return 1

    if args.metrics and config.observability.metrics_enabled:
        print(MetricsCollector.get_instance().export_prometheus())
    return 0


def run() -> NoReturn:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
