#!/usr/bin/env python3
"""Run a live car-assistant session against an Azure Voice Live endpoint.

Connection settings come from the environment (``VOICELIVE_ENDPOINT``,
``VOICELIVE_API_KEY``, optional ``VOICELIVE_*``) and can be overridden on
the command line. Audio is not captured or played back; the script is meant
for exercising tool calls and telemetry with text turns issued from another
client, or for checking that the session handshake works.

The script:
1) connects and declares the car tools,
2) runs the drive-cycle simulation,
3) prints audit entries as they arrive,
4) on exit (Ctrl-C, remote close or ``--duration``) prints metrics and the
   calculator export URL.
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import json
import logging
import sys
from pathlib import Path

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyvoicelive import (  # noqa: E402
    ConfigParseError,
    DriveCycleTicker,
    LogEntry,
    SessionController,
    VoiceLiveConfig,
    VoiceLiveError,
    calculator_params,
    calculator_url,
)


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a live pyvoicelive car-assistant session")
    parser.add_argument("--endpoint", help="Resource endpoint (default: VOICELIVE_ENDPOINT)")
    parser.add_argument("--api-key", help="Resource API key (default: VOICELIVE_API_KEY)")
    parser.add_argument("--model-category", help="LLM Realtime | LLM+TTS | ASR+LLM+TTS")
    parser.add_argument("--model", help="Model identifier within the category")
    parser.add_argument("--voice", help="Voice identifier")
    parser.add_argument("--instructions", help="System instructions")
    parser.add_argument("--threshold", type=float, help="Turn-detection threshold (0-1)")
    parser.add_argument("--session-json", type=Path, help="Path to a full session configuration document")
    parser.add_argument("--duration", type=float, default=0.0, help="Seconds to stay connected (0 = until closed)")
    parser.add_argument("--print-tools", action="store_true", help="Print the tool declarations and exit")
    parser.add_argument("--debug", action="store_true", help="Enable DEBUG logging (frames are redacted)")
    return parser.parse_args()


def _build_config(args: argparse.Namespace) -> VoiceLiveConfig:
    overrides = {}
    if args.endpoint:
        overrides["endpoint"] = args.endpoint
    if args.api_key:
        overrides["api_key"] = args.api_key
    config = VoiceLiveConfig.from_env(**overrides)

    if args.model_category:
        config = config.with_model_category(args.model_category)
    if args.model:
        config = config.with_model(args.model)
    if args.session_json:
        config = config.with_session_json(args.session_json.read_text(encoding="utf-8"))
    return config.with_session_overrides(
        voice=args.voice,
        instructions=args.instructions,
        threshold=args.threshold,
    )


def _print_entry(entry: LogEntry) -> None:
    print(entry.format(), flush=True)


async def _run(args: argparse.Namespace) -> int:
    try:
        config = _build_config(args)
    except ConfigParseError as exc:
        print(f"Invalid session configuration: {exc}", file=sys.stderr)
        for err in exc.errors:
            print(f"  - {err}", file=sys.stderr)
        return 2
    except VoiceLiveError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    async with SessionController() as controller:
        if args.print_tools:
            print(json.dumps([tool.model_dump() for tool in controller.dispatcher.declarations], indent=2))
            return 0

        controller.audit.subscribe(_print_entry)
        ticker = DriveCycleTicker(controller.store, interval=config.drive_tick_interval)
        try:
            await controller.connect(config)
        except VoiceLiveError:
            return 1

        ticker.start()
        try:
            if args.duration > 0:
                with contextlib.suppress(TimeoutError):
                    await asyncio.wait_for(controller.wait_closed(), args.duration)
            else:
                await controller.wait_closed()
        finally:
            await ticker.stop()
            await controller.disconnect()

        metrics = controller.metrics
        state = controller.store.snapshot
        print(json.dumps({"vehicle": state.as_payload(), "metrics": metrics.model_dump()}, indent=2))
        print(calculator_url(calculator_params(metrics, model=config.model)))
    return 0


def main() -> int:
    args = _parse_args()
    if args.debug:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)
    try:
        return asyncio.run(_run(args))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
