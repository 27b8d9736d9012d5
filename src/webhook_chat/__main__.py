"""Terminal chat client and configuration inspection.

Usage:
    python -m webhook_chat [chat] --url https://example.com/webhook/chat
    python -m webhook_chat config [--json]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Any, TextIO

from webhook_chat.config import print_effective_config, resolve_config
from webhook_chat.core.exceptions import ConfigurationError
from webhook_chat.core.types import SessionState
from webhook_chat.session import ChatSession
from webhook_chat.telemetry import MemoryReporter, TelemetryContext, telemetry_enabled
from webhook_chat.transport.http import WebhookTransport

# ruff: noqa: T201

QUIT_COMMANDS = frozenset({"/quit", "/exit"})


class ConsoleRenderer:
    """Prints transcript entries as they are appended."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream or sys.stdout
        self._rendered = 0
        self._was_pending = False

    def __call__(self, state: SessionState) -> None:
        for message in state.history[self._rendered :]:
            # User lines are already on screen as typed input
            if message.role == "assistant":
                print(f"assistant> {message.content}", file=self._stream)
        self._rendered = len(state.history)
        if state.pending and not self._was_pending:
            print("thinking...", file=self._stream)
        self._was_pending = state.pending
        self._stream.flush()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="webhook_chat", description="Chat with a conversational webhook."
    )
    parser.add_argument("--profile", help="Configuration profile to use")
    parser.add_argument("--env-file", help="Load environment variables from this file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command")

    chat = sub.add_parser("chat", help="Start an interactive chat (default)")
    chat.add_argument("--url", help="Webhook URL (overrides configuration)")
    chat.add_argument("--timeout", type=float, help="HTTP timeout in seconds")

    cfg = sub.add_parser("config", help="Show the effective configuration")
    cfg.add_argument("--json", action="store_true", help="Machine-readable output")
    return parser


def _overrides(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if getattr(args, "url", None):
        overrides["webhook_url"] = args.url
    if getattr(args, "timeout", None) is not None:
        overrides["timeout_seconds"] = args.timeout
    return overrides


async def _chat(args: argparse.Namespace) -> int:
    config = resolve_config(
        _overrides(args), profile=args.profile, use_env_file=args.env_file
    )
    reporter = MemoryReporter() if telemetry_enabled() else None
    telemetry = TelemetryContext(reporter) if reporter else TelemetryContext()

    async with WebhookTransport.from_config(config) as transport:
        session = ChatSession.from_config(transport, config, telemetry=telemetry)
        session.subscribe(ConsoleRenderer())
        print(f"Connected to {config.webhook_url}. Type /quit to leave.")
        while True:
            try:
                line = await asyncio.to_thread(input, "you> ")
            except EOFError:
                break
            if line.strip() in QUIT_COMMANDS:
                break
            task = session.submit(line)
            if task is not None:
                await task

    if reporter:
        reporter.print_report()
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        if args.command == "config":
            config = resolve_config(profile=args.profile, use_env_file=args.env_file)
            print_effective_config(config, as_json=args.json)
            return 0
        return asyncio.run(_chat(args))
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
