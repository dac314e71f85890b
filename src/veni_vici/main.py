from __future__ import annotations

import argparse
import asyncio
import logging
import os
import shlex
import sys
from pathlib import Path
from typing import TextIO

from dotenv import load_dotenv

from veni_vici.config import AppConfig, load_config, parse_rule
from veni_vici.models import ATTRIBUTE_KINDS, TEMPERAMENT, Accepted
from veni_vici.pipeline import DiscoverySession
from veni_vici.reporting.card import render_ban_list, render_candidate

LOGGER = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

HELP_TEXT = """Commands:
  discover              fetch a random cat that passes the ban list
  ban <kind> [value]    ban breed/origin/temperament (defaults to the shown cat;
                        temperament takes a trait name or its number)
  preset [n]            list quick bans, or apply quick ban #n
  unban <n>             remove ban #n
  clear                 clear the ban list
  show                  show the current cat and ban list
  help                  show this text
  quit                  exit"""


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Discover random cats, ban what you don't like")
    parser.add_argument("--config", default=None, help="Path to YAML config")
    parser.add_argument(
        "--ban",
        action="append",
        default=[],
        metavar="KIND=VALUE",
        help=f"Seed the ban list ({', '.join(ATTRIBUTE_KINDS)}); repeatable",
    )
    parser.add_argument("--once", action="store_true", help="Discover one cat, print it and exit")
    parser.add_argument(
        "--log-level",
        dest="log_level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=os.getenv("VENI_VICI_LOG_LEVEL", "WARNING").upper(),
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    args = parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
        seed = [parse_rule(raw) for raw in args.ban]
    except (OSError, ValueError, TypeError) as exc:
        print(f"ERROR: {exc}")
        return 2

    LOGGER.debug("Using %s%s with %s seeded bans", config.cat_api.base_url, config.cat_api.search_path, len(seed))
    session = DiscoverySession(config, bans=seed)
    if args.once:
        outcome = asyncio.run(session.discover())
        if session.error:
            print(session.error)
        print(render_candidate(session.current))
        return 0 if isinstance(outcome, Accepted) else 1

    return run_shell(session, config, sys.stdin, sys.stdout)


def run_shell(session: DiscoverySession, config: AppConfig, stdin: TextIO, stdout: TextIO) -> int:
    print(f"{config.name}: discover random cats. Type 'help' for commands.", file=stdout)
    for raw_line in stdin:
        try:
            words = shlex.split(raw_line)
        except ValueError as exc:
            print(f"ERROR: {exc}", file=stdout)
            continue
        if not words:
            continue

        command, rest = words[0].lower(), words[1:]
        if command in {"quit", "exit", "q"}:
            break
        try:
            _dispatch(session, config, command, rest, stdout)
        except (ValueError, IndexError) as exc:
            print(f"ERROR: {exc}", file=stdout)
    return 0


def _dispatch(session: DiscoverySession, config: AppConfig, command: str, rest: list[str], stdout: TextIO) -> None:
    if command in {"discover", "d"}:
        print("Loading...", file=stdout)
        asyncio.run(session.discover())
        if session.error:
            print(session.error, file=stdout)
        print(render_candidate(session.current), file=stdout)
    elif command == "ban":
        if not rest:
            raise ValueError(f"Usage: ban <{'|'.join(ATTRIBUTE_KINDS)}> [value]")
        kind, value = rest[0].lower(), " ".join(rest[1:]) or None
        if kind not in ATTRIBUTE_KINDS:
            raise ValueError(f"Unknown ban kind {kind!r}; expected one of {', '.join(ATTRIBUTE_KINDS)}")
        if kind == TEMPERAMENT and value is not None and value.isdigit() and session.current is None:
            raise ValueError(f"No cat is shown; trait #{value} refers to nothing")
        if value is None or (kind == TEMPERAMENT and value.isdigit()):
            added = session.ban_current(kind, value)
        else:
            added = session.ban(kind, value)
        _print_ban_result(added, session, stdout)
    elif command == "preset":
        if not rest:
            for idx, rule in enumerate(config.preset_bans, start=1):
                print(f"{idx}. Ban {rule.label()}", file=stdout)
            return
        position = _parse_position(rest[0], len(config.preset_bans), "quick ban")
        rule = config.preset_bans[position]
        _print_ban_result(session.ban(rule.kind, rule.value), session, stdout)
    elif command == "unban":
        if not rest:
            raise ValueError("Usage: unban <n>")
        removed = session.unban(_parse_position(rest[0], len(session.bans), "ban"))
        print(f"Removed {removed.label()}", file=stdout)
        print(render_ban_list(session.bans), file=stdout)
    elif command == "clear":
        session.clear_bans()
        print(render_ban_list(session.bans), file=stdout)
    elif command == "show":
        print(render_candidate(session.current), file=stdout)
        print("", file=stdout)
        print("Ban list:", file=stdout)
        print(render_ban_list(session.bans), file=stdout)
    elif command == "help":
        print(HELP_TEXT, file=stdout)
    else:
        raise ValueError(f"Unknown command {command!r}; type 'help'")


def _print_ban_result(added: bool, session: DiscoverySession, stdout: TextIO) -> None:
    if not added:
        print("Already banned.", file=stdout)
    print(render_ban_list(session.bans), file=stdout)


def _parse_position(raw: str, size: int, what: str) -> int:
    try:
        position = int(raw)
    except ValueError as exc:
        raise ValueError(f"Expected a {what} number, got {raw!r}") from exc
    if not 1 <= position <= size:
        raise IndexError(f"No {what} #{position}")
    return position - 1


if __name__ == "__main__":
    raise SystemExit(main())
