from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from pathlib import Path
from typing import List

from .config import FORMATS, RegistryConfig, build_codec, build_registry, load_config
from .errors import ConfigError, ConflictError, InvalidArgument
from .logging_config import configure_logging
from .models import PlayerRecord
from .registry import PlayerRegistry

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_INVALID = 2


def _format_player(player: PlayerRecord) -> str:
    status = "online" if player.online else "offline"
    return f"#{player.id} {player.nickname} points={player.points} {status}"


def _print_players(players: List[PlayerRecord]) -> None:
    if not players:
        print("  (no players)")
    for player in players:
        print(f"  {_format_player(player)}")


def _resolve_config(args: argparse.Namespace) -> RegistryConfig:
    cfg = load_config(args.config)
    overrides = {}
    if getattr(args, "format", None) and args.format in FORMATS:
        overrides["storage_format"] = args.format
    if args.data_dir:
        overrides["storage_dir"] = Path(args.data_dir).expanduser()
    if args.log_file:
        overrides["log_file"] = Path(args.log_file).expanduser()
    if args.log_level:
        overrides["log_level"] = args.log_level.upper()
    return replace(cfg, **overrides) if overrides else cfg


def run_demo(registry: PlayerRegistry, nickname: str) -> None:
    """Create a player, award points, list, delete and list again."""
    player_id = registry.create(nickname)
    print(f"Created player with ID: {player_id}")

    total = registry.add_points(player_id, 100)
    print(f"Player now has {total} points")

    print("Current players:")
    _print_players(registry.list())

    removed = registry.delete(player_id)
    print(f"Removed player: {_format_player(removed) if removed else None}")

    print("Players after removal:")
    _print_players(registry.list())


def _cmd_demo(args: argparse.Namespace, cfg: RegistryConfig) -> int:
    formats = sorted(FORMATS) if args.format == "both" else [cfg.storage_format]
    for i, fmt in enumerate(formats):
        if i:
            print()
        print(f"Testing {fmt.upper()} implementation:")
        run_demo(PlayerRegistry(build_codec(replace(cfg, storage_format=fmt))), args.nickname)
    return EXIT_OK


def _cmd_list(args: argparse.Namespace, cfg: RegistryConfig) -> int:
    _print_players(build_registry(cfg).list())
    return EXIT_OK


def _cmd_create(args: argparse.Namespace, cfg: RegistryConfig) -> int:
    player_id = build_registry(cfg).create(args.nickname)
    print(player_id)
    return EXIT_OK


def _cmd_get(args: argparse.Namespace, cfg: RegistryConfig) -> int:
    player = build_registry(cfg).get(args.id)
    if player is None:
        print(f"Player {args.id} not found")
        return EXIT_NOT_FOUND
    print(_format_player(player))
    return EXIT_OK


def _cmd_add_points(args: argparse.Namespace, cfg: RegistryConfig) -> int:
    total = build_registry(cfg).add_points(args.id, args.amount)
    if total is None:
        print(f"Player {args.id} not found")
        return EXIT_NOT_FOUND
    print(total)
    return EXIT_OK


def _cmd_delete(args: argparse.Namespace, cfg: RegistryConfig) -> int:
    removed = build_registry(cfg).delete(args.id)
    if removed is None:
        print(f"Player {args.id} not found")
        return EXIT_NOT_FOUND
    print(f"Removed player: {_format_player(removed)}")
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", help="Path to a playerhub.yaml file", default=None)
    common.add_argument("--data-dir", help="Directory holding the player file", default=None)
    common.add_argument("--log-level", help="Logging level (DEBUG, INFO, ...)", default=None)
    common.add_argument("--log-file", help="Also write log records to this file", default=None)

    storage = argparse.ArgumentParser(add_help=False)
    storage.add_argument("--format", choices=sorted(FORMATS), default=None, help="Storage format")

    p = argparse.ArgumentParser(prog="playerhub", description="Player registry tools")
    sub = p.add_subparsers(dest="cmd", required=True)

    d = sub.add_parser("demo", parents=[common], help="Run the demonstration sequence")
    d.add_argument("--format", choices=sorted(FORMATS) + ["both"], default="both")
    d.add_argument("--nickname", default="WinMaster_777")
    d.set_defaults(func=_cmd_demo)

    ls = sub.add_parser("list", parents=[common, storage], help="List all players")
    ls.set_defaults(func=_cmd_list)

    c = sub.add_parser("create", parents=[common, storage], help="Register a player")
    c.add_argument("nickname")
    c.set_defaults(func=_cmd_create)

    g = sub.add_parser("get", parents=[common, storage], help="Show one player")
    g.add_argument("id", type=int)
    g.set_defaults(func=_cmd_get)

    a = sub.add_parser("add-points", parents=[common, storage], help="Award points to a player")
    a.add_argument("id", type=int)
    a.add_argument("amount", type=int)
    a.set_defaults(func=_cmd_add_points)

    rm = sub.add_parser("delete", parents=[common, storage], help="Remove a player")
    rm.add_argument("id", type=int)
    rm.set_defaults(func=_cmd_delete)

    return p


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        cfg = _resolve_config(args)
    except ConfigError as e:
        print(f"ERROR: {e}")
        return EXIT_INVALID
    try:
        configure_logging(cfg.log_level, cfg.log_file)
    except OSError as e:
        print(f"ERROR: cannot open log file {cfg.log_file}: {e}")
        return EXIT_INVALID
    logger.debug("Using %s storage at %s", cfg.storage_format, cfg.storage_path)
    try:
        return args.func(args, cfg)
    except (InvalidArgument, ConflictError) as e:
        print(f"ERROR: {e}")
        return EXIT_INVALID


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
