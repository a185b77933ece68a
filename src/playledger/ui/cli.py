# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING
from uuid import UUID

from dotenv import load_dotenv

from playledger.adapters.sqlalchemy.unit_of_work import is_started, startup
from playledger.api.schemas import (
    AdminStatsResponse,
    ArtistStatsResponse,
    ListenerStatsResponse,
    PlayResponse,
    TrackSchema,
)
from playledger.app import build_services, create_user, register_track
from playledger.config import ConfigurationError, configure_logging
from playledger.domain.errors import NotFoundError, PlayLedgerError
from playledger.domain.model import UserType

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from pydantic import BaseModel

    from playledger.app import LedgerServices

log = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Record plays and report listening stats")
    parser.add_argument(
        "--database-uri",
        type=str,
        help="SQLAlchemy database URI (defaults to DATABASE_URI or the data directory)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init-db", help="Create or migrate the database schema")

    user = subparsers.add_parser("user", help="User management commands")
    user_sub = user.add_subparsers(dest="user_command", required=True)
    user_create = user_sub.add_parser("create", help="Create a user")
    user_create.add_argument(
        "--display-name",
        type=str,
        required=True,
        help="Display name for the user",
    )
    user_create.add_argument(
        "--type",
        dest="user_type",
        choices=[member.value for member in UserType],
        default=UserType.LISTENER.value,
        help="Account type (default: %(default)s)",
    )

    track = subparsers.add_parser("track", help="Catalog track commands")
    track_sub = track.add_subparsers(dest="track_command", required=True)
    track_register = track_sub.add_parser("register", help="Register a track")
    track_register.add_argument("--title", type=str, required=True, help="Track title")
    track_register.add_argument("--artist-id", type=str, required=True, help="Artist user id")
    track_register.add_argument("--artist-name", type=str, default="", help="Artist name")
    track_register.add_argument(
        "--public",
        action="store_true",
        help="Mark the track as approved and publicly visible",
    )
    track_register.add_argument(
        "--plays",
        type=int,
        default=0,
        help="Play count carried over from an earlier catalog (default: %(default)s)",
    )

    play = subparsers.add_parser("play", help="Report one playback of a track")
    play.add_argument("track_id", type=str, help="Track id")
    play.add_argument("--listener-id", type=str, help="Listener id; omit for anonymous")

    stats = subparsers.add_parser("stats", help="Dashboard statistics")
    stats_sub = stats.add_subparsers(dest="stats_command", required=True)
    stats_artist = stats_sub.add_parser("artist", help="Artist dashboard")
    stats_artist.add_argument("artist_id", type=str, help="Artist id")
    stats_sub.add_parser("admin", help="Platform dashboard")
    stats_listener = stats_sub.add_parser("listener", help="Listener lifetime plays")
    stats_listener.add_argument("user_id", type=str, help="Listener id")

    trending = subparsers.add_parser("trending", help="Most played public tracks")
    trending.add_argument("--limit", type=int, help="Number of tracks (defaults to config)")

    subparsers.add_parser("reconcile", help="Recompute the platform play total")

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", type=str, default=DEFAULT_HOST, help="Bind address")
    serve.add_argument("--port", type=int, default=DEFAULT_PORT, help="Bind port")

    return parser.parse_args(list(argv))


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValueError(f"Invalid UUID: {value}") from exc


def _emit(payload: BaseModel | list[TrackSchema]) -> None:
    if isinstance(payload, list):
        rows = [item.model_dump(mode="json", by_alias=True) for item in payload]
        print(json.dumps(rows, indent=2))
    else:
        print(payload.model_dump_json(by_alias=True, indent=2))


def _run_stats(services: LedgerServices, args: argparse.Namespace) -> None:
    if args.stats_command == "artist":
        dashboard = services.stats.artist_dashboard(_parse_uuid(args.artist_id))
        _emit(ArtistStatsResponse.from_dashboard(dashboard))
    elif args.stats_command == "admin":
        _emit(AdminStatsResponse.from_dashboard(services.stats.admin_dashboard()))
    else:
        total = services.stats.listener_total_plays(_parse_uuid(args.user_id))
        _emit(ListenerStatsResponse(total_plays=total))


def _serve(services: LedgerServices, args: argparse.Namespace) -> None:
    import uvicorn  # noqa: PLC0415

    from playledger.api import create_app  # noqa: PLC0415

    uvicorn.run(create_app(services), host=args.host, port=args.port, log_config=None)


def _dispatch(args: argparse.Namespace) -> None:
    if args.command == "init-db":
        log.info("Database schema is up to date")
    elif args.command == "user":
        user = create_user(
            display_name=args.display_name,
            user_type=UserType(args.user_type),
        )
        print(user.id)
    elif args.command == "track":
        track = register_track(
            title=args.title,
            artist_id=_parse_uuid(args.artist_id),
            artist_name=args.artist_name,
            is_public=args.public,
            play_count=args.plays,
        )
        print(track.id)
    else:
        services = build_services()
        if args.command == "play":
            listener_id = _parse_uuid(args.listener_id) if args.listener_id else None
            result = services.ingestion.record_play(_parse_uuid(args.track_id), listener_id)
            _emit(PlayResponse(plays=result.new_total, counted=result.counted))
        elif args.command == "stats":
            _run_stats(services, args)
        elif args.command == "trending":
            tracks = services.trending.trending(args.limit)
            _emit([TrackSchema.from_track(track) for track in tracks])
        elif args.command == "reconcile":
            print(services.reconcile_platform_total())
        elif args.command == "serve":
            _serve(services, args)
        else:
            raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_dotenv()
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)

    try:
        if not is_started():
            startup(database_uri=parsed_args.database_uri)
        _dispatch(parsed_args)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)
    except ConfigurationError:
        log.exception("Invalid configuration")
        sys.exit(2)
    except NotFoundError as exc:
        log.error("%s", exc)
        sys.exit(1)
    except PlayLedgerError:
        log.exception("Play ledger command failed")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


if __name__ == "__main__":
    signal(SIGINT, sigint_handler)
    main()
