"""
Media client CLI - Command Line Interface

Query an Audio Station or Subsonic server from the shell:

    python -m src.cli audiostation configure nas.local:5001 admin secret
    python -m src.cli subsonic ping
    python -m src.cli subsonic search "miles davis"
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

import httpx

from .audiostation import AudioStationClient, AudioStationError
from .common import SettingsStore
from .logger import setup_logging
from .subsonic import SubsonicClient, SubsonicError

logger = logging.getLogger(__name__)

SERVICES = ("audiostation", "subsonic")


def create_parser() -> argparse.ArgumentParser:
    """
    Create argument parser for CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="python -m src.cli",
        description="Query Synology Audio Station and Subsonic servers",
        epilog="Example: python -m src.cli subsonic configure music.example.com john secret",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose debug logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 1.0.0",
    )

    services = parser.add_subparsers(dest="service", required=True, metavar="SERVICE")
    for service in SERVICES:
        service_parser = services.add_parser(service, help=f"{service} server commands")
        commands = service_parser.add_subparsers(dest="command", required=True, metavar="COMMAND")

        configure = commands.add_parser("configure", help="Store server address and credentials")
        configure.add_argument("address", help="Server address, e.g. nas.local:5001")
        configure.add_argument("username")
        configure.add_argument("password")

        commands.add_parser("ping", help="Check connectivity and credentials")
        commands.add_parser("artists", help="List artists")
        commands.add_parser("albums", help="List albums")
        commands.add_parser("playlists", help="List playlists")

        search = commands.add_parser("search", help="Search the library")
        search.add_argument("query")

    return parser


async def _run_audiostation(client: AudioStationClient, args: argparse.Namespace) -> None:
    if args.command == "configure":
        client.configure(args.address, args.username, args.password)
        print(f"Saved configuration for {client.get_configuration().address}")
        return

    if args.command == "ping":
        await client.ping()
    else:
        await client.login()
    try:
        if args.command == "ping":
            print(f"Connected to {client.get_configuration().address}")
        elif args.command == "artists":
            for artist in await client.get_artists():
                print(f"{artist.id}\t{artist.name}")
        elif args.command == "albums":
            for album in await client.get_albums():
                print(f"{album.id}\t{album.display_name}\t{album.artist_name}")
        elif args.command == "playlists":
            for playlist in await client.get_playlists():
                print(f"{playlist.id}\t{playlist.name}")
        elif args.command == "search":
            result = await client.search(args.query)
            for artist in result.artists:
                print(f"artist\t{artist.id}\t{artist.name}")
            for album in result.albums:
                print(f"album\t{album.id}\t{album.display_name}")
            for song in result.songs:
                print(f"song\t{song.id}\t{song.title}\t{song.formatted_duration}")
    finally:
        await client.logout()


async def _run_subsonic(client: SubsonicClient, args: argparse.Namespace) -> None:
    if args.command == "configure":
        client.configure(args.address, args.username, args.password)
        print(f"Saved configuration for {client.get_configuration().address}")
    elif args.command == "ping":
        await client.ping()
        print(f"Connected to {client.get_configuration().address}")
    elif args.command == "artists":
        for artist in await client.get_artists():
            print(f"{artist.id}\t{artist.name}")
    elif args.command == "albums":
        for album in await client.get_album_list2("alphabeticalByName", size=500):
            print(f"{album.id}\t{album.name}\t{album.artist}")
    elif args.command == "playlists":
        for playlist in await client.get_playlists():
            print(f"{playlist.id}\t{playlist.name}")
    elif args.command == "search":
        result = await client.search3(args.query)
        for artist in result.artists:
            print(f"artist\t{artist.id}\t{artist.name}")
        for album in result.albums:
            print(f"album\t{album.id}\t{album.name}")
        for song in result.songs:
            print(f"song\t{song.id}\t{song.title}\t{song.formatted_duration}")


async def run_command(
    args: argparse.Namespace,
    settings: Optional[SettingsStore] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> int:
    """
    Execute one parsed command.

    Args:
        args: Parsed arguments
        settings: Settings store (default: the user settings file)
        http_client: Optional HTTP client handed to the media client

    Returns:
        Process exit code (0 success, 1 client error)
    """
    try:
        if args.service == "audiostation":
            async with AudioStationClient(settings=settings, http_client=http_client) as client:
                await _run_audiostation(client, args)
        else:
            async with SubsonicClient(settings=settings, http_client=http_client) as client:
                await _run_subsonic(client, args)
    except (AudioStationError, SubsonicError) as e:
        logger.error(f"{args.service} {args.command} failed: {e}")
        return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Args:
        argv: Argument list (default: sys.argv[1:])

    Returns:
        Process exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging()
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        return asyncio.run(run_command(args))
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
