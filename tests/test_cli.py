"""Tests for the command line front end."""

import httpx
import pytest

from src.audiostation.client import AudioStationClient
from src.cli import create_parser, main, run_command
from src.common.settings import SettingsStore
from tests.helpers import FakeServer, request_params


def subsonic_route(request: httpx.Request) -> str:
    return request.url.path.rsplit("/", 1)[-1]


def audiostation_route(request: httpx.Request) -> str:
    params = request_params(request)
    return f"{params.get('api')}.{params.get('method') or params.get('action')}"


class TestParser:
    def test_search_arguments(self):
        args = create_parser().parse_args(["subsonic", "search", "miles davis"])

        assert args.service == "subsonic"
        assert args.command == "search"
        assert args.query == "miles davis"

    def test_service_is_required(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args([])


class TestRunCommand:
    @pytest.mark.asyncio
    async def test_configure_saves_settings(self, settings: SettingsStore):
        args = create_parser().parse_args(["audiostation", "configure", "nas.local", "admin", "secret"])

        code = await run_command(args, settings=settings, http_client=httpx.AsyncClient())

        assert code == 0
        assert SettingsStore(settings.path).get("AudioStation_BaseURL") == "https://nas.local"

    @pytest.mark.asyncio
    async def test_subsonic_artists(self, settings: SettingsStore, capsys):
        settings.set_many(
            {
                "SubsonicServerURL": "https://music.example.com",
                "SubsonicUsername": "john",
                "SubsonicPassword": "secret",
            }
        )
        server = FakeServer(
            subsonic_route,
            {
                "getArtists": {
                    "subsonic-response": {
                        "status": "ok",
                        "artists": {"index": [{"name": "M", "artist": [{"id": "7", "name": "Mingus"}]}]},
                    }
                }
            },
        )
        args = create_parser().parse_args(["subsonic", "artists"])

        code = await run_command(args, settings=settings, http_client=server.http_client())

        assert code == 0
        assert "7\tMingus" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_audiostation_logs_in_and_out(self, settings: SettingsStore, capsys):
        settings.set_many(
            {
                "AudioStation_BaseURL": "https://nas.local",
                "AudioStation_Username": "admin",
                "AudioStation_Password": "secret",
            }
        )
        server = FakeServer(
            audiostation_route,
            {
                "SYNO.API.Auth.Login": {"success": True, "data": {"sid": "SID"}},
                "SYNO.API.Auth.Logout": {"success": True},
                "SYNO.AudioStation.Playlist.list": {
                    "success": True,
                    "data": {"playlists": [{"id": "p1", "name": "Road"}]},
                },
            },
        )
        args = create_parser().parse_args(["audiostation", "playlists"])

        code = await run_command(args, settings=settings, http_client=server.http_client())

        assert code == 0
        assert "p1\tRoad" in capsys.readouterr().out
        assert [audiostation_route(r) for r in server.requests] == [
            "SYNO.API.Auth.Login",
            "SYNO.AudioStation.Playlist.list",
            "SYNO.API.Auth.Logout",
        ]

    @pytest.mark.asyncio
    async def test_audiostation_ping_command_uses_client_ping(self, settings: SettingsStore, mocker):
        settings.set_many(
            {
                "AudioStation_BaseURL": "https://nas.local",
                "AudioStation_Username": "admin",
                "AudioStation_Password": "wrong",
            }
        )
        server = FakeServer(
            audiostation_route,
            {"SYNO.API.Auth.Login": {"success": False, "error": {"code": 400}}},
        )
        ping = mocker.spy(AudioStationClient, "ping")
        args = create_parser().parse_args(["audiostation", "ping"])

        code = await run_command(args, settings=settings, http_client=server.http_client())

        assert code == 1
        assert ping.call_count == 1
        assert [audiostation_route(r) for r in server.requests] == ["SYNO.API.Auth.Login"]

    @pytest.mark.asyncio
    async def test_client_error_returns_non_zero(self, settings: SettingsStore):
        args = create_parser().parse_args(["subsonic", "ping"])

        code = await run_command(args, settings=settings, http_client=httpx.AsyncClient())

        assert code == 1


def test_main_reports_failure(monkeypatch, tmp_path):
    monkeypatch.setenv("MEDIACLIENT_SETTINGS_PATH", str(tmp_path / "settings.json"))

    assert main(["subsonic", "ping"]) == 1
