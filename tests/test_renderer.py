"""Tests del renderizado del panel y de la presencia."""

import datetime

import pytest

from fivemstatus.config import BotSettings
from fivemstatus.models import DisplayState, OverrideFlags, RawServerReading
from fivemstatus.overrides import resolve_status
from fivemstatus.renderer import (
    MAX_FIELD_LENGTH,
    box,
    build_embed,
    display_state,
    format_players,
    format_uptime,
    presence_text,
    render_panel,
    truncate_value,
)

from .conftest import SAMPLE_ENV, make_status


class TestFormatting:
    @pytest.mark.parametrize("seconds,expected", [
        (0, "0h 0m"),
        (59, "0h 0m"),
        (3600, "1h 0m"),
        (3661, "1h 1m"),
        (3599, "0h 59m"),
        (90061, "25h 1m"),
        (-5, "0h 0m"),
    ])
    def test_format_uptime(self, seconds, expected):
        assert format_uptime(seconds) == expected

    def test_format_players(self):
        assert format_players(12, 48) == "12/48"


class TestDisplayState:
    def test_maintenance_beats_everything(self):
        status = make_status(online=True, maintenance=True, maintenance_reason="x")
        assert display_state(status) == DisplayState.MAINTENANCE

    def test_admin_only_variants(self):
        assert display_state(make_status(admin_only=True, admin_reason="x")) == DisplayState.ADMIN_ONLY
        assert display_state(
            make_status(online=False, admin_only=True, admin_reason="x")
        ) == DisplayState.ADMIN_ONLY_OFFLINE

    def test_online_and_offline(self):
        assert display_state(make_status()) == DisplayState.ONLINE
        assert display_state(make_status(online=False)) == DisplayState.OFFLINE


class TestPresence:
    @pytest.mark.parametrize("overrides,text,indicator", [
        ({}, "12/48 Players Online", "online"),
        ({"online": False}, "🔴 Server Offline", "idle"),
        ({"online": False, "maintenance": True, "maintenance_reason": "x"}, "🔧 Server Maintenance", "dnd"),
        ({"admin_only": True, "admin_reason": "x"}, "🛡️ Admin Only (12/48)", "online"),
        ({"online": False, "admin_only": True, "admin_reason": "x"}, "🛡️ Admin Only (Offline)", "idle"),
    ])
    def test_presence(self, overrides, text, indicator):
        status = make_status(**overrides)
        panel = render_panel(status)
        assert presence_text(status) == text
        assert panel.presence == text
        assert panel.presence_status == indicator


class TestRenderPanel:
    def test_online_scenario(self):
        panel = render_panel(make_status(players=12, max_players=48, uptime_seconds=3600))
        values = panel.field_values()
        assert panel.title == "🟢 Online"
        assert "```\n12/48\n```" in values
        assert "```\n1h 0m\n```" in values
        assert panel.presence == "12/48 Players Online"

    def test_field_order(self):
        panel = render_panel(make_status())
        assert [f.name for f in panel.fields] == ["📡 Server Status", "👥 Players", "⏰ Server Uptime"]
        assert panel.fields[0].inline and panel.fields[1].inline

    def test_offline_uptime_is_zero(self):
        panel = render_panel(make_status(online=False, uptime_seconds=7200))
        assert panel.fields[-1].value == "```\n0h 0m\n```"

    def test_maintenance_panel(self):
        panel = render_panel(make_status(online=False, maintenance=True, maintenance_reason="Patch 1.2"))
        assert panel.title == "🔴 Maintenance"
        names = [f.name for f in panel.fields]
        assert "🔧 Maintenance Info" in names
        assert "🛡️ Admin Only Info" not in names
        assert "```\nPatch 1.2\n```" in panel.field_values()

    def test_admin_only_panel(self):
        panel = render_panel(make_status(admin_only=True, admin_reason="Staff test"))
        assert panel.title == "🟡 Admin Only"
        assert panel.fields[0].value == "```\n🛡️ Online (Restricted)\n```"
        assert "```\nStaff test\n```" in panel.field_values()

    def test_connect_addresses_and_restart_info(self):
        env = dict(SAMPLE_ENV, CONNECT_ADDRESSES="MAIN=play.example.net,PROXY=proxy.example.net",
                   RESTART_INFO_CHANNEL_ID="42")
        panel = render_panel(make_status(), BotSettings.from_env(env))
        names = [f.name for f in panel.fields]
        assert names == [
            "📡 Server Status",
            "👥 Players",
            "🎮 F8 CONNECT (MAIN)",
            "🎮 F8 CONNECT (PROXY)",
            "⏳ Restart Info",
            "⏰ Server Uptime",
        ]
        assert panel.fields[2].value == "```\nconnect play.example.net\n```"
        assert "<#42>" in panel.fields[4].value

    def test_render_is_deterministic(self, settings):
        status = make_status()
        assert render_panel(status, settings) == render_panel(status, settings)


class TestBuildEmbed:
    def test_embed(self, settings):
        now = datetime.datetime(2026, 1, 1, tzinfo=datetime.timezone.utc)
        panel = render_panel(make_status(), settings)
        embed = build_embed(panel, settings, now=now)
        assert "FiveM Server" in embed.title
        assert embed.description == "**🟢 Online**"
        assert embed.color == DisplayState.ONLINE.color
        assert len(embed.fields) == len(panel.fields)
        assert embed.footer.text == "FiveM Server • Updated every 1 minute"
        assert embed.timestamp == now

    def test_images(self, sample_env):
        sample_env.update(LOGO_URL="https://cdn.example.net/logo.png", BG_URL="https://cdn.example.net/bg.png")
        settings = BotSettings.from_env(sample_env)
        embed = build_embed(render_panel(make_status(), settings), settings)
        assert embed.thumbnail.url == "https://cdn.example.net/logo.png"
        assert embed.image.url == "https://cdn.example.net/bg.png"

    def test_long_server_name_is_truncated(self, sample_env):
        sample_env["SERVER_NAME"] = "x" * 400
        settings = BotSettings.from_env(sample_env)
        embed = build_embed(render_panel(make_status(), settings), settings)
        assert len(embed.title) <= 256


class TestDiscordLimits:
    def test_long_maintenance_reason_fits_field_limit(self, settings):
        status = resolve_status(RawServerReading.unreachable(), OverrideFlags(maintenance="x" * 2000))
        panel = render_panel(status, settings)
        embed = build_embed(panel, settings)

        assert max(len(f.value) for f in embed.fields) <= MAX_FIELD_LENGTH
        info = panel.fields[2]
        assert info.name == "🔧 Maintenance Info"
        assert info.value.startswith("```\nxxx")
        assert info.value.endswith("...\n```")

    def test_long_admin_reason_fits_field_limit(self):
        panel = render_panel(make_status(admin_only=True, admin_reason="y" * 5000))
        assert all(len(f.value) <= MAX_FIELD_LENGTH for f in panel.fields)

    def test_short_values_are_untouched(self):
        assert truncate_value("Patch 1.2") == "Patch 1.2"
        assert box("Patch 1.2") == "```\nPatch 1.2\n```"

    def test_truncate_value_exact_limit(self):
        assert truncate_value("a" * 10, 10) == "a" * 10
        assert truncate_value("a" * 11, 10) == "aaaaaaa..."
