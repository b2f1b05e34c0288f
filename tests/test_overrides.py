"""Tests de los archivos marcador y de la resolución de estado."""

import pytest

from fivemstatus.models import OverrideFlags, RawServerReading
from fivemstatus.overrides import (
    DEFAULT_ADMIN_REASON,
    DEFAULT_MAINTENANCE_REASON,
    MarkerFileStore,
    resolve_status,
)

ONLINE = RawServerReading(reachable=True, players=12, max_players=48, uptime_seconds=3600)
OFFLINE = RawServerReading.unreachable()


@pytest.fixture()
def store(tmp_path):
    return MarkerFileStore(tmp_path / "maintenance.txt", tmp_path / "admin-only.txt")


class TestMarkerFileStore:
    def test_no_markers(self, store):
        assert store.read_override_flags() == OverrideFlags()

    def test_maintenance_content_is_trimmed(self, store):
        store.maintenance_path.write_text("  Patch 1.2\n", encoding="utf-8")
        assert store.read_override_flags() == OverrideFlags(maintenance="Patch 1.2")

    def test_empty_marker_is_present(self, store):
        store.admin_only_path.write_text("\n", encoding="utf-8")
        assert store.read_override_flags() == OverrideFlags(admin_only="")

    def test_maintenance_short_circuits_admin_only(self, store):
        store.maintenance_path.write_text("Patch", encoding="utf-8")
        store.admin_only_path.write_text("Staff test", encoding="utf-8")
        flags = store.read_override_flags()
        assert flags.maintenance == "Patch"
        assert flags.admin_only is None

    def test_read_failure_is_treated_as_absent(self, store):
        # Un directorio en lugar de archivo: exists() es True pero read_text falla
        store.maintenance_path.mkdir()
        store.admin_only_path.write_text("Staff test", encoding="utf-8")
        assert store.read_override_flags() == OverrideFlags(admin_only="Staff test")

    def test_markers_are_read_fresh_each_call(self, store):
        assert store.read_override_flags().maintenance is None
        store.maintenance_path.write_text("now", encoding="utf-8")
        assert store.read_override_flags().maintenance == "now"
        store.maintenance_path.unlink()
        assert store.read_override_flags().maintenance is None


class TestResolveStatus:
    @pytest.mark.parametrize("reading", [ONLINE, OFFLINE])
    @pytest.mark.parametrize("content,expected", [
        ("Patch 1.2", "Patch 1.2"),
        ("", DEFAULT_MAINTENANCE_REASON),
    ])
    def test_maintenance_forces_offline(self, reading, content, expected):
        status = resolve_status(reading, OverrideFlags(maintenance=content))
        assert status.online is False
        assert status.maintenance is True
        assert status.maintenance_reason == expected
        assert status.admin_only is False

    def test_maintenance_keeps_counters(self):
        status = resolve_status(ONLINE, OverrideFlags(maintenance="x"))
        assert (status.players, status.max_players, status.uptime_seconds) == (12, 48, 3600)

    @pytest.mark.parametrize("reading", [ONLINE, OFFLINE])
    def test_admin_only_passes_reachability_through(self, reading):
        status = resolve_status(reading, OverrideFlags(admin_only="Staff test"))
        assert status.admin_only is True
        assert status.online == reading.reachable
        assert status.admin_reason == "Staff test"
        assert status.maintenance is False

    def test_admin_only_default_reason(self):
        status = resolve_status(ONLINE, OverrideFlags(admin_only=""))
        assert status.admin_reason == DEFAULT_ADMIN_REASON

    def test_both_markers_maintenance_wins(self):
        status = resolve_status(ONLINE, OverrideFlags(maintenance="m", admin_only="a"))
        assert status.maintenance is True
        assert status.admin_only is False
        assert status.admin_reason is None

    def test_plain_pass_through(self):
        status = resolve_status(ONLINE, OverrideFlags())
        assert status.online is True
        assert status.maintenance is False
        assert status.admin_only is False
        assert status.player_display == "12/48"

    def test_timeout_with_maintenance_marker(self):
        status = resolve_status(OFFLINE, OverrideFlags(maintenance="Patch 1.2"))
        assert status.online is False
        assert status.maintenance is True
        assert status.maintenance_reason == "Patch 1.2"
