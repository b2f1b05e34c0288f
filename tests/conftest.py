"""Fixtures compartidas para los tests de FiveMStatus."""

from typing import Any, Dict

import pytest

from fivemstatus.config import BotSettings
from fivemstatus.models import ResolvedStatus

SAMPLE_ENV: Dict[str, str] = {
    "BOT_TOKEN": "token-123",
    "CHANNEL_ID": "1444684560418865245",
    "CFX_SERVER_ID": "8r7365",
}


@pytest.fixture()
def sample_env() -> Dict[str, str]:
    return dict(SAMPLE_ENV)


@pytest.fixture()
def settings() -> BotSettings:
    return BotSettings.from_env(SAMPLE_ENV)


def make_status(**overrides: Any) -> ResolvedStatus:
    values: Dict[str, Any] = {
        "online": True,
        "players": 12,
        "max_players": 48,
        "uptime_seconds": 3600,
    }
    values.update(overrides)
    return ResolvedStatus(**values)
