"""Shared test fixtures and factories."""

from datetime import datetime, timezone
from typing import Any, Dict

import pytest


@pytest.fixture
def now() -> datetime:
    """Fixed reference instant: 2024-01-01 12:00:00 UTC."""
    return datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def status_payload() -> Dict[str, Any]:
    """Wire document as served by Huginn."""
    return {
        "name": "Valheim",
        "version": "0.217.46",
        "players": 3,
        "max_players": 10,
        "map": "Midgard",
        "online": True,
        "bepinex": {
            "enabled": True,
            "mods": [
                {"name": "ValheimPlus.dll", "location": "BepInEx/plugins/ValheimPlus.dll"},
                {"name": "BetterUI.dll", "location": "BepInEx/plugins/BetterUI.dll"},
                {"name": "Jotunn.dll", "location": "BepInEx/plugins/Jotunn.dll"},
            ],
        },
        "jobs": [
            {"name": "AUTO_UPDATE", "enabled": True, "schedule": "*/5 * * * *"},
            {"name": "AUTO_BACKUP", "enabled": True, "schedule": "0 3 * * *"},
        ],
    }
