"""Shared snapshot fixtures."""

from __future__ import annotations

import copy

import pytest

from .factories import connection_json, publisher_json


@pytest.fixture
def full_snapshot() -> dict:
    return connection_json(
        publishers=[
            publisher_json(
                "str_CAM_A",
                audioActive=True,
                videoActive=False,
                frameRate=30,
                typeOfVideo="CAMERA",
                videoDimensions='{"width":640,"height":480}',
            ),
            publisher_json("str_SCR_A", created_at=1600000000200, hasAudio=False, typeOfVideo="SCREEN"),
        ],
        subscribers=[{"streamId": "str_CAM_B", "createdAt": 1600000000300}, {"streamId": "str_CAM_C"}],
    )


@pytest.fixture
def session_snapshot() -> dict:
    connections = [
        connection_json("con_A", publishers=[publisher_json("str_A")], subscribers=[{"streamId": "str_B"}]),
        connection_json(
            "con_B",
            role="MODERATOR",
            publishers=[publisher_json("str_B")],
            subscribers=[{"streamId": "str_A"}],
        ),
        connection_json("con_C", role="SUBSCRIBER", subscribers=[{"streamId": "str_A"}, {"streamId": "str_B"}]),
    ]
    return {
        "id": "ses",
        "createdAt": 1599999999000,
        "connections": {"numberOfElements": len(connections), "content": copy.deepcopy(connections)},
    }
