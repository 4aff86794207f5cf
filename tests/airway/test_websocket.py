"""Tests for the /ws/solve WebSocket handler.

Covers frame building, message validation, size limits and live solving.
"""

from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient

from airway.main import app
from airway.models import SolveResult
from airway.routes.websocket import (
    MAX_MESSAGE_SIZE,
    _build_error_frame,
    _build_geometry_frame,
)


@pytest.fixture
def client() -> TestClient:
    """Return a TestClient for the FastAPI app."""
    return TestClient(app)


class TestBuildErrorFrame:
    """Tests for the _build_error_frame helper."""

    def test_basic_error(self) -> None:
        payload = json.loads(_build_error_frame("test error"))
        assert payload == {"type": "error", "error": "test error"}

    def test_error_with_detail_and_field(self) -> None:
        payload = json.loads(_build_error_frame("bad", detail="some detail", field="tubeAngle"))
        assert payload["detail"] == "some detail"
        assert payload["field"] == "tubeAngle"


class TestBuildGeometryFrame:
    def test_camel_case_keys(self) -> None:
        payload = json.loads(_build_geometry_frame(SolveResult(status="out_of_domain", reason="x")))
        assert payload == {
            "type": "geometry",
            "status": "out_of_domain",
            "geometry": None,
            "reason": "x",
            "warnings": [],
        }


class TestSolveWebSocket:
    def test_default_sliders(self, client: TestClient) -> None:
        with client.websocket_connect("/ws/solve") as ws:
            ws.send_text(json.dumps({}))
            frame = json.loads(ws.receive_text())
        assert frame["type"] == "geometry"
        assert frame["status"] == "ok"
        assert frame["geometry"]["tubeTip"]["x"] == pytest.approx(165)

    def test_successive_messages(self, client: TestClient) -> None:
        with client.websocket_connect("/ws/solve") as ws:
            ws.send_text(json.dumps({"tubeAngle": 20}))
            first = json.loads(ws.receive_text())
            ws.send_text(json.dumps({"bladeLength": 160, "bladeRadius": 60}))
            second = json.loads(ws.receive_text())
        assert first["status"] == "ok"
        assert second["status"] == "out_of_domain"
        assert second["reason"] == "Blade length exceeds blade diameter"

    def test_binary_json_accepted(self, client: TestClient) -> None:
        with client.websocket_connect("/ws/solve") as ws:
            ws.send_bytes(json.dumps({"bladeInsertion": 50}).encode("utf-8"))
            frame = json.loads(ws.receive_text())
        assert frame["type"] == "geometry"

    def test_invalid_json(self, client: TestClient) -> None:
        with client.websocket_connect("/ws/solve") as ws:
            ws.send_text("{not json")
            frame = json.loads(ws.receive_text())
        assert frame["type"] == "error"
        assert frame["error"] == "Invalid JSON"

    def test_non_object(self, client: TestClient) -> None:
        with client.websocket_connect("/ws/solve") as ws:
            ws.send_text("[1, 2]")
            frame = json.loads(ws.receive_text())
        assert frame["error"] == "Invalid message format"

    def test_validation_error(self, client: TestClient) -> None:
        with client.websocket_connect("/ws/solve") as ws:
            ws.send_text(json.dumps({"tubeAngle": 500}))
            frame = json.loads(ws.receive_text())
        assert frame["error"] == "Validation error"
        assert "tubeAngle" in frame["detail"]
        assert frame["field"] == "tubeAngle"

    def test_non_utf8_bytes(self, client: TestClient) -> None:
        with client.websocket_connect("/ws/solve") as ws:
            ws.send_bytes(b"\xff\xfe")
            frame = json.loads(ws.receive_text())
        assert frame["error"] == "Invalid message format"

    def test_message_too_large(self, client: TestClient) -> None:
        with client.websocket_connect("/ws/solve") as ws:
            ws.send_text(" " * (MAX_MESSAGE_SIZE + 1))
            frame = json.loads(ws.receive_text())
        assert frame["error"] == "Message too large"

    def test_connection_survives_errors(self, client: TestClient) -> None:
        with client.websocket_connect("/ws/solve") as ws:
            ws.send_text("oops")
            assert json.loads(ws.receive_text())["type"] == "error"
            ws.send_text("{}")
            assert json.loads(ws.receive_text())["type"] == "geometry"
