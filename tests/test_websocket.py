"""WebSocket integration tests for real-time play."""

from __future__ import annotations

import json

import pytest
from starlette.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from glide_snake.server.app import create_app
from glide_snake.server.game_manager import GameManager
from glide_snake.server.websocket import _parse_press
from glide_snake.snake import Heading


@pytest.fixture()
def tc():
    """Starlette sync TestClient — shares a single event loop for both
    REST calls and WebSocket connections."""
    application = create_app()
    application.state.game_manager = GameManager()
    return TestClient(application)


def _create_start_game(tc):
    """Create and start a game, return (game_id, token)."""
    resp = tc.post("/games", json={"tick_rate_ms": 50, "seed": 0})
    assert resp.status_code == 201
    game_id = resp.json()["game_id"]
    token = resp.json()["token"]
    tc.post(f"/games/{game_id}/start", json={"token": token})
    return game_id, token


class TestParsePress:
    def test_valid_key(self):
        assert _parse_press(json.dumps({"key": "Left"})) == Heading.LEFT

    @pytest.mark.parametrize(
        "raw",
        [
            "not-json",
            "[]",
            "123",
            json.dumps({"key": "jump"}),
            json.dumps({"key": 3}),
            json.dumps({"direction": "up"}),
        ],
    )
    def test_invalid_messages(self, raw):
        assert _parse_press(raw) is None


class TestPlayWebSocket:
    def test_connect_and_receive_initial_state(self, tc):
        game_id, token = _create_start_game(tc)

        with tc.websocket_connect(
            f"/games/{game_id}/play?token={token}",
        ) as ws:
            state = json.loads(ws.receive_text())
            assert "tick" in state
            assert "snake" in state
            assert "frame" in state
            assert state["snake"]["heading"] == "up"

    def test_send_key_accepted(self, tc):
        game_id, token = _create_start_game(tc)

        with tc.websocket_connect(
            f"/games/{game_id}/play?token={token}",
        ) as ws:
            ws.receive_text()
            ws.send_text(json.dumps({"key": "left"}))

    def test_invalid_messages_ignored(self, tc):
        game_id, token = _create_start_game(tc)

        with tc.websocket_connect(
            f"/games/{game_id}/play?token={token}",
        ) as ws:
            ws.receive_text()
            ws.send_text("not-json")
            ws.send_text(json.dumps({"key": "sideways"}))

    def test_invalid_token_rejected(self, tc):
        game_id, _ = _create_start_game(tc)

        with pytest.raises(WebSocketDisconnect), tc.websocket_connect(
            f"/games/{game_id}/play?token=badtoken",
        ):
            pass

    def test_nonexistent_game_rejected(self, tc):
        with pytest.raises(WebSocketDisconnect), tc.websocket_connect(
            "/games/nonexistent/play?token=x",
        ):
            pass


class TestSpectateWebSocket:
    def test_spectator_receives_initial_state(self, tc):
        game_id, _ = _create_start_game(tc)

        with tc.websocket_connect(f"/games/{game_id}/spectate") as ws:
            state = json.loads(ws.receive_text())
            assert "tick" in state
            assert "food" in state

    def test_spectate_nonexistent_game(self, tc):
        with pytest.raises(WebSocketDisconnect), tc.websocket_connect(
            "/games/nonexistent/spectate",
        ):
            pass


class TestDisconnectHandling:
    def test_player_disconnect_game_continues(self, tc):
        game_id, token = _create_start_game(tc)

        with tc.websocket_connect(
            f"/games/{game_id}/play?token={token}",
        ) as ws:
            ws.receive_text()

        # Game should still be running after the player disconnects.
        resp = tc.get(f"/games/{game_id}")
        assert resp.json()["status"] in ("active", "finished")
