"""
Tests for the /ws endpoint, driven through the FastAPI test client.
"""

import pytest
from fastapi import WebSocketDisconnect


def greet(ws) -> str:
    message = ws.receive_json()
    assert message["type"] == "connected"
    return message["data"]["playerName"]


def receive_both(first, second, expected_type: str) -> tuple[dict, dict]:
    a, b = first.receive_json(), second.receive_json()
    assert a["type"] == expected_type, a
    assert b["type"] == expected_type, b
    return a["data"], b["data"]


def pair(ws1, ws2) -> tuple[dict, dict]:
    """Queue ws1 then ws2 and return both gameStarted payloads."""
    ws1.send_json({"type": "findMatch"})
    assert ws1.receive_json()["type"] == "searching"
    ws2.send_json({"type": "findMatch"})
    return receive_both(ws1, ws2, "gameStarted")


def send(ws, msg_type: str, **data) -> None:
    ws.send_json({"type": msg_type, "data": data})


class TestLobby:
    """Tests for connecting and matchmaking."""

    def test_connected_greeting(self, scripted_client):
        with scripted_client.websocket_connect("/ws") as ws:
            name = greet(ws)
            assert name.rstrip("0123456789")

    def test_search_and_cancel(self, scripted_client):
        with scripted_client.websocket_connect("/ws") as ws:
            greet(ws)
            ws.send_json({"type": "findMatch"})
            searching = ws.receive_json()
            assert searching["type"] == "searching"
            assert searching["data"]["message"]

            ws.send_json({"type": "cancelSearch"})
            assert ws.receive_json()["type"] == "searchCancelled"

            ws.send_json({"type": "cancelSearch"})
            error = ws.receive_json()
            assert error["type"] == "gameError"
            assert error["data"]["code"] == "NotInGame"

    def test_game_started_for_both(self, scripted_client):
        with scripted_client.websocket_connect("/ws") as ws1, \
                scripted_client.websocket_connect("/ws") as ws2:
            name1, name2 = greet(ws1), greet(ws2)
            first, second = pair(ws1, ws2)

            assert first["yourPlayerIndex"] == 0
            assert second["yourPlayerIndex"] == 1
            assert first["yourName"] == name1
            assert first["opponentName"] == name2
            assert second["yourName"] == name2
            assert second["opponentName"] == name1
            assert first["gameId"] == second["gameId"]
            assert first["gameState"] == second["gameState"]
            assert first["gameState"]["currentTurn"] == 0
            assert len(first["gameState"]["board"]) == 25

    def test_find_match_while_playing(self, scripted_client):
        with scripted_client.websocket_connect("/ws") as ws1, \
                scripted_client.websocket_connect("/ws") as ws2:
            greet(ws1)
            greet(ws2)
            pair(ws1, ws2)

            ws1.send_json({"type": "findMatch"})
            error = ws1.receive_json()
            assert error["type"] == "gameError"


class TestErrors:
    """Tests for malformed traffic."""

    def test_unknown_message_type(self, scripted_client):
        with scripted_client.websocket_connect("/ws") as ws:
            greet(ws)
            ws.send_json({"type": "dance"})
            error = ws.receive_json()
            assert error["type"] == "gameError"
            assert error["data"]["code"] == "UnknownMessage"

    def test_missing_type(self, scripted_client):
        with scripted_client.websocket_connect("/ws") as ws:
            greet(ws)
            ws.send_json({"data": {}})
            assert ws.receive_json()["data"]["code"] == "InvalidPayload"

    @pytest.mark.parametrize("data", [
        {"cardIndex": "0", "tileIndex": 15},
        {"cardIndex": 0},
        {"cardIndex": True, "tileIndex": 15},
        {"cardIndex": 0.0, "tileIndex": 15},
    ])
    def test_invalid_payload(self, scripted_client, data):
        with scripted_client.websocket_connect("/ws") as ws:
            greet(ws)
            ws.send_json({"type": "playCard", "data": data})
            error = ws.receive_json()
            assert error["type"] == "gameError"
            assert error["data"]["code"] == "InvalidPayload"

    def test_intent_without_match(self, scripted_client):
        with scripted_client.websocket_connect("/ws") as ws:
            greet(ws)
            ws.send_json({"type": "nextPhase"})
            error = ws.receive_json()
            assert error["type"] == "gameError"
            assert error["data"]["code"] == "NotInGame"

    def test_invalid_json_closes_socket(self, scripted_client):
        with scripted_client.websocket_connect("/ws") as ws:
            greet(ws)
            ws.send_text("{not json")
            with pytest.raises(WebSocketDisconnect) as exc_info:
                ws.receive_json()
            assert exc_info.value.code == 1007


class TestGameplay:
    """Tests for intents inside a match."""

    def test_rejection_goes_to_sender_only(self, scripted_client):
        with scripted_client.websocket_connect("/ws") as ws1, \
                scripted_client.websocket_connect("/ws") as ws2:
            greet(ws1)
            greet(ws2)
            pair(ws1, ws2)

            send(ws2, "nextPhase")
            error = ws2.receive_json()
            assert error["type"] == "gameError"
            assert error["data"]["code"] == "NotYourTurn"
            assert error["data"]["message"]

            # The next thing player 0 sees is their own update, not the error
            send(ws1, "nextPhase")
            first, second = receive_both(ws1, ws2, "gameUpdate")
            assert first == second
            assert first["currentTurn"] == 1

    def test_play_card_updates_both(self, scripted_client):
        with scripted_client.websocket_connect("/ws") as ws1, \
                scripted_client.websocket_connect("/ws") as ws2:
            greet(ws1)
            greet(ws2)
            pair(ws1, ws2)

            send(ws1, "playCard", cardIndex=0, tileIndex=20)
            state, _ = receive_both(ws1, ws2, "gameUpdate")
            assert state["board"][20]["type"] == "SCOUT"
            assert state["board"][20]["owner"] == 0
            assert state["players"][0]["mana"] == 0
            assert len(state["players"][0]["hand"]) == 4

    def test_rule_violation_code(self, scripted_client):
        with scripted_client.websocket_connect("/ws") as ws1, \
                scripted_client.websocket_connect("/ws") as ws2:
            greet(ws1)
            greet(ws2)
            pair(ws1, ws2)

            send(ws1, "playCard", cardIndex=0, tileIndex=2)
            error = ws1.receive_json()
            assert error["data"]["code"] == "InvalidSpawnZone"

    def test_full_match_to_game_over(self, scripted_client):
        with scripted_client.websocket_connect("/ws") as ws1, \
                scripted_client.websocket_connect("/ws") as ws2:
            greet(ws1)
            greet(ws2)
            pair(ws1, ws2)

            send(ws1, "playCard", cardIndex=0, tileIndex=15)
            receive_both(ws1, ws2, "gameUpdate")
            send(ws1, "nextPhase")
            receive_both(ws1, ws2, "gameUpdate")

            send(ws2, "playCard", cardIndex=0, tileIndex=5)
            receive_both(ws1, ws2, "gameUpdate")
            send(ws2, "nextPhase")
            state, _ = receive_both(ws1, ws2, "gameUpdate")
            assert state["turnNumber"] == 2

            send(ws1, "moveUnit", fromIndex=15, toIndex=10)
            state, _ = receive_both(ws1, ws2, "gameUpdate")
            assert state["board"][10]["movedThisTurn"] is True

            send(ws1, "attackUnit", attackerIndex=10, targetIndex=5)
            state, _ = receive_both(ws1, ws2, "gameUpdate")
            assert state["board"][5] is None
            assert state["status"] == "FINISHED"
            assert state["winner"] == 0

            over, _ = receive_both(ws1, ws2, "gameOver")
            assert over == {"winner": 0}

            # The match is gone, so further intents have no game
            send(ws1, "nextPhase")
            assert ws1.receive_json()["data"]["code"] == "NotInGame"
