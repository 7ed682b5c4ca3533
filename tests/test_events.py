"""Tests for event structure and wire format.

Critical scenarios tested:
- Each event serializes to {type, payload} with camelCase keys
- Distribution payload is keyed by player id
- Events are immutable
"""

import pytest
from pydantic import TypeAdapter, ValidationError

from settlers.schemas.game_engine import GamePhase, ResourceBundle
from settlers.services.game.engine import (
    AnyGameEvent,
    BuildCity,
    BuildRoad,
    BuildSettlement,
    DiceRoll,
    DistributeResources,
    EndTurn,
    StartTurn,
    TradeOffer,
)

from .conftest import PLAYER_1_ID, PLAYER_2_ID


class TestWireFormat:
    @pytest.mark.parametrize(
        ("event_cls", "event_type"),
        [
            (BuildRoad, "build-road"),
            (BuildSettlement, "build-settlement"),
            (BuildCity, "build-city"),
        ],
    )
    def test_build_events(self, event_cls, event_type):
        message = event_cls(player_id=PLAYER_1_ID, build_id=7).to_message()

        assert message == {
            "type": event_type,
            "payload": {"playerId": str(PLAYER_1_ID), "buildId": 7},
        }

    def test_turn_events(self):
        data = {"turn": 3, "phase": GamePhase.SETUP, "current_player_id": PLAYER_2_ID}

        for event in (StartTurn(**data), EndTurn(**data)):
            assert event.payload() == {
                "turn": 3,
                "phase": "setup",
                "currentPlayerId": str(PLAYER_2_ID),
            }

    def test_dice_roll(self):
        assert DiceRoll(die1=3, die2=5, total=8).to_message() == {
            "type": "DiceRoll",
            "payload": {"die1": 3, "die2": 5, "total": 8},
        }

    def test_distribute_resources_keyed_by_player(self):
        event = DistributeResources(
            resources={PLAYER_1_ID: ResourceBundle(ore=2), PLAYER_2_ID: ResourceBundle()}
        )

        assert event.to_message() == {
            "type": "distribute-resources",
            "payload": {
                str(PLAYER_1_ID): {"brick": 0, "grain": 0, "lumber": 0, "ore": 2, "wool": 0},
                str(PLAYER_2_ID): {"brick": 0, "grain": 0, "lumber": 0, "ore": 0, "wool": 0},
            },
        }

    def test_trade_offer_keeps_extra_fields(self):
        event = TradeOffer.model_validate({"playerId": PLAYER_1_ID, "give": {"brick": 1}})

        assert event.to_message()["payload"] == {"playerId": str(PLAYER_1_ID), "give": {"brick": 1}}


class TestEventModels:
    def test_events_are_frozen(self):
        event = BuildRoad(player_id=PLAYER_1_ID, build_id=1)
        with pytest.raises(ValidationError):
            event.build_id = 2

    def test_dice_faces_bounded(self):
        with pytest.raises(ValidationError):
            DiceRoll(die1=7, die2=1, total=8)

    def test_discriminated_union(self):
        adapter = TypeAdapter(AnyGameEvent)

        event = adapter.validate_python(
            {"eventType": "build-city", "playerId": str(PLAYER_1_ID), "buildId": 4}
        )

        assert isinstance(event, BuildCity)
        assert event.build_id == 4
