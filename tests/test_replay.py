"""Tests for applying committed events and for whole-game flows.

Critical scenarios tested:
- Replaying events updates ownership, ledgers and turn data
- Playing-phase builds are charged, setup builds are free
- A full setup round into the first playing turn
- Allowance is never exceeded by replayed commits
"""

from collections import Counter

import pytest

from settlers.schemas.board import TileType
from settlers.schemas.game_engine import (
    Allowance,
    Game,
    GamePhase,
    GameSettings,
    PlayerAttributes,
    ResourceBundle,
)
from settlers.services.game import initialize_game
from settlers.services.game.engine import (
    ActionType,
    BuildCity,
    BuildRoad,
    BuildSettlement,
    DistributeResources,
    StartTurn,
    apply_events,
    create_default_registry,
    get_buildable_edges_for_player,
    process_action,
    start,
)

from .conftest import PLAYER_1_ID, PLAYER_2_ID, RICH, fixed_dice, request, top_corner


@pytest.fixture
def registry():
    return create_default_registry(auto_end_setup_turn=False)


def _commit(game: Game, registry, player_id, action_type, roll_die=None, **data) -> Game:
    result = process_action(game, request(player_id, action_type, **data), roll_die=roll_die, registry=registry)
    assert result.success, f"{result.error_code}: {result.error_message}"
    return apply_events(game, result.events)


class TestApplyEvents:
    def test_does_not_modify_input(self, setup_game: Game):
        corner = top_corner(setup_game)

        new_game = apply_events(setup_game, [BuildSettlement(player_id=PLAYER_1_ID, build_id=corner.id)])

        assert setup_game.board.get_corner(corner.id).owner is None
        assert new_game.board.get_corner(corner.id).owner == PLAYER_1_ID
        assert new_game.board.get_corner(corner.id).settlement

    def test_setup_builds_are_free(self, setup_game: Game):
        corner = top_corner(setup_game)

        new_game = apply_events(
            setup_game,
            [
                BuildSettlement(player_id=PLAYER_1_ID, build_id=corner.id),
                BuildRoad(player_id=PLAYER_1_ID, build_id=corner.edges[0]),
            ],
        )

        assert new_game.players[0].resources == ResourceBundle()

    def test_playing_builds_are_charged(self, playing_game: Game):
        corner = top_corner(playing_game)

        new_game = apply_events(
            playing_game,
            [
                BuildRoad(player_id=PLAYER_1_ID, build_id=corner.edges[1]),
                BuildCity(player_id=PLAYER_1_ID, build_id=corner.id),
            ],
        )

        assert new_game.players[0].resources == RICH.subtract(
            ResourceBundle(lumber=1, brick=1, ore=3, grain=2)
        )
        assert new_game.board.get_corner(corner.id).city
        assert new_game.board.get_corner(corner.id).settlement

    def test_cannot_overdraw(self, playing_game: Game):
        playing_game.players[0].resources = ResourceBundle()

        with pytest.raises(ValueError):
            apply_events(playing_game, [BuildCity(player_id=PLAYER_1_ID, build_id=top_corner(playing_game).id)])

    def test_distribution_credits_ledgers(self, setup_game: Game):
        new_game = apply_events(
            setup_game,
            [DistributeResources(resources={PLAYER_1_ID: ResourceBundle(ore=1), PLAYER_2_ID: ResourceBundle(wool=2)})],
        )

        assert new_game.players[0].resources == ResourceBundle(ore=1)
        assert new_game.players[1].resources == ResourceBundle(wool=2)

    def test_start_turn_moves_turn(self, setup_game: Game):
        new_game = apply_events(
            setup_game,
            [StartTurn(turn=5, phase=GamePhase.PLAYING, current_player_id=PLAYER_2_ID)],
        )

        assert new_game.turn == 5
        assert new_game.phase == GamePhase.PLAYING
        assert new_game.current_player.player_id == PLAYER_2_ID


class TestFullSetup:
    def test_setup_rounds_into_first_roll(self, registry):
        game = initialize_game(
            GameSettings(
                player_attributes=[
                    PlayerAttributes(player_id=PLAYER_1_ID, name="Alice"),
                    PlayerAttributes(player_id=PLAYER_2_ID, name="Bob"),
                ]
            )
        )
        game.setup_rounds = 2
        board = game.board
        spots = {
            # turn: (player, corner) - corners on opposite ends of the board
            1: (PLAYER_1_ID, board.tiles[0].corners[0]),
            2: (PLAYER_2_ID, board.tiles[16].corners[0]),
            3: (PLAYER_2_ID, board.tiles[18].corners[0]),
            4: (PLAYER_1_ID, board.tiles[2].corners[0]),
        }

        game = apply_events(game, start(game))
        assert start(game) == []

        for turn, (player_id, corner_id) in spots.items():
            assert game.turn == turn
            assert game.current_player_id == player_id
            edge_id = game.board.get_corner(corner_id).edges[0]
            game = _commit(game, registry, player_id, ActionType.BUILD_SETTLEMENT, buildId=corner_id)
            game = _commit(game, registry, player_id, ActionType.BUILD_ROAD, buildId=edge_id)
            game = _commit(game, registry, player_id, ActionType.END_TURN, roll_die=fixed_dice(3, 4))

        assert game.turn == 5
        assert game.phase == GamePhase.PLAYING
        assert game.current_player_id == PLAYER_1_ID

        def grant(corner_id: int) -> ResourceBundle:
            counts = Counter(
                t.type for t in game.board.tiles if corner_id in t.corners and t.type != TileType.DESERT
            )
            return ResourceBundle(**{k.value: v for k, v in counts.items()})

        # Only second settlements pay out; the first playing roll was a 7
        assert game.players[0].resources == grant(spots[4][1])
        assert game.players[1].resources == grant(spots[3][1])
        assert len(game.board.query_corners(owner=PLAYER_1_ID)) == 2
        assert len(game.board.query_edges(owner=PLAYER_2_ID)) == 2


class TestAllowanceInvariant:
    def test_roads_stop_at_allowance(self, playing_game: Game, registry):
        playing_game.allowance = Allowance(roads=4)
        game = playing_game
        last = None

        for _ in range(6):
            target = get_buildable_edges_for_player(game.board, PLAYER_1_ID)[0]
            last = process_action(game, request(PLAYER_1_ID, ActionType.BUILD_ROAD, buildId=target.id), registry=registry)
            if last.success:
                game = apply_events(game, last.events)
            assert len(game.board.query_edges(owner=PLAYER_1_ID)) <= 4

        assert len(game.board.query_edges(owner=PLAYER_1_ID)) == 4
        assert not last.success
        assert last.error_code == "INVALID_ALLOWANCE"

    def test_cities_stop_at_allowance(self, playing_game: Game, registry):
        playing_game.allowance = Allowance(cities=1)
        corner = top_corner(playing_game)

        game = _commit(playing_game, registry, PLAYER_1_ID, ActionType.BUILD_CITY, buildId=corner.id)
        result = process_action(game, request(PLAYER_1_ID, ActionType.BUILD_CITY, buildId=corner.id), registry=registry)

        assert not result.success
        assert len(game.board.query_corners(owner=PLAYER_1_ID, city=True)) == 1
