"""Rule steps - validation and build steps chained by the action registry.

Every step takes the request context and returns a StepResult. Steps read the
committed game through the context and append events to its buffer; they
never modify the game, board or players.
"""

import logging
from collections import Counter

from pydantic import ValidationError

from settlers.schemas.board import BoardLookupError
from settlers.schemas.game_engine import BuildingKind, ResourceBundle

from .actions import BuildData
from .context import RequestContext
from .events import (
    BuildCity,
    BuildRoad,
    BuildSettlement,
    DistributeResources,
    TradeOffer,
)
from .pipeline import Step
from .placement import (
    get_buildable_corners_for_player,
    get_buildable_edges_for_player,
)
from .validation import RejectionCode, StepResult

logger = logging.getLogger(__name__)

# Keys a trade offer cannot set; the engine fills them
_RESERVED_TRADE_KEYS = frozenset({"playerId", "player_id", "eventType", "event_type"})


def _parse_build_id(ctx: RequestContext) -> tuple[int | None, StepResult | None]:
    """Read ``buildId`` from the request data.

    Returns:
        Tuple of (build_id, error_result). One will be None.
    """
    try:
        return BuildData.model_validate(ctx.data).build_id, None
    except ValidationError as e:
        logger.warning("Malformed build data: player=%s, data=%s", ctx.player_id, ctx.data)
        return None, StepResult.error(RejectionCode.VALIDATION_ERROR, str(e))


def is_current_player(ctx: RequestContext) -> StepResult:
    if ctx.player_id != ctx.game.current_player_id:
        logger.warning(
            "Rejected: not current player, current=%s, attempted=%s",
            str(ctx.game.current_player_id)[:8],
            str(ctx.player_id)[:8],
        )
        return StepResult.error(RejectionCode.NOT_CURRENT_PLAYER, "Not current player")
    return StepResult.ok()


def has_resources(cost: ResourceBundle) -> Step:
    """Step checking that the player can pay ``cost``."""

    def check(ctx: RequestContext) -> StepResult:
        if ctx.player is None or not ctx.player.resources.has(cost):
            logger.debug(
                "Insufficient resources: player=%s, cost=%s",
                str(ctx.player_id)[:8],
                cost.model_dump(),
            )
            return StepResult.error(
                RejectionCode.INSUFFICIENT_RESOURCES,
                "User does not have required resources",
            )
        return StepResult.ok()

    check.__name__ = "has_resources"
    return check


def count_owned(ctx: RequestContext, kind: BuildingKind) -> int:
    """Number of pieces of ``kind`` the acting player has on the board."""
    board = ctx.board
    if kind == BuildingKind.ROAD:
        return len(board.query_edges(owner=ctx.player_id))
    if kind == BuildingKind.SETTLEMENT:
        return len(board.query_corners(owner=ctx.player_id, settlement=True))
    return len(board.query_corners(owner=ctx.player_id, city=True))


def has_allowance(kind: BuildingKind) -> Step:
    """Step checking the player has not used up their allowance of ``kind``."""

    def check(ctx: RequestContext) -> StepResult:
        owned = count_owned(ctx, kind)
        limit = ctx.game.allowance.for_kind(kind)
        if owned >= limit:
            logger.debug(
                "Allowance exhausted: player=%s, kind=%s, owned=%d, limit=%d",
                str(ctx.player_id)[:8],
                kind.value,
                owned,
                limit,
            )
            return StepResult.error(
                RejectionCode.INVALID_ALLOWANCE,
                "User does not have allowance for this request",
            )
        return StepResult.ok()

    check.__name__ = f"has_allowance_{kind.value}"
    return check


def init_settlement(ctx: RequestContext) -> StepResult:
    """Place a free starting settlement (setup phase)."""
    board = ctx.board
    if len(board.query_corners(owner=ctx.player_id)) >= 2:
        return StepResult.error(RejectionCode.INVALID_MOVE, "Not valid move")

    build_id, error = _parse_build_id(ctx)
    if error:
        return error

    try:
        corner = board.get_corner(build_id)
    except BoardLookupError as e:
        return StepResult.error(RejectionCode.NOT_FOUND, str(e))

    if not board.is_corner_buildable(corner):
        return StepResult.error(RejectionCode.INVALID_BUILD_SPOT, "Not valid building spot")

    ctx.add_event(BuildSettlement(player_id=ctx.player_id, build_id=build_id))
    return StepResult.ok()


def init_road(ctx: RequestContext) -> StepResult:
    """Place a free starting road next to the player's newest settlement.

    The road must touch a corner owned by the player whose other edges are
    all still free, i.e. the settlement placed this setup turn. Placing the
    second starting road also grants one resource per resource tile around
    that settlement.
    """
    board = ctx.board
    owned_edges = board.query_edges(owner=ctx.player_id)
    if len(owned_edges) >= 2:
        return StepResult.error(RejectionCode.INVALID_MOVE, "Not a valid move")

    build_id, error = _parse_build_id(ctx)
    if error:
        return error

    try:
        edge = board.get_edge(build_id)
    except BoardLookupError as e:
        return StepResult.error(RejectionCode.NOT_FOUND, str(e))

    if not board.is_edge_buildable(edge):
        return StepResult.error(RejectionCode.INVALID_BUILD_SPOT, "Not a valid building spot")

    anchor = next(
        (
            corner
            for corner in board.adjacent_corners(edge)
            if corner.owner == ctx.player_id
            and all(board.is_edge_buildable(e) for e in board.adjacent_edges(corner))
        ),
        None,
    )
    if anchor is None:
        return StepResult.error(
            RejectionCode.INVALID_MOVE,
            "Road can only be built next to the last settlement",
        )

    ctx.add_event(BuildRoad(player_id=ctx.player_id, build_id=build_id))

    if len(owned_edges) == 1:
        counts = Counter(tile.type for tile in board.adjacent_tiles(anchor) if tile.is_resource)
        bundle = ResourceBundle.from_counts(counts)
        logger.info(
            "Granting starting resources: player=%s, corner=%d, resources=%s",
            str(ctx.player_id)[:8],
            anchor.id,
            bundle.model_dump(),
        )
        ctx.add_event(DistributeResources(resources={ctx.player_id: bundle}))

    return StepResult.ok()


def build_road(ctx: RequestContext) -> StepResult:
    build_id, error = _parse_build_id(ctx)
    if error:
        return error

    try:
        ctx.board.get_edge(build_id)
    except BoardLookupError as e:
        return StepResult.error(RejectionCode.NOT_FOUND, str(e))

    legal = {edge.id for edge in get_buildable_edges_for_player(ctx.board, ctx.player_id)}
    if build_id not in legal:
        logger.debug("Illegal road: requested=%d, legal=%s", build_id, sorted(legal))
        return StepResult.error(RejectionCode.INVALID_MOVE, "Not a valid spot to build")

    ctx.add_event(BuildRoad(player_id=ctx.player_id, build_id=build_id))
    return StepResult.ok()


def build_settlement(ctx: RequestContext) -> StepResult:
    build_id, error = _parse_build_id(ctx)
    if error:
        return error

    try:
        ctx.board.get_corner(build_id)
    except BoardLookupError as e:
        return StepResult.error(RejectionCode.NOT_FOUND, str(e))

    legal = {c.id for c in get_buildable_corners_for_player(ctx.board, ctx.player_id)}
    if build_id not in legal:
        logger.debug("Illegal settlement: requested=%d, legal=%s", build_id, sorted(legal))
        return StepResult.error(RejectionCode.INVALID_MOVE, "Not a valid spot to build")

    ctx.add_event(BuildSettlement(player_id=ctx.player_id, build_id=build_id))
    return StepResult.ok()


def build_city(ctx: RequestContext) -> StepResult:
    """Upgrade one of the player's settlements to a city."""
    build_id, error = _parse_build_id(ctx)
    if error:
        return error

    try:
        corner = ctx.board.get_corner(build_id)
    except BoardLookupError as e:
        return StepResult.error(RejectionCode.NOT_FOUND, str(e))

    if corner.owner != ctx.player_id or not corner.settlement or corner.city:
        return StepResult.error(RejectionCode.INVALID_MOVE, "Not a valid spot to build")

    ctx.add_event(BuildCity(player_id=ctx.player_id, build_id=build_id))
    return StepResult.ok()


def offer_trade(ctx: RequestContext) -> StepResult:
    """Broadcast the offer verbatim, stamped with the offering player."""
    offer = {k: v for k, v in ctx.data.items() if k not in _RESERVED_TRADE_KEYS}
    ctx.add_event(TradeOffer.model_validate({**offer, "playerId": ctx.player_id}))
    return StepResult.ok()
