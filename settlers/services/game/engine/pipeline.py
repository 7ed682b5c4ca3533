"""Action routing and chain execution.

An ActionRegistry is a table of routes: action type x phase predicate ->
ordered steps. Dispatch picks the first matching route and runs its steps
with run_chain, which commits the buffered events only if every step passes.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from settlers.schemas.game_engine import Game, GamePhase

from .actions import ActionRequest, ActionType
from .context import DiceRoller, RequestContext, create_context
from .validation import ProcessResult, RejectionCode, StepResult

logger = logging.getLogger(__name__)

# Type aliases for steps and route predicates
Step = Callable[[RequestContext], StepResult]
PhasePredicate = Callable[[RequestContext], bool]


def in_phase(phase: GamePhase) -> PhasePredicate:
    """Predicate matching requests made while the game is in ``phase``."""

    def predicate(ctx: RequestContext) -> bool:
        return ctx.game.phase == phase

    predicate.__name__ = f"in_phase_{phase.value}"
    return predicate


def any_phase(ctx: RequestContext) -> bool:
    return True


@dataclass(frozen=True)
class Route:
    action_type: ActionType
    predicate: PhasePredicate
    steps: tuple[Step, ...]


def run_chain(steps: Sequence[Step], ctx: RequestContext) -> ProcessResult:
    """Run steps in order against the context, all or nothing.

    Each step may buffer events on the context. The first failing step stops
    the chain and every buffered event, including those from earlier steps,
    is discarded.

    Args:
        steps: Ordered rule steps.
        ctx: Fresh context for this request.

    Returns:
        ProcessResult with the full commit set, or the first step's rejection.
    """
    for step in steps:
        outcome = step(ctx)
        if not outcome.is_valid:
            logger.warning(
                "Step failed: step=%s, code=%s, message=%s, discarded_events=%d",
                getattr(step, "__name__", repr(step)),
                outcome.error_code,
                outcome.error_message,
                len(ctx.events),
            )
            ctx.events.clear()
            return ProcessResult.failure(
                outcome.error_code or RejectionCode.INVALID_MOVE,
                outcome.error_message or "Invalid action",
            )
        logger.debug("Step passed: %s", getattr(step, "__name__", repr(step)))

    return ProcessResult.ok(list(ctx.events))


class ActionRegistry:
    """Route table mapping action types to phase-selected step chains."""

    def __init__(self) -> None:
        self._routes: list[Route] = []
        self._sealed = False

    @property
    def routes(self) -> tuple[Route, ...]:
        return tuple(self._routes)

    def register(
        self,
        action_type: ActionType,
        predicate: PhasePredicate,
        steps: Sequence[Step],
    ) -> None:
        """Add a route candidate for an action type.

        Routes for the same type are tried in registration order; the first
        whose predicate accepts the request wins.

        Raises:
            RuntimeError: If the registry has been sealed.
        """
        if self._sealed:
            raise RuntimeError("Cannot register routes on a sealed registry")
        self._routes.append(Route(action_type, predicate, tuple(steps)))
        logger.debug(
            "Registered route: type=%s, predicate=%s, steps=%s",
            action_type.value,
            getattr(predicate, "__name__", repr(predicate)),
            [getattr(s, "__name__", repr(s)) for s in steps],
        )

    def seal(self) -> "ActionRegistry":
        self._sealed = True
        return self

    def select(self, ctx: RequestContext) -> Route | None:
        return next(
            (
                route
                for route in self._routes
                if route.action_type == ctx.request.type and route.predicate(ctx)
            ),
            None,
        )

    def dispatch(
        self,
        game: Game,
        request: ActionRequest,
        roll_die: DiceRoller,
    ) -> ProcessResult:
        """Route a request to its chain and run it.

        Args:
            game: Committed game state (read only).
            request: The action to perform.
            roll_die: Die source for steps that roll dice.

        Returns:
            ProcessResult with the commit set or a rejection.
        """
        ctx = create_context(game, request, roll_die)
        route = self.select(ctx)
        if route is None:
            logger.warning(
                "No route for action: type=%s, phase=%s",
                request.type.value,
                game.phase.value,
            )
            return ProcessResult.failure(
                RejectionCode.UNKNOWN_ACTION,
                f"Unknown action '{request.type.value}' in {game.phase.value} phase",
            )

        return run_chain(route.steps, ctx)
