"""
View router.

The top-level screen selection as an explicit state machine: one current
view plus a context record, changed only through typed commands looked up in
a transition table. A (view, command) pair with no entry is rejected rather
than producing some half-valid combination of screens.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple, Type

from .commands import (
    AddEffort,
    BackToDashboard,
    BuildWorkout,
    Command,
    CommandChannel,
    EditEffort,
    OpenAllPlans,
    OpenPlanBuilder,
    OpenStrengthLogger,
    PlanSelected,
    SelectDate,
    SelectWorkout,
    WorkoutSaved,
)

logger = logging.getLogger(__name__)


class ViewState(str, Enum):
    DASHBOARD = "dashboard"
    BUILDER = "builder"
    STRENGTH_LOGGER = "strength_logger"
    MOBILITY_LOGGER = "mobility_logger"
    PILATES_YOGA_LOGGER = "pilates_yoga_logger"
    PLAN_BUILDER = "plan_builder"
    ALL_PLANS = "all_plans"
    SUMMARY = "summary"


STRENGTH_LOGGER_EFFORTS = ("strength_logger", "log-strength", "log-planned-strength")
LOGGER_VIEWS = (
    ViewState.BUILDER,
    ViewState.STRENGTH_LOGGER,
    ViewState.MOBILITY_LOGGER,
    ViewState.PILATES_YOGA_LOGGER,
)


class NavigationError(RuntimeError):
    """No transition is defined for the current view and command."""


@dataclass(frozen=True)
class NavigationContext:
    """What the current screen is showing."""
    selected_date: Optional[str] = None
    builder_type: Optional[str] = None
    builder_source_context: Optional[str] = None
    selected_workout: Optional[Dict[str, Any]] = None
    workout_being_edited: Optional[Dict[str, Any]] = None
    planned_workout: Optional[Dict[str, Any]] = None

    def cleared(self) -> "NavigationContext":
        """Drop everything screen-specific; the calendar date survives."""
        return NavigationContext(selected_date=self.selected_date)


Transition = Tuple[ViewState, NavigationContext]
Handler = Callable[[NavigationContext, Any], Transition]


def _add_effort(ctx: NavigationContext, cmd: AddEffort) -> Transition:
    ctx = replace(ctx.cleared(), selected_date=cmd.date or ctx.selected_date)
    if cmd.effort_type in STRENGTH_LOGGER_EFFORTS:
        return ViewState.STRENGTH_LOGGER, ctx
    if cmd.effort_type == "log-mobility":
        return ViewState.MOBILITY_LOGGER, ctx
    if cmd.effort_type == "log-pilates-yoga":
        return ViewState.PILATES_YOGA_LOGGER, ctx
    return ViewState.BUILDER, replace(ctx, builder_type=cmd.effort_type)


def _edit_effort(ctx: NavigationContext, cmd: EditEffort) -> Transition:
    workout_type = str(cmd.workout.get("type") or "").lower()
    ctx = replace(ctx.cleared(), workout_being_edited=cmd.workout)
    if workout_type == "strength":
        return ViewState.STRENGTH_LOGGER, ctx
    return ViewState.BUILDER, replace(ctx, builder_type=workout_type or None)


def _select_workout(ctx: NavigationContext, cmd: SelectWorkout) -> Transition:
    return ViewState.SUMMARY, replace(ctx.cleared(), selected_workout=cmd.workout)


def _open_strength_logger(ctx: NavigationContext, cmd: OpenStrengthLogger) -> Transition:
    return ViewState.STRENGTH_LOGGER, replace(ctx.cleared(), planned_workout=cmd.planned)


def _open_all_plans(ctx: NavigationContext, cmd: OpenAllPlans) -> Transition:
    return ViewState.ALL_PLANS, ctx.cleared()


def _open_plan_builder(ctx: NavigationContext, cmd: OpenPlanBuilder) -> Transition:
    return ViewState.PLAN_BUILDER, ctx.cleared()


def _build_workout(ctx: NavigationContext, cmd: BuildWorkout) -> Transition:
    return ViewState.BUILDER, replace(
        ctx.cleared(),
        builder_type=cmd.workout_type,
        builder_source_context=cmd.source_context,
    )


def _plan_selected(ctx: NavigationContext, cmd: PlanSelected) -> Transition:
    return ViewState.ALL_PLANS, ctx.cleared()


def _workout_saved(ctx: NavigationContext, cmd: WorkoutSaved) -> Transition:
    return ViewState.SUMMARY, replace(ctx.cleared(), selected_workout=cmd.workout)


def _select_date(ctx: NavigationContext, cmd: SelectDate) -> Transition:
    return ViewState.DASHBOARD, replace(ctx, selected_date=cmd.date)


def _back_to_dashboard(ctx: NavigationContext, cmd: BackToDashboard) -> Transition:
    return ViewState.DASHBOARD, ctx.cleared()


# (view, command type) -> handler; a None view applies from any view
TRANSITIONS: Dict[Tuple[Optional[ViewState], Type[Command]], Handler] = {
    (ViewState.DASHBOARD, AddEffort): _add_effort,
    (ViewState.DASHBOARD, EditEffort): _edit_effort,
    (ViewState.SUMMARY, EditEffort): _edit_effort,
    (ViewState.DASHBOARD, SelectWorkout): _select_workout,
    (ViewState.ALL_PLANS, SelectWorkout): _select_workout,
    (ViewState.DASHBOARD, SelectDate): _select_date,
    (ViewState.DASHBOARD, OpenAllPlans): _open_all_plans,
    (ViewState.DASHBOARD, OpenPlanBuilder): _open_plan_builder,
    (ViewState.ALL_PLANS, OpenPlanBuilder): _open_plan_builder,
    (ViewState.DASHBOARD, BuildWorkout): _build_workout,
    (ViewState.SUMMARY, BuildWorkout): _build_workout,
    (ViewState.PLAN_BUILDER, PlanSelected): _plan_selected,
    (None, OpenStrengthLogger): _open_strength_logger,
    (None, BackToDashboard): _back_to_dashboard,
}
for _view in LOGGER_VIEWS:
    TRANSITIONS[(_view, WorkoutSaved)] = _workout_saved


def resolve_transition(view: ViewState, context: NavigationContext, command: Command) -> Transition:
    """
    Look up and apply the transition for a command.

    Raises:
        NavigationError: If the view has no transition for this command
    """
    handler = TRANSITIONS.get((view, type(command))) or TRANSITIONS.get((None, type(command)))
    if handler is None:
        raise NavigationError(f"No transition from {view.value} on {command.name()}")
    return handler(context, command)


Listener = Callable[[ViewState, ViewState, Command], None]


class ViewRouter:
    """Current view plus context, advanced by commands."""

    def __init__(self, view: ViewState = ViewState.DASHBOARD, context: Optional[NavigationContext] = None):
        self.view = view
        self.context = context or NavigationContext()
        self._listeners: List[Listener] = []

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def dispatch(self, command: Command) -> ViewState:
        previous = self.view
        self.view, self.context = resolve_transition(self.view, self.context, command)
        logger.debug(f"Navigation {previous.value} -> {self.view.value} on {command.name()}")
        for listener in self._listeners:
            listener(previous, self.view, command)
        return self.view

    def process(self, channel: CommandChannel) -> List[ViewState]:
        """
        Apply every queued command in FIFO order.

        A rejected command is logged and skipped; the rest still apply.
        """
        visited = []
        for command in channel.drain():
            try:
                visited.append(self.dispatch(command))
            except NavigationError as e:
                logger.warning(str(e))
        return visited
