"""Typed navigation commands and the channel that carries them."""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Deque, Dict, List, Optional, Type

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Command:
    """Base class for navigation commands."""

    @classmethod
    def name(cls) -> str:
        return cls.__name__

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.name(), **asdict(self)}


@dataclass(frozen=True)
class AddEffort(Command):
    """User picked an effort type to log or build ("log-strength", "run", ...)."""
    effort_type: str
    date: Optional[str] = None


@dataclass(frozen=True)
class EditEffort(Command):
    workout: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SelectWorkout(Command):
    workout: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class OpenStrengthLogger(Command):
    """Open the strength logger, optionally for a planned workout."""
    planned: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class OpenAllPlans(Command):
    pass


@dataclass(frozen=True)
class OpenPlanBuilder(Command):
    pass


@dataclass(frozen=True)
class BuildWorkout(Command):
    workout_type: str
    source_context: Optional[str] = None


@dataclass(frozen=True)
class PlanSelected(Command):
    plan_id: str


@dataclass(frozen=True)
class WorkoutSaved(Command):
    workout: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SelectDate(Command):
    date: str


@dataclass(frozen=True)
class BackToDashboard(Command):
    pass


COMMAND_TYPES: Dict[str, Type[Command]] = {
    cls.__name__: cls
    for cls in (
        AddEffort,
        EditEffort,
        SelectWorkout,
        OpenStrengthLogger,
        OpenAllPlans,
        OpenPlanBuilder,
        BuildWorkout,
        PlanSelected,
        WorkoutSaved,
        SelectDate,
        BackToDashboard,
    )
}


def command_from_dict(data: Dict[str, Any]) -> Command:
    """
    Build a command from {"type": "AddEffort", ...payload}.

    Raises:
        ValueError: Unknown command type or bad payload
    """
    payload = dict(data or {})
    name = payload.pop("type", None)
    command_type = COMMAND_TYPES.get(name)
    if command_type is None:
        raise ValueError(f"Unknown command type: {name!r}")
    try:
        return command_type(**payload)
    except TypeError as e:
        raise ValueError(f"Invalid payload for {name}: {e}") from e


class CommandChannel:
    """
    FIFO channel of navigation commands.

    Deeply nested producers `send` commands; the consumer drains them in the
    order they were sent.
    """

    def __init__(self):
        self._queue: Deque[Command] = deque()
        self._subscribers: List[Callable[[Command], None]] = []

    def __len__(self) -> int:
        return len(self._queue)

    def subscribe(self, callback: Callable[[Command], None]) -> None:
        """Be told about every command as it is sent."""
        self._subscribers.append(callback)

    def send(self, command: Command) -> None:
        if not isinstance(command, Command):
            raise TypeError(f"Not a navigation command: {command!r}")
        logger.debug(f"Command queued: {command.name()}")
        self._queue.append(command)
        for callback in self._subscribers:
            callback(command)

    def drain(self) -> List[Command]:
        commands = list(self._queue)
        self._queue.clear()
        return commands
