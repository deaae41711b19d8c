"""Screen navigation as a state machine driven by typed commands."""
from .commands import COMMAND_TYPES, Command, CommandChannel, command_from_dict
from .router import NavigationContext, NavigationError, ViewRouter, ViewState, resolve_transition

__all__ = [
    "COMMAND_TYPES",
    "Command",
    "CommandChannel",
    "command_from_dict",
    "NavigationContext",
    "NavigationError",
    "ViewRouter",
    "ViewState",
    "resolve_transition",
]
