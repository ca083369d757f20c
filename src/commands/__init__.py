"""Command tree assembly and interaction routing.

Unit files live under ``src/slashcommands`` (nested up to three levels) and
``src/contextmenus`` (flat). ``SetupAllCommands`` turns them into one
registration pass and returns the registry snapshot the router consumes.
"""

from .structures import (
    CommandContext,
    CommandError,
    CommandTreeError,
    ContextMenu,
    DefinitionKind,
    InteractionListener,
    ReactionListener,
    SlashCommand,
)
from .registry import CommandRegistry, SetupAllCommands

__all__ = [
    "CommandContext",
    "CommandError",
    "CommandTreeError",
    "CommandRegistry",
    "ContextMenu",
    "DefinitionKind",
    "InteractionListener",
    "ReactionListener",
    "SetupAllCommands",
    "SlashCommand",
]
