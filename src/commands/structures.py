"""Definition kinds exported by command, context-menu and listener units.

Every unit file under the command roots exports a module attribute named
``command`` holding one of the classes below. Each class carries a
``kind`` tag so the loader can classify a unit without guessing from its shape.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, ClassVar, Mapping, Optional

import discord

from ..security.interaction import safe_defer


class DefinitionKind(str, Enum):
    """Closed set of unit variants understood by the loader."""

    COMMAND = "command"
    CONTEXT_MENU = "context_menu"
    INTERACTION_LISTENER = "interaction_listener"
    REACTION_LISTENER = "reaction_listener"


class CommandError(Exception):
    """User-facing failure raised by a handler; the message is shown to the invoker."""


class CommandTreeError(RuntimeError):
    """The command folder layout cannot be turned into a valid command tree."""


@dataclass(slots=True)
class CommandContext:
    """Per-invocation state handed to command and listener handlers.

    Attributes:
        interaction: The Discord interaction being answered.
        opts: Option values keyed by option name (raw API values).
        services: Shared services injected by the router (storage, config, ...).
    """
    interaction: discord.Interaction
    opts: dict[str, Any] = field(default_factory=dict)
    services: Mapping[str, Any] = field(default_factory=dict)

    @property
    def guild(self) -> Optional[discord.Guild]:
        return self.interaction.guild

    @property
    def user(self) -> discord.abc.User:
        return self.interaction.user

    @property
    def member(self) -> Any:
        return self.interaction.user

    @property
    def channel(self) -> Any:
        return self.interaction.channel

    def require(self, key: str) -> Any:
        """Return a required service or raise KeyError."""
        if key not in self.services:
            raise KeyError(f"Missing required service: {key}")
        return self.services[key]

    async def defer(self, *, ephemeral: bool = False) -> None:
        await safe_defer(self.interaction, ephemeral=ephemeral)

    async def send(self, content: Optional[str] = None, *, embeds: Optional[list[discord.Embed]] = None, ephemeral: bool = False) -> None:
        """Reply to the interaction, or follow up if it was already acknowledged."""
        kwargs: dict[str, Any] = {"ephemeral": ephemeral}
        if content is not None:
            kwargs["content"] = content
        if embeds:
            kwargs["embeds"] = embeds
        if not self.interaction.response.is_done():
            await self.interaction.response.send_message(**kwargs)
        else:
            await self.interaction.followup.send(**kwargs)


CommandHandler = Callable[[CommandContext], Awaitable[None]]
ListenerHandler = Callable[[CommandContext, list[str]], Awaitable[None]]
ReactionHandler = Callable[[discord.RawReactionActionEvent, Mapping[str, Any]], Awaitable[None]]


def _missing_handler_error(owner: str) -> RuntimeError:
    return RuntimeError(f"No handler set for {owner}")


class InteractionListener:
    """Handles component interactions (buttons, selects) by custom id prefix.

    The custom id of a component is ``name`` or ``name:arg1:arg2``; the
    router splits on ``:`` and passes the trailing parts as ``args``.
    """

    kind: ClassVar[DefinitionKind] = DefinitionKind.INTERACTION_LISTENER

    def __init__(self, name: str, handler: ListenerHandler):
        if not name or ":" in name:
            raise ValueError("Listener name must be non-empty and must not contain ':'")
        self.name = name
        self.handler = handler

    def custom_id(self, *args: Any) -> str:
        """Build a component custom id that routes back to this listener."""
        return ":".join([self.name, *(str(a) for a in args)])


class ReactionListener:
    """Handles raw reaction-add events, optionally filtered to one emoji."""

    kind: ClassVar[DefinitionKind] = DefinitionKind.REACTION_LISTENER

    def __init__(self, name: str, handler: ReactionHandler, *, emoji: Optional[str] = None):
        self.name = name
        self.handler = handler
        self.emoji = emoji

    def matches(self, payload: discord.RawReactionActionEvent) -> bool:
        if self.emoji is None:
            return True
        return str(payload.emoji) == self.emoji or getattr(payload.emoji, "name", None) == self.emoji


class SlashCommand:
    """A chat-input command (or subcommand) definition.

    The command name is not part of the definition; it is derived from the
    unit's file path when the command tree is assembled.

    Example:
        command = SlashCommand(description="Pong", options=[])

        @command.set_handler
        async def _(ctx: CommandContext) -> None:
            await ctx.send("pong")
    """

    kind: ClassVar[DefinitionKind] = DefinitionKind.COMMAND

    def __init__(self, description: str, options: Optional[list[dict[str, Any]]] = None):
        self.description = description
        self.options: list[dict[str, Any]] = list(options or [])
        self.handler: Optional[CommandHandler] = None
        self.interaction_listeners: dict[str, InteractionListener] = {}
        self.reaction_listeners: dict[str, ReactionListener] = {}

    @property
    def command_data(self) -> dict[str, Any]:
        """Wire schema for this command without a name."""
        return {"description": self.description, "options": self.options}

    def set_handler(self, handler: CommandHandler) -> CommandHandler:
        """Attach the invocation handler; usable as a decorator."""
        self.handler = handler
        return handler

    def add_interaction_listener(self, name: str, handler: ListenerHandler) -> InteractionListener:
        listener = InteractionListener(name, handler)
        self.interaction_listeners[name] = listener
        return listener

    def add_reaction_listener(self, name: str, handler: ReactionHandler, *, emoji: Optional[str] = None) -> ReactionListener:
        listener = ReactionListener(name, handler, emoji=emoji)
        self.reaction_listeners[name] = listener
        return listener

    async def run(self, ctx: CommandContext) -> None:
        if self.handler is None:
            raise _missing_handler_error(f"command '{self.description}'")
        await self.handler(ctx)


class ContextMenu:
    """A user or message context-menu command, registered under its display name."""

    kind: ClassVar[DefinitionKind] = DefinitionKind.CONTEXT_MENU

    def __init__(self, name: str, target: str = "user"):
        if target not in ("user", "message"):
            raise ValueError("Context menu target must be 'user' or 'message'")
        self.name = name
        self.target = target
        self.handler: Optional[CommandHandler] = None

    @property
    def command_data(self) -> dict[str, Any]:
        command_type = discord.AppCommandType.user if self.target == "user" else discord.AppCommandType.message
        return {"name": self.name, "type": command_type.value}

    def set_handler(self, handler: CommandHandler) -> CommandHandler:
        self.handler = handler
        return handler

    async def run(self, ctx: CommandContext) -> None:
        if self.handler is None:
            raise _missing_handler_error(f"context menu '{self.name}'")
        await self.handler(ctx)


def classify(obj: Any) -> Optional[DefinitionKind]:
    """Return the definition kind tag of ``obj``, or None if it is not a unit."""
    kind = getattr(type(obj), "kind", None)
    return kind if isinstance(kind, DefinitionKind) else None


__all__ = [
    "CommandContext",
    "CommandError",
    "CommandTreeError",
    "ContextMenu",
    "DefinitionKind",
    "InteractionListener",
    "ReactionListener",
    "SlashCommand",
    "classify",
]
