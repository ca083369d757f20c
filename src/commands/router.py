"""Route incoming interactions and reactions through a registry snapshot."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Mapping, Optional
import logging

import discord

from ..security.interaction import safe_send
from .descriptors import SUB_COMMAND, SUB_COMMAND_GROUP
from .registry import CommandRegistry
from .structures import CommandContext, CommandError
from .tree_walker import IDENTIFIER_SEPARATOR

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Something went wrong while handling this interaction."


def ResolveCommandIdentifier(data: Mapping[str, Any]) -> tuple[str, list[dict[str, Any]]]:
    """Return the qualified identifier and leaf options of a chat-input payload.

    Example:
        {"name": "staff", "options": [{"type": 2, "name": "warn",
         "options": [{"type": 1, "name": "check", "options": [...]}]}]}
        -> ("check:warn:staff", [...])
    """
    path = [str(data["name"])]
    options: list[dict[str, Any]] = list(data.get("options") or [])
    while options and options[0].get("type") in (SUB_COMMAND, SUB_COMMAND_GROUP):
        path.append(str(options[0]["name"]))
        options = list(options[0].get("options") or [])
    return IDENTIFIER_SEPARATOR.join(reversed(path)), options


class InteractionRouter:
    """Dispatch interactions to the handlers of one registry snapshot.

    A new registration pass produces a new router; the snapshot held here is
    never modified.
    """

    def __init__(self, registry: CommandRegistry, services: Optional[Mapping[str, Any]] = None):
        self.registry = registry
        self.services: Mapping[str, Any] = dict(services or {})

    async def dispatch(self, interaction: discord.Interaction) -> bool:
        """Handle an interaction. Returns True if a handler was found."""
        if interaction.type == discord.InteractionType.application_command:
            return await self._dispatch_application_command(interaction)
        if interaction.type == discord.InteractionType.component:
            return await self._dispatch_component(interaction)
        return False

    async def _dispatch_application_command(self, interaction: discord.Interaction) -> bool:
        data: Mapping[str, Any] = interaction.data or {}  # type: ignore[assignment]
        command_type = int(data.get("type", discord.AppCommandType.chat_input.value))

        if command_type == discord.AppCommandType.chat_input.value:
            identifier, options = ResolveCommandIdentifier(data)
            command = self.registry.commands.get(identifier)
            if command is None:
                logger.warning("No command registered for '%s'", identifier)
                await safe_send(interaction, "This command is not available.")
                return False
            ctx = CommandContext(
                interaction=interaction,
                opts={o["name"]: o.get("value") for o in options},
                services=self.services,
            )
            await self._run(ctx, identifier, command.run)
            return True

        name = str(data.get("name", ""))
        menu = self.registry.context_menus.get(name)
        if menu is None:
            logger.warning("No context menu registered for '%s'", name)
            await safe_send(interaction, "This command is not available.")
            return False
        ctx = CommandContext(interaction=interaction, opts={"target_id": data.get("target_id")}, services=self.services)
        await self._run(ctx, name, menu.run)
        return True

    async def _dispatch_component(self, interaction: discord.Interaction) -> bool:
        data: Mapping[str, Any] = interaction.data or {}  # type: ignore[assignment]
        custom_id = str(data.get("custom_id", ""))
        key, *args = custom_id.split(IDENTIFIER_SEPARATOR)
        listener = self.registry.interaction_listeners.get(key)
        if listener is None:
            # Components owned by discord.ui views are handled by discord.py itself
            logger.debug("No interaction listener for custom id '%s'", custom_id)
            return False
        ctx = CommandContext(interaction=interaction, opts={"values": data.get("values", [])}, services=self.services)

        async def _invoke(c: CommandContext) -> None:
            await listener.handler(c, args)

        await self._run(ctx, key, _invoke)
        return True

    async def dispatch_reaction(self, payload: discord.RawReactionActionEvent) -> int:
        """Fan a reaction out to every matching reaction listener.

        Returns:
            int: Number of listeners invoked.
        """
        member = getattr(payload, "member", None)
        if member is not None and getattr(member, "bot", False):
            return 0
        invoked = 0
        for key, listener in self.registry.reaction_listeners.items():
            if not listener.matches(payload):
                continue
            invoked += 1
            try:
                await listener.handler(payload, self.services)
            except Exception:
                logger.exception("Reaction listener '%s' failed", key)
        return invoked

    async def _run(self, ctx: CommandContext, label: str, runner: Callable[[CommandContext], Awaitable[None]]) -> None:
        try:
            await runner(ctx)
        except CommandError as e:
            await safe_send(ctx.interaction, str(e))
        except Exception:
            logger.exception("Handler for '%s' failed", label)
            await safe_send(ctx.interaction, GENERIC_FAILURE)
