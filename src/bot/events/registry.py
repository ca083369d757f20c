"""Registry for Discord bot event handlers.
"""
from __future__ import annotations

import logging

import discord

from ..startup import BotRuntime

logger = logging.getLogger(__name__)


def register_bot_events(bot: discord.Client, runtime: BotRuntime) -> None:
    """Attach event handlers to the provided bot instance.
    """

    @bot.event
    async def on_ready() -> None:
        logger.info("Logged in as %s (guilds=%d)", bot.user, len(bot.guilds))
        # on_ready also fires after reconnects; register once per process
        if runtime.commands_registered:
            return
        try:
            await runtime.register_commands(runtime.platform_for(bot))
        except Exception:
            logger.exception("Command registration failed; shutting down instead of running without commands")
            await bot.close()

    @bot.event
    async def on_interaction(interaction: discord.Interaction) -> None:
        await runtime.router.dispatch(interaction)

    @bot.event
    async def on_raw_reaction_add(payload: discord.RawReactionActionEvent) -> None:
        await runtime.router.dispatch_reaction(payload)
