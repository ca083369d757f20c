"""Helpers to start and configure the Discord bot.

This module owns the runtime state the event handlers share: configuration,
storage, and the router bound to the latest command registry snapshot.
"""

from __future__ import annotations

from typing import Any
import logging

import discord

from ..commands.platform import CommandPlatform, DiscordCommandPlatform
from ..commands.registry import CommandRegistry, SetupAllCommands
from ..commands.router import InteractionRouter
from ..core.config import AppConfig, LoadConfig
from ..db.connection import Database
from ..db.migrations import EnsureMigrated
from ..security.token import mask_token
from ..services.persistence import PersistenceService

logger = logging.getLogger(__name__)


class BotRuntime:
    """Services plus the router for the current registry snapshot.

    A registration pass that fails leaves the current router untouched; a pass
    that succeeds swaps in a router over the new snapshot.
    """

    def __init__(self, config: AppConfig, storage: PersistenceService):
        self.config = config
        self.storage = storage
        self.router = InteractionRouter(CommandRegistry.empty(), self.services())
        self.commands_registered = False

    def services(self) -> dict[str, Any]:
        return {"config": self.config, "storage": self.storage}

    def platform_for(self, bot: discord.Client) -> DiscordCommandPlatform:
        if self.config.guild_id is None:
            raise RuntimeError("GUILD_ID must be configured to register guild commands")
        if bot.application_id is None:
            raise RuntimeError("Application id unknown; register commands after the bot is ready")
        return DiscordCommandPlatform(
            bot.http,
            bot.application_id,
            self.config.guild_id,
            permissions_token=self.config.permissions_token,
        )

    async def register_commands(self, platform: CommandPlatform) -> CommandRegistry:
        """Run a full registration pass and route through its snapshot."""
        staff_roles = [self.config.staff_role_id] if self.config.staff_role_id else []
        if not staff_roles:
            logger.warning("STAFF_ROLE_ID not set; commands stay restricted to administrators")
        elif not self.config.permissions_token:
            logger.warning("PERMISSIONS_TOKEN not set; cannot grant STAFF_ROLE_ID access to commands")
            staff_roles = []
        registry = await SetupAllCommands(
            platform,
            commands_path=self.config.slash_commands_path,
            context_menus_path=self.config.context_menus_path,
            staff_role_ids=staff_roles,
        )
        self.router = InteractionRouter(registry, self.services())
        self.commands_registered = True
        return registry


def BuildRuntime(config: AppConfig | None = None) -> BotRuntime:
    """Load configuration, migrate the database, and wire services."""
    config = config or LoadConfig()
    EnsureMigrated(config.database_path)
    db = Database(config.database_path)
    return BotRuntime(config, PersistenceService(db))


def Run(bot: discord.Client, runtime: BotRuntime) -> None:
    """Attach event handlers and block running the bot."""
    from .events import registry as bot_event_registry

    token = runtime.config.discord_token
    logger.info("Using token (masked): %s", mask_token(token))
    bot_event_registry.register_bot_events(bot, runtime)
    bot.run(token, log_handler=None)
