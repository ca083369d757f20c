"""Interaction safety helpers for Discord commands.
"""
from __future__ import annotations

import logging

import discord

logger = logging.getLogger(__name__)


async def safe_send(interaction: discord.Interaction, content: str, *, ephemeral: bool = True) -> None:
    """Reply or follow up depending on whether the interaction was acknowledged.

    Delivery failures are logged, not raised, so error replies never mask the
    error that triggered them.
    """
    try:
        if not interaction.response.is_done():
            await interaction.response.send_message(content, ephemeral=ephemeral)
        else:
            await interaction.followup.send(content, ephemeral=ephemeral)
    except Exception:
        try:
            await interaction.followup.send(content, ephemeral=ephemeral)
        except Exception as e:
            logger.debug("Could not deliver interaction reply: %s", e)


async def safe_defer(interaction: discord.Interaction, *, ephemeral: bool = True, thinking: bool = True) -> None:
    """Defer an interaction unless it was already acknowledged."""
    try:
        if not interaction.response.is_done():
            await interaction.response.defer(ephemeral=ephemeral, thinking=thinking)
    except Exception as e:
        logger.debug("Could not defer interaction: %s", e)
