"""Paginated warning embeds shared by /staff warn check and the Warnings context menu."""

from __future__ import annotations

from typing import Any, Optional
from datetime import datetime, timezone
import math

import discord

from .persistence import PersistenceService
from ..commands.structures import CommandError

PAGE_SIZE = 10
SEVERITY_EMOJI = ["1️⃣", "2️⃣", "3️⃣", "4️⃣", "5️⃣", "6️⃣", "7️⃣", "8️⃣", "9️⃣", "🔟"]


def SeverityEmoji(severity: Optional[int]) -> str:
    if severity is None or not 1 <= severity <= len(SEVERITY_EMOJI):
        return "❓"
    return SEVERITY_EMOJI[severity - 1]


def BuildWarningsPage(storage: PersistenceService, user_id: int, display_name: str, page: int) -> tuple[discord.Embed, int]:
    """Render one page of a member's warnings.

    Returns:
        tuple[discord.Embed, int]: The embed and the total number of pages.

    Raises:
        CommandError: If the page is invalid or the member has no warnings.
    """
    if page < 1:
        raise CommandError("Invalid page number.")
    total = storage.count_warnings(user_id)
    if total == 0:
        raise CommandError("This user does not have any warnings.")
    num_pages = math.ceil(total / PAGE_SIZE)

    warnings: list[dict[str, Any]] = storage.list_warnings(user_id, skip=(page - 1) * PAGE_SIZE, take=PAGE_SIZE)
    if not warnings:
        raise CommandError(f"This page does not exist. There are {num_pages} pages available.")

    average = sum(int(w.get("severity") or 5) for w in warnings) / len(warnings)
    embed = discord.Embed(color=discord.Color.from_rgb(min(255, int(255 * average / 10)), 0, 0))
    embed.set_author(name=f"{display_name}'s warnings")
    embed.set_footer(text=f"Page {page}/{num_pages}")
    for w in warnings:
        created: Optional[datetime] = w.get("created_at")
        if created is not None and created.tzinfo is None:
            created = created.replace(tzinfo=timezone.utc)  # SQLite CURRENT_TIMESTAMP is UTC
        when = discord.utils.format_dt(created, "R") if created is not None else "unknown"
        embed.add_field(name=str(w["reason"])[:256], value=f"{SeverityEmoji(w.get('severity'))} {w['type']}\n{when}", inline=False)
    return embed, num_pages
