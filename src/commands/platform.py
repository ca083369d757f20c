"""Boundary to the Discord application-command endpoints.

The assembler only talks to a ``CommandPlatform``; the Discord implementation
uses the bot's HTTP client so no command tree object is involved.

Command permissions cannot be written with the bot token. Discord only accepts
that endpoint with an OAuth2 bearer token carrying the
``applications.commands.permissions.update`` scope, so permission updates go
out on their own aiohttp session.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Protocol, Sequence
import logging

import aiohttp
from discord.http import HTTPClient, Route

logger = logging.getLogger(__name__)

ROLE_PERMISSION_TYPE = 1


@dataclass(frozen=True, slots=True)
class RegisteredCommand:
    """A command as stored by the platform after registration."""
    id: int
    name: str
    type: int


class CommandPlatform(Protocol):
    async def set_commands(self, descriptors: Sequence[dict[str, Any]]) -> list[RegisteredCommand]:
        """Replace every registered command with ``descriptors``."""
        ...

    async def set_permissions(self, command_id: int, role_ids: Sequence[int]) -> None:
        """Allow only ``role_ids`` to use the command."""
        ...


class DiscordCommandPlatform:
    """Guild-scoped command registration over discord.py's HTTP client.

    Args:
        http: The bot's HTTP client, used for the command overwrite.
        application_id: Application owning the commands.
        guild_id: Guild the commands are registered in.
        permissions_token: OAuth2 bearer token for permission updates.
        session: Optional aiohttp session reused for permission updates.
    """

    def __init__(
        self,
        http: HTTPClient,
        application_id: int,
        guild_id: int,
        *,
        permissions_token: Optional[str] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self._http = http
        self._application_id = application_id
        self._guild_id = guild_id
        self._permissions_token = permissions_token
        self._session = session

    async def set_commands(self, descriptors: Sequence[dict[str, Any]]) -> list[RegisteredCommand]:
        # Bulk overwrite does not reliably apply diffs; clear first, then set
        await self._http.bulk_upsert_guild_commands(self._application_id, self._guild_id, [])
        saved = await self._http.bulk_upsert_guild_commands(self._application_id, self._guild_id, list(descriptors))  # type: ignore[arg-type]
        logger.info("Registered %d application commands in guild %s", len(saved), self._guild_id)
        return [RegisteredCommand(id=int(s["id"]), name=str(s["name"]), type=int(s.get("type", 1))) for s in saved]

    async def set_permissions(self, command_id: int, role_ids: Sequence[int]) -> None:
        if not self._permissions_token:
            raise RuntimeError("PERMISSIONS_TOKEN is required to update command permissions")
        route = Route(
            "PUT",
            "/applications/{application_id}/guilds/{guild_id}/commands/{command_id}/permissions",
            application_id=self._application_id,
            guild_id=self._guild_id,
            command_id=command_id,
        )
        payload = {
            "permissions": [
                {"id": str(role_id), "type": ROLE_PERMISSION_TYPE, "permission": True} for role_id in role_ids
            ]
        }
        headers = {"Authorization": f"Bearer {self._permissions_token}"}

        if self._session is not None:
            await self._put(self._session, route.url, payload, headers)
            return
        async with aiohttp.ClientSession() as session:
            await self._put(session, route.url, payload, headers)

    async def _put(
        self, session: aiohttp.ClientSession, url: str, payload: dict[str, Any], headers: dict[str, str]
    ) -> None:
        async with session.put(url, json=payload, headers=headers) as response:
            response.raise_for_status()
        logger.debug("Updated permissions at %s", url)
