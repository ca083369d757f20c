"""Role checks used by staff commands.
"""
from __future__ import annotations

from typing import Any, Iterable


def has_role(member: Any, role_id: int | None) -> bool:
    """Return True if ``member`` carries the role with ``role_id``.

    Args:
        member: A discord.Member (or anything exposing ``roles`` with ``id``).
        role_id: Role to look for; None never matches.
    """
    if role_id is None:
        return False
    roles: Iterable[Any] = getattr(member, "roles", None) or []
    return any(getattr(r, "id", None) == role_id for r in roles)


def is_protected_member(member: Any, staff_role_id: int | None) -> bool:
    """Staff members and bots cannot be targeted by moderation commands."""
    user = getattr(member, "user", member)
    return bool(getattr(user, "bot", False)) or has_role(member, staff_role_id)
