"""Security utilities: role checks, interaction safety, and token validation.

Exports:
- has_role, is_protected_member
- safe_send, safe_defer
- validate_discord_token
"""

from .permissions import has_role, is_protected_member
from .interaction import safe_send, safe_defer
from .token import validate_discord_token

__all__ = [
    "has_role",
    "is_protected_member",
    "safe_send",
    "safe_defer",
    "validate_discord_token",
]
