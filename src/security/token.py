"""Bot token checks performed before connecting."""
from __future__ import annotations


def validate_discord_token(token: str) -> None:
    """Raise SystemExit when the bot token is missing or malformed.

    Args:
        token: The token string to validate.

    Raises:
        SystemExit: If token is missing, a placeholder, or not three dot-separated parts.
    """
    if not token or token.lower() == "changeme":
        raise SystemExit("DISCORD_TOKEN not set in environment")
    if len(token.split('.')) != 3:
        raise SystemExit(
            "DISCORD_TOKEN format unexpected (should contain 2 dots). Use the bot token, not the client secret."
        )


def mask_token(token: str) -> str:
    """Return a log-safe form of the token keeping only its outer characters."""
    parts = token.split('.')
    return parts[0][:4] + "..." + parts[-1][-4:]
