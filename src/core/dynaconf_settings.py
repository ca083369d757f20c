from dataclasses import dataclass
from typing import Optional, Any
import os

from dynaconf import Dynaconf  # type: ignore

settings: Dynaconf = Dynaconf(  # type: ignore
    settings_files=["settings.toml", ".secrets.toml"],
    environments=True,           # allow [default], [development], [production], [testing]
    envvar_prefix="BOT",         # env vars like BOT_GUILD_ID etc.
    load_dotenv=True,            # read .env file if present
    env_switcher="DYNACONF_ENV", # switch env with DYNACONF_ENV=testing
)

_SRC_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DEFAULT_SLASH_COMMANDS_PATH = os.path.join(_SRC_DIR, "slashcommands")
DEFAULT_CONTEXT_MENUS_PATH = os.path.join(_SRC_DIR, "contextmenus")


@dataclass(frozen=True)
class AppConfig:
    """Configuration class holding all application settings.

    Values come from settings files, `BOT_`-prefixed environment variables,
    and the defaults below.
    """
    discord_token: str  # The Discord bot authentication token
    database_path: str = "bot.db"  # Path to the SQLite database file
    guild_id: Optional[int] = None  # Guild the commands are registered in
    staff_role_id: Optional[int] = None  # Role allowed to run every command
    banlog_channel_id: Optional[int] = None  # Channel receiving ban notices
    permissions_token: Optional[str] = None  # OAuth2 bearer token allowed to edit command permissions
    slash_commands_path: str = DEFAULT_SLASH_COMMANDS_PATH  # Root of the slash-command tree
    context_menus_path: str = DEFAULT_CONTEXT_MENUS_PATH  # Flat folder of context menus


def _ParseSnowflake(value: Optional[Any]) -> Optional[int]:
    """Parse an optional Discord id.

    Args:
        value: None, int, or numeric string. 0 and "" mean unset.

    Returns:
        Optional[int]: The id, or None when unset.

    Example:
        _ParseSnowflake("123") -> 123
        _ParseSnowflake(0) -> None
    """
    if value in (None, "", 0, "0"):
        return None
    return int(str(value).strip())


def GetSettings(reload: bool = False) -> AppConfig:
    """
    Return AppConfig built from Dynaconf's settings.

    Args:
        reload: Whether to reload files and environment (useful in tests). Defaults to False.

    Returns:
        AppConfig: Configuration instance with loaded values.

    Example:
        config = GetSettings()
        config = GetSettings(reload=True)  # Reload settings
    """
    try:
        if reload:
            settings.reload()  # type: ignore

        # Prefer value from settings files; if absent, fall back to unprefixed OS env DISCORD_TOKEN
        token_from_settings: Any = settings.get("DISCORD_TOKEN", None)  # type: ignore[arg-type]
        if token_from_settings in (None, ""):
            token = str(os.environ.get("DISCORD_TOKEN", ""))
        else:
            token = f"{token_from_settings}"

        return AppConfig(
            discord_token=token,
            database_path=settings.get("DB_PATH", "bot.db"),  # type: ignore
            guild_id=_ParseSnowflake(settings.get("GUILD_ID", None)),  # type: ignore
            staff_role_id=_ParseSnowflake(settings.get("STAFF_ROLE_ID", None)),  # type: ignore
            banlog_channel_id=_ParseSnowflake(settings.get("BANLOG_CHANNEL_ID", None)),  # type: ignore
            permissions_token=settings.get("PERMISSIONS_TOKEN", None) or None,  # type: ignore
            slash_commands_path=str(settings.get("SLASH_COMMANDS_PATH", DEFAULT_SLASH_COMMANDS_PATH)),  # type: ignore
            context_menus_path=str(settings.get("CONTEXT_MENUS_PATH", DEFAULT_CONTEXT_MENUS_PATH)),  # type: ignore
        )
    except Exception as e:
        raise RuntimeError(f"Failed to load settings: {e}") from e
