"""Discord bot entrypoint: wires configuration, services, command registration, and event handling."""

import discord
import logging

from .bot import startup
from .security import validate_discord_token

intents = discord.Intents.default()
intents.members = True

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s", force=True)


def Run() -> None:
    """Main entry to launch the Discord bot after environment validation.

    Raises:
        SystemExit: If the Discord token is not properly configured

    Example:
        Run()  # Launches the bot if token is valid
    """
    runtime = startup.BuildRuntime()
    validate_discord_token(runtime.config.discord_token)
    bot = discord.Client(intents=intents)
    startup.Run(bot, runtime)


if __name__ == "__main__":
    Run()
