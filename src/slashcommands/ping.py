from src.commands.structures import CommandContext, SlashCommand

command = SlashCommand(description="Check that the bot is responding", options=[])


@command.set_handler
async def _ping(ctx: CommandContext) -> None:
    latency_ms = round(ctx.interaction.client.latency * 1000)
    await ctx.send(f"Pong! ({latency_ms} ms)", ephemeral=True)
