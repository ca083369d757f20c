import discord

from src.commands.structures import CommandContext, CommandError, SlashCommand

command = SlashCommand(
    description="Enables slow mode in the channel",
    options=[
        {
            "name": "time",
            "description": "Time for slowmode in seconds. 0 = off",
            "required": True,
            "type": discord.AppCommandOptionType.integer.value,
        }
    ],
)


@command.set_handler
async def _slowmode(ctx: CommandContext) -> None:
    seconds = int(ctx.opts["time"])
    if seconds < 0:
        raise CommandError("Must be non-negative")
    channel = ctx.channel
    if not isinstance(channel, discord.TextChannel):
        raise CommandError("Slowmode can only be set in a text channel.")

    await ctx.defer()
    await channel.edit(slowmode_delay=seconds)

    embed = discord.Embed()
    embed.set_author(name=f"Slowmode {'enabled' if seconds else 'disabled'}")
    if seconds:
        embed.add_field(name="Time (seconds)", value=str(seconds))
    await ctx.send(embeds=[embed])
