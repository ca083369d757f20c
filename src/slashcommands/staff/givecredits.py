import discord

from src.commands.structures import CommandContext, CommandError, SlashCommand
from src.services.persistence import PersistenceService

MAX_CREDIT_CHANGE = 10_000

command = SlashCommand(
    description="Gives the specified number of credits to the user",
    options=[
        {"name": "user", "description": "The user to give credits to", "required": True, "type": discord.AppCommandOptionType.user.value},
        {"name": "credits", "description": "The amount of credits to give", "required": True, "type": discord.AppCommandOptionType.integer.value},
    ],
)


@command.set_handler
async def _give_credits(ctx: CommandContext) -> None:
    storage: PersistenceService = ctx.require("storage")
    user_id = int(ctx.opts["user"])
    credits = int(ctx.opts["credits"])
    if ctx.guild is None:
        raise CommandError("This command must be used in a server.")

    await ctx.defer()
    try:
        member = await ctx.guild.fetch_member(user_id)
    except discord.NotFound:
        raise CommandError("Could not find that user")
    if member.id == ctx.user.id:
        raise CommandError("You cannot donate credits to yourself")
    if abs(credits) > MAX_CREDIT_CHANGE:
        raise CommandError("The number of credits must be between -10,000 and 10,000")

    before, after = storage.adjust_credits(member.id, credits)

    embed = discord.Embed(title=f"Given {credits} credits")
    embed.set_author(name=member.display_name, icon_url=member.display_avatar.url)
    embed.add_field(name="Before", value=str(before))
    embed.add_field(name="After", value=str(after))
    await ctx.send(embeds=[embed])
