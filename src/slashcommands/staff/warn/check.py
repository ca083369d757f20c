import discord

from src.commands.structures import CommandContext, CommandError, SlashCommand
from src.services.persistence import PersistenceService
from src.services.warning_pages import BuildWarningsPage

command = SlashCommand(
    description="Lists the warnings of a member",
    options=[
        {"name": "user", "description": "The user to check warns for", "required": True, "type": discord.AppCommandOptionType.user.value},
        {"name": "page", "description": "Warning page number", "required": False, "type": discord.AppCommandOptionType.integer.value},
    ],
)


async def _turn_page(ctx: CommandContext, args: list[str]) -> None:
    storage: PersistenceService = ctx.require("storage")
    user_id, page = int(args[0]), int(args[1])
    embed, num_pages = BuildWarningsPage(storage, user_id, f"<@{user_id}>", page)
    await ctx.interaction.response.edit_message(embeds=[embed], view=_page_buttons(user_id, page, num_pages))


page_listener = command.add_interaction_listener("warnpage", _turn_page)


def _page_buttons(user_id: int, page: int, num_pages: int) -> discord.ui.View:
    view = discord.ui.View()
    view.add_item(discord.ui.Button(label="Previous", custom_id=page_listener.custom_id(user_id, page - 1), disabled=page <= 1))
    view.add_item(discord.ui.Button(label="Next", custom_id=page_listener.custom_id(user_id, page + 1), disabled=page >= num_pages))
    # Clicks are routed through the listener table, not discord.py's view store
    view.stop()
    return view


@command.set_handler
async def _check(ctx: CommandContext) -> None:
    storage: PersistenceService = ctx.require("storage")
    if ctx.guild is None:
        raise CommandError("This command must be used in a server.")
    await ctx.defer()

    try:
        member = await ctx.guild.fetch_member(int(ctx.opts["user"]))
    except discord.NotFound:
        raise CommandError("Unable to find that user")

    page = ctx.opts.get("page") or 1
    embed, num_pages = BuildWarningsPage(storage, member.id, member.display_name, int(page))
    await ctx.interaction.followup.send(embeds=[embed], view=_page_buttons(member.id, int(page), num_pages))
