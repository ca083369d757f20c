import logging

import discord

from src.commands.structures import CommandContext, CommandError, SlashCommand
from src.security.permissions import is_protected_member

logger = logging.getLogger(__name__)

APPEAL_TEXT = "You may appeal your ban by contacting the server staff."
PURGE_SECONDS = 7 * 24 * 60 * 60

command = SlashCommand(
    description="Bans a member",
    options=[
        {"name": "user", "description": "The member to ban", "required": True, "type": discord.AppCommandOptionType.user.value},
        {"name": "purge", "description": "Whether to delete all messages or not", "required": False, "type": discord.AppCommandOptionType.boolean.value},
        {"name": "reason", "description": "Reason for banning", "required": False, "type": discord.AppCommandOptionType.string.value},
        {"name": "noappeal", "description": "Don't include link for appealing the ban", "required": False, "type": discord.AppCommandOptionType.boolean.value},
    ],
)


@command.set_handler
async def _ban(ctx: CommandContext) -> None:
    guild = ctx.guild
    if guild is None:
        raise CommandError("This command must be used in a server.")
    config = ctx.require("config")
    reason = ctx.opts.get("reason") or None

    try:
        member = await guild.fetch_member(int(ctx.opts["user"]))
    except discord.NotFound:
        raise CommandError("Could not find this member. They may have already been banned or left.")
    if is_protected_member(member, config.staff_role_id):
        raise CommandError("You cannot ban a staff member or bot.")

    banned_embed = discord.Embed(description=f"You have been banned from {guild.name}", color=discord.Color.red())
    banned_embed.set_author(name=member.display_name, icon_url=member.display_avatar.url)
    banned_embed.add_field(name="Reason", value=reason or "None provided", inline=False)
    if not ctx.opts.get("noappeal"):
        banned_embed.add_field(name="Appeal", value=APPEAL_TEXT, inline=False)

    try:
        await member.send(embed=banned_embed)
    except discord.HTTPException as e:
        logger.info("Could not DM ban notice to %s: %s", member.id, e)

    await guild.ban(member, reason=reason, delete_message_seconds=PURGE_SECONDS if ctx.opts.get("purge") else 0)
    await ctx.send(embeds=[discord.Embed(description=f"{member.mention} was banned.")])

    if config.banlog_channel_id:
        banlog = guild.get_channel(config.banlog_channel_id)
        if isinstance(banlog, discord.TextChannel):
            await banlog.send(embed=banned_embed)
        else:
            logger.warning("Ban log channel %s not found", config.banlog_channel_id)
