import discord

from src.commands.structures import CommandContext, CommandError, SlashCommand
from src.security.permissions import is_protected_member
from src.services.persistence import PersistenceService

WARNING_TYPES = ["General", "Spam", "Bothering Others", "Negative Behavior", "NSFW/Inappropriate Posts"]

command = SlashCommand(
    description="Issues a warning to a member",
    options=[
        {"name": "user", "description": "The member to warn", "required": True, "type": discord.AppCommandOptionType.user.value},
        {"name": "reason", "description": "Reason for the warning", "required": True, "type": discord.AppCommandOptionType.string.value},
        {
            "name": "severity",
            "description": "Severity from 1 to 10",
            "required": False,
            "type": discord.AppCommandOptionType.integer.value,
            "min_value": 1,
            "max_value": 10,
        },
        {
            "name": "type",
            "description": "Kind of rule broken",
            "required": False,
            "type": discord.AppCommandOptionType.string.value,
            "choices": [{"name": t, "value": t} for t in WARNING_TYPES],
        },
    ],
)


@command.set_handler
async def _issue(ctx: CommandContext) -> None:
    storage: PersistenceService = ctx.require("storage")
    config = ctx.require("config")
    if ctx.guild is None:
        raise CommandError("This command must be used in a server.")

    try:
        member = await ctx.guild.fetch_member(int(ctx.opts["user"]))
    except discord.NotFound:
        raise CommandError("Unable to find that user")
    if is_protected_member(member, config.staff_role_id):
        raise CommandError("You cannot warn a staff member or bot.")

    severity = int(ctx.opts.get("severity") or 5)
    warning_type = ctx.opts.get("type") or WARNING_TYPES[0]
    storage.add_warning(member.id, ctx.user.id, str(ctx.opts["reason"]), severity=severity, type=warning_type)
    total = storage.count_warnings(member.id)

    embed = discord.Embed(description=f"{member.mention} was warned.", color=discord.Color.orange())
    embed.add_field(name="Reason", value=str(ctx.opts["reason"]), inline=False)
    embed.set_footer(text=f"{warning_type} | severity {severity} | {total} warning(s) total")
    await ctx.send(embeds=[embed])
