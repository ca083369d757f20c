from src.commands.structures import CommandContext, CommandError, ContextMenu
from src.services.persistence import PersistenceService
from src.services.warning_pages import BuildWarningsPage

command = ContextMenu("Warnings", target="user")


@command.set_handler
async def _warnings(ctx: CommandContext) -> None:
    storage: PersistenceService = ctx.require("storage")
    target_id = ctx.opts.get("target_id")
    if target_id is None:
        raise CommandError("No user selected.")
    embed, _ = BuildWarningsPage(storage, int(target_id), f"<@{target_id}>", 1)
    await ctx.send(embeds=[embed], ephemeral=True)
