"""Full registration pass: discover, build, index, submit, authorise.

The pass returns a ``CommandRegistry`` snapshot. Nothing is published if any
step fails, so a caller never ends up routing against a half-built registry.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Sequence, TypeVar
import asyncio
import logging

from .descriptors import BuildCommandData, CommandData
from .loader import LoadContextMenus
from .platform import CommandPlatform, RegisteredCommand
from .structures import CommandTreeError, ContextMenu, InteractionListener, ReactionListener, SlashCommand
from .tree_walker import CommandLeaf, ParseCommandFolderStructure

logger = logging.getLogger(__name__)

# Hidden from everyone but administrators until a permission overwrite grants access
DEFAULT_MEMBER_PERMISSIONS = "0"

ListenerT = TypeVar("ListenerT", InteractionListener, ReactionListener)


@dataclass(frozen=True)
class CommandRegistry:
    """Read-only lookup tables produced by one registration pass.

    Attributes:
        commands: Qualified identifier -> slash command.
        context_menus: Display name -> context menu.
        interaction_listeners: Listener name -> component listener.
        reaction_listeners: Listener name -> reaction listener.
    """
    commands: Mapping[str, SlashCommand]
    context_menus: Mapping[str, ContextMenu]
    interaction_listeners: Mapping[str, InteractionListener]
    reaction_listeners: Mapping[str, ReactionListener]

    @classmethod
    def empty(cls) -> "CommandRegistry":
        return cls(
            commands=MappingProxyType({}),
            context_menus=MappingProxyType({}),
            interaction_listeners=MappingProxyType({}),
            reaction_listeners=MappingProxyType({}),
        )

    def is_empty(self) -> bool:
        return not (self.commands or self.context_menus or self.interaction_listeners or self.reaction_listeners)


def _merge_listeners(target: dict[str, ListenerT], source: Mapping[str, ListenerT], owner: str) -> None:
    for key, listener in source.items():
        if key in target and target[key] is not listener:
            logger.warning("Listener '%s' from %s replaces an earlier listener with the same key", key, owner)
        target[key] = listener


def BuildRegistry(leaves: Iterable[CommandLeaf], context_menus: Iterable[ContextMenu]) -> CommandRegistry:
    """Index leaves and context menus into a new registry snapshot."""
    commands: dict[str, SlashCommand] = {}
    interaction_listeners: dict[str, InteractionListener] = {}
    reaction_listeners: dict[str, ReactionListener] = {}
    for leaf in leaves:
        commands[leaf.identifier] = leaf.command
        _merge_listeners(interaction_listeners, leaf.command.interaction_listeners, leaf.identifier)
        _merge_listeners(reaction_listeners, leaf.command.reaction_listeners, leaf.identifier)

    menus: dict[str, ContextMenu] = {}
    for menu in context_menus:
        if menu.name in menus:
            raise CommandTreeError(f"Duplicate context menu name '{menu.name}'")
        menus[menu.name] = menu

    return CommandRegistry(
        commands=MappingProxyType(commands),
        context_menus=MappingProxyType(menus),
        interaction_listeners=MappingProxyType(interaction_listeners),
        reaction_listeners=MappingProxyType(reaction_listeners),
    )


async def BuildCommandTree(commands_path: str) -> tuple[list[CommandData], list[CommandLeaf]]:
    """Walk the command folder and build every top-level payload."""
    nodes = await ParseCommandFolderStructure(commands_path)
    descriptors: list[CommandData] = []
    leaves: list[CommandLeaf] = []
    for node in nodes:
        data, node_leaves = BuildCommandData(node)
        descriptors.append(data)
        leaves.extend(node_leaves)
    return descriptors, leaves


async def SetupAllCommands(
    platform: CommandPlatform,
    *,
    commands_path: str,
    context_menus_path: str,
    staff_role_ids: Sequence[int],
) -> CommandRegistry:
    """Run a complete registration pass against ``platform``.

    Args:
        platform: Registration endpoint (replace-all + permissions).
        commands_path: Root of the slash-command folder tree.
        context_menus_path: Flat folder of context-menu units.
        staff_role_ids: Roles granted permission to run every command. Empty skips
            the permission step.

    Returns:
        CommandRegistry: Fresh snapshot for the router.

    Raises:
        CommandTreeError: If the folder layout is inconsistent or two context menus
            share a name.
        Exception: Any platform failure propagates unchanged.
    """
    (descriptors, leaves), context_menus = await asyncio.gather(
        BuildCommandTree(commands_path),
        LoadContextMenus(context_menus_path),
    )

    # Raises on duplicate menu names before anything is submitted
    registry = BuildRegistry(leaves, context_menus)

    payload: list[dict[str, Any]] = [
        {**data, "default_member_permissions": DEFAULT_MEMBER_PERMISSIONS}
        for data in [*descriptors, *(menu.command_data for menu in context_menus)]
    ]
    saved: list[RegisteredCommand] = await platform.set_commands(payload)

    if staff_role_ids:
        for registered in saved:
            await platform.set_permissions(registered.id, list(staff_role_ids))
    else:
        logger.warning("No staff roles to authorise; %d commands stay visible to administrators only", len(saved))

    logger.info(
        "Command registration complete: %d commands, %d context menus, %d interaction listeners, %d reaction listeners",
        len(registry.commands),
        len(registry.context_menus),
        len(registry.interaction_listeners),
        len(registry.reaction_listeners),
    )
    return registry
