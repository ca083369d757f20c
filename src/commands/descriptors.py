"""Turn structural nodes into application-command payloads for Discord."""

from __future__ import annotations

from typing import Any
import copy

import discord

from .tree_walker import CommandLeaf, StructuralNode

CHAT_INPUT = discord.AppCommandType.chat_input.value
SUB_COMMAND = discord.AppCommandOptionType.subcommand.value
SUB_COMMAND_GROUP = discord.AppCommandOptionType.subcommand_group.value

CommandData = dict[str, Any]


def _subcommand_option(leaf: CommandLeaf) -> CommandData:
    return {**copy.deepcopy(leaf.command.command_data), "type": SUB_COMMAND, "name": leaf.name}


def _build_grouped(node: StructuralNode) -> list[CommandData]:
    options: list[CommandData] = []
    groups: dict[str, CommandData] = {}
    for leaf in node.leaves:
        if not leaf.subcommand_name:
            options.append(_subcommand_option(leaf))
            continue
        group = groups.get(leaf.subcommand_name)
        if group is None:
            group = {
                "name": leaf.subcommand_name,
                "description": leaf.subcommand_name,
                "type": SUB_COMMAND_GROUP,
                "options": [],
            }
            groups[leaf.subcommand_name] = group
            options.append(group)
        group["options"].append(_subcommand_option(leaf))
    return options


def BuildCommandData(node: StructuralNode) -> tuple[CommandData, list[CommandLeaf]]:
    """Build the payload for one top-level command and list the leaves it covers.

    Args:
        node: A structural node produced by the tree walker.

    Returns:
        tuple[CommandData, list[CommandLeaf]]: The payload and every leaf
        reachable through it. Neither the node nor any unit is modified.

    Example:
        data, leaves = BuildCommandData(node)
        # depth 2 -> {"name": "staff", "options": [{"type": 1, "name": "ban", ...}], ...}
    """
    if node.depth == 1:
        leaf = node.leaves[0]
        # File name wins over any name the unit declares itself
        return {**copy.deepcopy(leaf.command.command_data), "name": leaf.name}, [leaf]

    if node.depth == 2:
        return {
            "name": node.top_name,
            "description": node.top_name,
            "options": [_subcommand_option(leaf) for leaf in node.leaves],
            "type": CHAT_INPUT,
        }, list(node.leaves)

    options = _build_grouped(node)
    # Leaves are returned group by group, matching the payload order
    ordered: list[CommandLeaf] = [leaf for leaf in node.leaves if not leaf.subcommand_name]
    seen: list[str] = []
    for leaf in node.leaves:
        if leaf.subcommand_name and leaf.subcommand_name not in seen:
            seen.append(leaf.subcommand_name)
    for group_name in seen:
        ordered.extend(leaf for leaf in node.leaves if leaf.subcommand_name == group_name)

    return {
        "name": node.top_name,
        "description": node.top_name,
        "options": options,
        "type": CHAT_INPUT,
    }, ordered
