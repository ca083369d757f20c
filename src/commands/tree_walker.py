"""Walk the slash-command folder and group unit files into structural nodes.

The folder layout encodes the command tree; there are three usable shapes:

    ping.py                    -> /ping
    staff/ban.py               -> /staff ban
    staff/warn/check.py        -> /staff warn check

so the maximum nesting is three levels. A file's role (command, subcommand, or
subcommand inside a group) is inferred only from how deep it was found.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Optional
import asyncio
import logging
import os

from .loader import LoadDefinitionAsync, ReadDirectory
from .structures import CommandTreeError, DefinitionKind, SlashCommand

logger = logging.getLogger(__name__)

MAX_DEPTH = 3
IDENTIFIER_SEPARATOR = ":"


@dataclass(frozen=True, slots=True)
class CommandLeaf:
    """One slash-command unit placed in the tree.

    Attributes:
        name: File-derived command name (the leaf segment).
        subcommand_name: Name of the enclosing subcommand group, or "" if none.
        identifier: Qualified identifier, ``name[:parent[:grandparent]]``.
        command: The loaded definition.
    """
    name: str
    subcommand_name: str
    identifier: str
    command: SlashCommand


@dataclass(frozen=True, slots=True)
class StructuralNode:
    """All leaves that share one top-level command name."""
    top_name: str
    depth: int
    leaves: tuple[CommandLeaf, ...]


@dataclass(slots=True)
class _PendingNode:
    top_name: str
    depth: int
    leaves: list[CommandLeaf] = field(default_factory=list)

    def freeze(self) -> StructuralNode:
        return StructuralNode(top_name=self.top_name, depth=self.depth, leaves=tuple(self.leaves))


def _segment_name(segment: str) -> str:
    return segment.split(".")[0].strip()


def ClassifyLeaf(path: str, depth: int, command: SlashCommand) -> tuple[str, CommandLeaf]:
    """Derive names and the qualified identifier for a unit found at ``depth``.

    Args:
        path: Path of the unit file.
        depth: Number of path segments consumed below the root (1-3).
        command: The loaded unit.

    Returns:
        tuple[str, CommandLeaf]: The top-level name and the classified leaf.

    Example:
        ClassifyLeaf("/root/a/b/c.py", 3, cmd) -> ("a", CommandLeaf("c", "b", "c:b:a", cmd))
    """
    segments = [_segment_name(p) for p in reversed(PurePath(path).parts)][:depth]
    name = segments[0]
    parent_name = segments[1] if len(segments) > 1 else ""
    grandparent_name = segments[2] if len(segments) > 2 else ""

    top_name = grandparent_name or parent_name or name
    subcommand_name = parent_name if grandparent_name else ""
    identifier = IDENTIFIER_SEPARATOR.join(n for n in (name, parent_name, grandparent_name) if n)
    return top_name, CommandLeaf(name=name, subcommand_name=subcommand_name, identifier=identifier, command=command)


def _accumulate(pending: dict[str, _PendingNode], top_name: str, depth: int, leaf: CommandLeaf) -> None:
    node = pending.get(top_name)
    if node is None:
        pending[top_name] = _PendingNode(top_name=top_name, depth=depth, leaves=[leaf])
        return

    if any(existing.identifier == leaf.identifier for existing in node.leaves):
        raise CommandTreeError(f"Duplicate command identifier '{leaf.identifier}'")

    # A subcommand and a subcommand group cannot share a name under one parent
    for existing in node.leaves:
        direct, grouped = (existing, leaf) if not existing.subcommand_name else (leaf, existing)
        if not direct.subcommand_name and grouped.subcommand_name == direct.name:
            raise CommandTreeError(
                f"'/{top_name} {direct.name}' is defined both as a subcommand and as a subcommand group"
            )

    if node.depth != depth:
        if 1 in (node.depth, depth):
            raise CommandTreeError(
                f"'/{top_name}' is defined both as a standalone command and as a command with subcommands"
            )
        # Direct subcommands and subcommand groups may share one parent
        logger.warning("Promoting /%s to depth %d (mixed subcommands and groups)", top_name, max(node.depth, depth))
        node.depth = max(node.depth, depth)
    node.leaves.append(leaf)


async def _visit(path: str) -> tuple[Optional[list[str]], Optional[SlashCommand]]:
    if await asyncio.to_thread(os.path.isdir, path):
        return await ReadDirectory(path), None
    return None, await LoadDefinitionAsync(path, DefinitionKind.COMMAND)


async def ParseCommandFolderStructure(root: str) -> list[StructuralNode]:
    """Walk ``root`` breadth-first and return one node per top-level command.

    All entries of one level are read and loaded concurrently; the next level
    starts only once the whole level is classified. A missing root yields an
    empty list.

    Raises:
        CommandTreeError: If one top-level name is used both as a standalone
            command and as a group, or two files map to the same identifier.
    """
    pending: dict[str, _PendingNode] = {}
    frontier = await ReadDirectory(root)
    budget = MAX_DEPTH

    while frontier and budget > 0:
        budget -= 1
        depth = MAX_DEPTH - budget
        results = await asyncio.gather(*(_visit(p) for p in frontier))

        next_frontier: list[str] = []
        for path, (children, command) in zip(frontier, results):
            if children is not None:
                next_frontier.extend(children)
                continue
            if command is None:
                continue
            top_name, leaf = ClassifyLeaf(path, depth, command)
            _accumulate(pending, top_name, depth, leaf)
        frontier = next_frontier

    if frontier:
        logger.warning("Ignoring %d entries nested deeper than %d levels under %s", len(frontier), MAX_DEPTH, root)

    nodes = [node.freeze() for node in pending.values()]
    logger.info("Discovered %d top-level commands under %s", len(nodes), root)
    return nodes
