"""Checks the command tree shipped in src/slashcommands and src/contextmenus."""

from __future__ import annotations

import pytest  # type: ignore

from src.commands.descriptors import SUB_COMMAND, SUB_COMMAND_GROUP
from src.commands.loader import LoadContextMenus
from src.commands.registry import BuildCommandTree
from src.core.dynaconf_settings import DEFAULT_CONTEXT_MENUS_PATH, DEFAULT_SLASH_COMMANDS_PATH


@pytest.mark.asyncio  # type: ignore
async def test_bundled_commands_build_expected_payloads() -> None:
    descriptors, leaves = await BuildCommandTree(DEFAULT_SLASH_COMMANDS_PATH)

    by_name = {d["name"]: d for d in descriptors}
    assert set(by_name) == {"ping", "staff"}

    staff = by_name["staff"]
    options = {o["name"]: o for o in staff["options"]}
    assert {n for n, o in options.items() if o["type"] == SUB_COMMAND} == {"ban", "givecredits", "slowmode"}
    assert options["warn"]["type"] == SUB_COMMAND_GROUP
    assert sorted(o["name"] for o in options["warn"]["options"]) == ["check", "issue"]

    assert {leaf.identifier for leaf in leaves} == {
        "ping",
        "ban:staff",
        "givecredits:staff",
        "slowmode:staff",
        "check:warn:staff",
        "issue:warn:staff",
    }


@pytest.mark.asyncio  # type: ignore
async def test_bundled_check_command_exposes_page_listener() -> None:
    _, leaves = await BuildCommandTree(DEFAULT_SLASH_COMMANDS_PATH)
    check = next(leaf for leaf in leaves if leaf.identifier == "check:warn:staff")

    assert "warnpage" in check.command.interaction_listeners
    assert check.command.interaction_listeners["warnpage"].custom_id(5, 2) == "warnpage:5:2"


@pytest.mark.asyncio  # type: ignore
async def test_bundled_context_menus() -> None:
    menus = await LoadContextMenus(DEFAULT_CONTEXT_MENUS_PATH)
    assert [m.name for m in menus] == ["Warnings"]
    assert menus[0].command_data == {"name": "Warnings", "type": 2}
