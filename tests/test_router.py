from __future__ import annotations

from typing import Any

import discord
import pytest  # type: ignore

from src.commands.registry import BuildRegistry
from src.commands.router import GENERIC_FAILURE, InteractionRouter, ResolveCommandIdentifier
from src.commands.structures import CommandContext, CommandError, ContextMenu, SlashCommand
from src.commands.tree_walker import CommandLeaf


class _Resp:
    def __init__(self) -> None:
        self._done = False
        self.sent: list[dict[str, Any]] = []

    def is_done(self) -> bool:
        return self._done

    async def send_message(self, content: str | None = None, **kwargs: Any) -> None:
        self._done = True
        self.sent.append({"content": content, **kwargs})

    async def defer(self, **_: Any) -> None:
        self._done = True


class _Followup:
    def __init__(self) -> None:
        self.sent: list[dict[str, Any]] = []

    async def send(self, content: str | None = None, **kwargs: Any) -> None:
        self.sent.append({"content": content, **kwargs})


class _Interaction:
    def __init__(self, type: discord.InteractionType, data: dict[str, Any]) -> None:
        self.type = type
        self.data = data
        self.response = _Resp()
        self.followup = _Followup()
        self.user = None
        self.guild = None
        self.channel = None


class _Emoji:
    def __init__(self, name: str) -> None:
        self.name = name

    def __str__(self) -> str:
        return self.name


class _ReactionPayload:
    def __init__(self, emoji: str, member: Any = None) -> None:
        self.emoji = _Emoji(emoji)
        self.member = member


class _Member:
    bot = True


def _chat_input(name: str, options: list[dict[str, Any]] | None = None) -> _Interaction:
    return _Interaction(discord.InteractionType.application_command, {"type": 1, "name": name, "options": options or []})


def _router(commands: dict[str, SlashCommand], menus: list[ContextMenu] | None = None) -> InteractionRouter:
    leaves = [
        CommandLeaf(name=i.split(":")[0], subcommand_name="", identifier=i, command=c) for i, c in commands.items()
    ]
    return InteractionRouter(BuildRegistry(leaves, menus or []), {"storage": "fake-storage"})


def test_resolve_identifier_for_each_depth() -> None:
    assert ResolveCommandIdentifier({"name": "ping", "options": [{"type": 3, "name": "q", "value": "x"}]}) == (
        "ping",
        [{"type": 3, "name": "q", "value": "x"}],
    )
    assert ResolveCommandIdentifier({"name": "staff", "options": [{"type": 1, "name": "ban", "options": []}]})[0] == "ban:staff"
    identifier, options = ResolveCommandIdentifier(
        {
            "name": "staff",
            "options": [
                {"type": 2, "name": "warn", "options": [{"type": 1, "name": "check", "options": [{"type": 6, "name": "user", "value": "5"}]}]}
            ],
        }
    )
    assert identifier == "check:warn:staff"
    assert options == [{"type": 6, "name": "user", "value": "5"}]


@pytest.mark.asyncio  # type: ignore
async def test_chat_input_reaches_handler_with_options() -> None:
    seen: list[CommandContext] = []
    cmd = SlashCommand(description="check")

    @cmd.set_handler
    async def _h(ctx: CommandContext) -> None:
        seen.append(ctx)
        await ctx.send("ok")

    router = _router({"check:warn:staff": cmd})
    interaction = _chat_input(
        "staff",
        [{"type": 2, "name": "warn", "options": [{"type": 1, "name": "check", "options": [{"type": 4, "name": "page", "value": 2}]}]}],
    )

    assert await router.dispatch(interaction) is True  # type: ignore[arg-type]
    assert seen[0].opts == {"page": 2}
    assert seen[0].require("storage") == "fake-storage"
    assert interaction.response.sent[0]["content"] == "ok"


@pytest.mark.asyncio  # type: ignore
async def test_unknown_command_replies_not_available() -> None:
    router = _router({})
    interaction = _chat_input("ghost")

    assert await router.dispatch(interaction) is False  # type: ignore[arg-type]
    assert interaction.response.sent[0]["content"] == "This command is not available."
    assert interaction.response.sent[0]["ephemeral"] is True


@pytest.mark.asyncio  # type: ignore
async def test_command_error_is_shown_to_user() -> None:
    cmd = SlashCommand(description="fails")

    @cmd.set_handler
    async def _h(ctx: CommandContext) -> None:
        raise CommandError("Must be non-negative")

    router = _router({"ping": cmd})
    interaction = _chat_input("ping")
    await router.dispatch(interaction)  # type: ignore[arg-type]

    assert interaction.response.sent == [{"content": "Must be non-negative", "ephemeral": True}]


@pytest.mark.asyncio  # type: ignore
async def test_unexpected_error_gets_generic_reply_after_defer() -> None:
    cmd = SlashCommand(description="crashes")

    @cmd.set_handler
    async def _h(ctx: CommandContext) -> None:
        await ctx.defer()
        raise ValueError("boom")

    router = _router({"ping": cmd})
    interaction = _chat_input("ping")
    await router.dispatch(interaction)  # type: ignore[arg-type]

    assert interaction.response.sent == []
    assert interaction.followup.sent == [{"content": GENERIC_FAILURE, "ephemeral": True}]


@pytest.mark.asyncio  # type: ignore
async def test_command_without_handler_fails_gracefully() -> None:
    router = _router({"ping": SlashCommand(description="no handler")})
    interaction = _chat_input("ping")
    await router.dispatch(interaction)  # type: ignore[arg-type]

    assert interaction.response.sent[0]["content"] == GENERIC_FAILURE


@pytest.mark.asyncio  # type: ignore
async def test_context_menu_dispatch_by_name() -> None:
    targets: list[Any] = []
    menu = ContextMenu("Warnings", target="user")

    @menu.set_handler
    async def _h(ctx: CommandContext) -> None:
        targets.append(ctx.opts["target_id"])

    router = _router({}, [menu])
    interaction = _Interaction(discord.InteractionType.application_command, {"type": 2, "name": "Warnings", "target_id": "77"})

    assert await router.dispatch(interaction) is True  # type: ignore[arg-type]
    assert targets == ["77"]


@pytest.mark.asyncio  # type: ignore
async def test_component_routes_to_listener_with_args() -> None:
    calls: list[list[str]] = []
    cmd = SlashCommand(description="check")

    async def _turn(ctx: CommandContext, args: list[str]) -> None:
        calls.append(args)

    listener = cmd.add_interaction_listener("warnpage", _turn)
    router = _router({"check:warn:staff": cmd})
    interaction = _Interaction(discord.InteractionType.component, {"custom_id": listener.custom_id(5, 2)})

    assert await router.dispatch(interaction) is True  # type: ignore[arg-type]
    assert calls == [["5", "2"]]


@pytest.mark.asyncio  # type: ignore
async def test_unknown_component_is_left_alone() -> None:
    router = _router({})
    interaction = _Interaction(discord.InteractionType.component, {"custom_id": "chain_btn_abc"})

    assert await router.dispatch(interaction) is False  # type: ignore[arg-type]
    assert interaction.response.sent == []


@pytest.mark.asyncio  # type: ignore
async def test_reactions_fan_out_to_matching_listeners() -> None:
    hits: list[str] = []
    cmd = SlashCommand(description="reacts")

    async def _star(payload: Any, services: Any) -> None:
        hits.append("star")

    async def _any(payload: Any, services: Any) -> None:
        hits.append("any")

    cmd.add_reaction_listener("star", _star, emoji="⭐")
    cmd.add_reaction_listener("any", _any)
    router = _router({"ping": cmd})

    assert await router.dispatch_reaction(_ReactionPayload("⭐")) == 2  # type: ignore[arg-type]
    assert await router.dispatch_reaction(_ReactionPayload("👍")) == 1  # type: ignore[arg-type]
    assert await router.dispatch_reaction(_ReactionPayload("⭐", member=_Member())) == 0  # type: ignore[arg-type]
    assert hits == ["star", "any", "any"]


def test_listener_names_cannot_contain_separator() -> None:
    cmd = SlashCommand(description="x")

    async def _noop(ctx: CommandContext, args: list[str]) -> None:
        return None

    with pytest.raises(ValueError):
        cmd.add_interaction_listener("bad:name", _noop)


class _CountingDeferResp(_Resp):
    def __init__(self, fail: bool = False) -> None:
        super().__init__()
        self.fail = fail
        self.defers = 0

    async def defer(self, **_: Any) -> None:
        self.defers += 1
        if self.fail:
            raise discord.DiscordException("interaction expired")
        self._done = True


@pytest.mark.asyncio  # type: ignore
async def test_context_defer_only_acknowledges_once() -> None:
    interaction = _chat_input("ping")
    interaction.response = _CountingDeferResp()
    ctx = CommandContext(interaction=interaction, opts={}, services={})  # type: ignore[arg-type]

    await ctx.defer()
    await ctx.defer()

    assert interaction.response.defers == 1


@pytest.mark.asyncio  # type: ignore
async def test_context_defer_failure_is_not_raised() -> None:
    interaction = _chat_input("ping")
    interaction.response = _CountingDeferResp(fail=True)
    ctx = CommandContext(interaction=interaction, opts={}, services={})  # type: ignore[arg-type]

    await ctx.defer()

    assert interaction.response.defers == 1
    assert interaction.response.is_done() is False
