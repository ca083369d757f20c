"""Tests for security utilities."""
from __future__ import annotations

import pytest

from src.security import has_role, is_protected_member, validate_discord_token
from src.security.token import mask_token


def test_validate_discord_token_valid() -> None:
    # Discord tokens have 3 parts separated by '.'; content is not validated here.
    validate_discord_token("aaaa.bbbb.cccc")


@pytest.mark.parametrize("token", ["", "changeme", None, "one.two"])  # type: ignore[list-item]
def test_validate_discord_token_invalid(token) -> None:  # type: ignore[no-untyped-def]
    with pytest.raises(SystemExit):
        validate_discord_token(token)  # type: ignore[arg-type]


def test_mask_token_keeps_outer_characters() -> None:
    assert mask_token("abcdefgh.middle.wxyz1234") == "abcd...1234"


class _Role:
    def __init__(self, role_id: int):
        self.id = role_id


class _User:
    def __init__(self, bot: bool):
        self.bot = bot


class _Member:
    def __init__(self, role_ids: list[int], bot: bool = False):
        self.roles = [_Role(r) for r in role_ids]
        self.user = _User(bot)


def test_has_role() -> None:
    member = _Member([1, 2])
    assert has_role(member, 2) is True
    assert has_role(member, 3) is False
    assert has_role(member, None) is False
    assert has_role(object(), 1) is False


def test_protected_members() -> None:
    assert is_protected_member(_Member([42]), 42) is True
    assert is_protected_member(_Member([], bot=True), 42) is True
    assert is_protected_member(_Member([1]), 42) is False
    assert is_protected_member(_Member([1]), None) is False
