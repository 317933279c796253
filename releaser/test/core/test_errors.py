"""Tests for releaser.core.errors module."""

from releaser.core.errors import ErrorCode


def test_values_are_stable() -> None:
    assert int(ErrorCode.OK) == 0
    assert int(ErrorCode.USER_ERROR) == 1
    assert int(ErrorCode.ENV_ERROR) == 2
    assert int(ErrorCode.RELEASE_ERROR) == 3


def test_str() -> None:
    assert str(ErrorCode.USER_ERROR) == "user error"


def test_is_success() -> None:
    assert ErrorCode.OK.is_success
    assert not ErrorCode.RELEASE_ERROR.is_success
