"""Tests for the configuration models."""

from __future__ import annotations

import datetime

import pydantic
import pytest

from chdig.settings import RawOptions, ResolvedConfig


def test_raw_options_defaults() -> None:
    raw = RawOptions()

    assert raw.url == '127.1'
    assert raw.cluster is None
    assert raw.delay_interval == datetime.timedelta(milliseconds=3000)
    assert raw.group_by is False
    assert raw.mouse is True
    assert not (raw.no_group_by or raw.no_mouse or raw.no_subqueries)


def test_group_by_defaults_on_with_cluster() -> None:
    assert RawOptions(cluster='mycluster').group_by is True
    assert RawOptions(cluster='mycluster', group_by=None).group_by is True


def test_explicit_group_by_is_kept() -> None:
    assert RawOptions(group_by=True).group_by is True


def test_raw_options_are_frozen() -> None:
    raw = RawOptions()

    with pytest.raises(pydantic.ValidationError):
        raw.url = 'other'  # type: ignore[misc]


def test_resolved_config_is_frozen() -> None:
    config = ResolvedConfig(
        url='tcp://host/',
        url_safe='tcp://host/',
        cluster=None,
        delay_interval=datetime.timedelta(seconds=1),
        group_by=False,
        no_subqueries=False,
        mouse=True,
    )

    with pytest.raises(pydantic.ValidationError):
        config.mouse = False  # type: ignore[misc]
