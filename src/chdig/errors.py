"""Errors raised while resolving the chdig configuration."""

from __future__ import annotations


class ConfigError(ValueError):
    """The command line can not be turned into a usable configuration."""


class InvalidUrl(ConfigError):
    """The connection string can not be parsed as a URL."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f'Invalid URL {url!r}: {reason}')
        self.url = url
        self.reason = reason
