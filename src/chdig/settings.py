"""Configuration models for chdig."""

from __future__ import annotations

import datetime
import typing

import pydantic
import pydantic_settings

DEFAULT_SCHEME = 'tcp'
DEFAULT_URL = '127.1'
DEFAULT_DELAY_INTERVAL = datetime.timedelta(milliseconds=3000)
MAX_DELAY_INTERVAL_MS = datetime.timedelta.max // datetime.timedelta(
    milliseconds=1
)

# The server side default is 500ms, too small for remote clusters
DEFAULT_CONNECTION_TIMEOUT = '5s'
# Slow queries can take a while to process, this may still not be enough
DEFAULT_QUERY_TIMEOUT = '600s'

QUERY_DEFAULTS: tuple[tuple[str, str], ...] = (
    ('connection_timeout', DEFAULT_CONNECTION_TIMEOUT),
    ('query_timeout', DEFAULT_QUERY_TIMEOUT),
)


class ClickHouseCredentials(pydantic_settings.BaseSettings):
    """Credentials taken from the CLICKHOUSE_* environment variables."""

    model_config = pydantic_settings.SettingsConfigDict(
        env_prefix='CLICKHOUSE_', frozen=True
    )
    user: str | None = pydantic.Field(
        default=None, description='Username for authentication'
    )
    password: pydantic.SecretStr | None = pydantic.Field(
        default=None, description='Password for authentication'
    )


class RawOptions(pydantic.BaseModel):
    """Option values as they were given on the command line."""

    model_config = pydantic.ConfigDict(frozen=True)

    url: str = pydantic.Field(
        default=DEFAULT_URL, description='ClickHouse connection string'
    )
    cluster: str | None = pydantic.Field(
        default=None, description='Cluster to monitor'
    )
    delay_interval: datetime.timedelta = pydantic.Field(
        default=DEFAULT_DELAY_INTERVAL, description='Refresh interval'
    )
    group_by: bool = pydantic.Field(
        default=False,
        description='Group distributed queries, on by default with a cluster',
    )
    no_group_by: bool = pydantic.Field(
        default=False, description='Do not group distributed queries'
    )
    no_subqueries: bool = pydantic.Field(
        default=False,
        description='Do not accumulate metrics for subqueries',
    )
    mouse: bool = pydantic.Field(default=True, description='Mouse support')
    no_mouse: bool = pydantic.Field(
        default=False, description='Disable mouse support'
    )

    @pydantic.model_validator(mode='before')
    @classmethod
    def _default_group_by(cls, data: typing.Any) -> typing.Any:
        """Turn on group_by when a cluster is given and it was not set."""
        if isinstance(data, dict) and data.get('group_by') is None:
            data = {**data, 'group_by': data.get('cluster') is not None}
        return data


class ResolvedConfig(pydantic.BaseModel):
    """Final configuration handed to the rest of the application."""

    model_config = pydantic.ConfigDict(frozen=True)

    url: str
    url_safe: str
    cluster: str | None
    delay_interval: datetime.timedelta
    group_by: bool
    no_subqueries: bool
    mouse: bool
