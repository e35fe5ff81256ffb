"""Resolution of the raw command line options into the final configuration."""

from __future__ import annotations

import copy
import logging

from chdig import settings, url

LOGGER = logging.getLogger(__name__)

# Applied after the defaults were computed: (flag, option, forced value)
FLAG_OVERRIDES: tuple[tuple[str, str, bool], ...] = (
    ('no_group_by', 'group_by', False),
    ('no_mouse', 'mouse', False),
)


def merge_credentials(
    descriptor: url.ConnectionDescriptor,
    credentials: settings.ClickHouseCredentials,
) -> None:
    """Fill the username and password missing from the URL."""
    if not descriptor.username and credentials.user is not None:
        LOGGER.debug('Using username from CLICKHOUSE_USER')
        descriptor.username = credentials.user
    # An empty password in the URL is an explicit one
    if descriptor.password is None and credentials.password is not None:
        LOGGER.debug('Using password from CLICKHOUSE_PASSWORD')
        descriptor.password = credentials.password.get_secret_value()


def redact(descriptor: url.ConnectionDescriptor) -> url.ConnectionDescriptor:
    """Return a copy of the descriptor without the password."""
    safe = copy.deepcopy(descriptor)
    if safe.password is not None:
        safe.password = None
    return safe


def inject_query_defaults(
    descriptor: url.ConnectionDescriptor,
    snapshot: url.ConnectionDescriptor,
) -> None:
    """Append the default query settings the user did not specify.

    Presence is checked in ``snapshot``, taken before any default was
    added, and never in ``descriptor`` itself.

    """
    present = snapshot.query_keys()
    for key, value in settings.QUERY_DEFAULTS:
        if key not in present:
            LOGGER.debug('Adding default %s=%s to the URL', key, value)
            descriptor.append_query_pair(key, value)


def resolve_flags(raw: settings.RawOptions) -> dict[str, bool]:
    """Apply the override flags on top of the already defaulted values."""
    flags = {
        'group_by': raw.group_by,
        'no_subqueries': raw.no_subqueries,
        'mouse': raw.mouse,
    }
    for flag, option, value in FLAG_OVERRIDES:
        if getattr(raw, flag):
            LOGGER.debug('%s forces %s=%s', flag, option, value)
            flags[option] = value
    return flags


def resolve(
    raw: settings.RawOptions,
    credentials: settings.ClickHouseCredentials | None = None,
) -> settings.ResolvedConfig:
    """Build the final configuration from the raw options.

    Credentials are read from the environment unless given.

    :raises chdig.errors.InvalidUrl: if the connection string is invalid

    """
    if credentials is None:
        credentials = settings.ClickHouseCredentials()
    descriptor = url.parse_url(raw.url)
    merge_credentials(descriptor, credentials)
    safe = redact(descriptor)
    inject_query_defaults(descriptor, safe)
    LOGGER.debug('Resolved connection URL: %s', safe)
    return settings.ResolvedConfig(
        url=str(descriptor),
        url_safe=str(safe),
        cluster=raw.cluster,
        delay_interval=raw.delay_interval,
        **resolve_flags(raw),
    )
