"""Client configuration resolution.

Clients accept a ready :class:`~orbitflag.models.ClientConfig`, a plain
mapping of its fields (``{"teamId": "team-123"}``), or the fields as keyword
arguments.  :func:`resolve_config` turns any of these into a validated,
frozen config and converts Pydantic validation failures into
:class:`~orbitflag.exceptions.ConfigError`, so a misconfigured client fails
at construction instead of silently falling back on every call.

Precedence (high to low):
    1. Keyword overrides passed alongside an explicit config
    2. The explicit config (model or mapping)
    3. Model defaults
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional, Union

from pydantic import ValidationError

from orbitflag.exceptions import ConfigError
from orbitflag.models import ClientConfig


def resolve_config(
    config: Optional[Union[ClientConfig, Mapping[str, Any]]] = None, **options: Any
) -> ClientConfig:
    """Build the effective client configuration.

    Args:
        config: An existing configuration, a mapping of its fields, or
            ``None`` to build one from *options* alone.
        **options: :class:`~orbitflag.models.ClientConfig` fields, by field
            name (``team_id``) or alias (``teamId``).

    Returns:
        The validated configuration.

    Raises:
        ConfigError: If *config* is of an unsupported type, a field is given
            under both its name and its alias, a required field is missing,
            or a value is invalid.
    """
    if isinstance(config, ClientConfig):
        if not options:
            return config
        base = config.model_dump()
    elif isinstance(config, Mapping):
        base = _to_field_names(config)
    elif config is None:
        base = {}
    else:
        raise ConfigError(
            f"config must be a ClientConfig or a mapping, got {type(config).__name__}"
        )

    # Re-validate so overrides go through the same field checks.
    merged = {**base, **_to_field_names(options)}
    try:
        return ClientConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid orbitflag configuration: {exc}") from exc


def _to_field_names(options: Mapping[str, Any]) -> dict[str, Any]:
    """Map alias keys (``teamId``) to field names (``team_id``).

    Raises:
        ConfigError: If a field appears under both its name and its alias.
    """
    aliases = {
        field.alias: name
        for name, field in ClientConfig.model_fields.items()
        if field.alias
    }
    resolved: dict[str, Any] = {}
    for key, value in options.items():
        name = aliases.get(key, key)
        if name in resolved:
            raise ConfigError(f"Option {name!r} given more than once (as {key!r})")
        resolved[name] = value
    return resolved
