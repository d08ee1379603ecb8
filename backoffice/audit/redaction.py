"""Redaction policy for audit snapshots.

Credentials, session tokens and storage version markers never reach an
audit record. Redaction copies; the caller's snapshot is left untouched.
"""

from collections.abc import Iterable, Mapping
from typing import Any

# password, its confirmation, session token list, storage version marker
REDACTED_FIELDS: frozenset[str] = frozenset({
    "password",
    "confirmPassword",
    "confirm_password",
    "tokens",
    "__v",
})


def redact(
    snapshot: Mapping[str, Any] | None,
    extra_fields: Iterable[str] = (),
) -> dict[str, Any]:
    """Return a copy of snapshot without sensitive keys.

    Nested mappings (and mappings inside lists) are cleaned as well, so an
    embedded user document cannot leak its password either.

    Args:
        snapshot: Plain-data copy of an entity; None is treated as empty
        extra_fields: Keys stripped in addition to REDACTED_FIELDS

    Returns:
        New dict; redact(redact(x)) == redact(x)
    """
    if not snapshot:
        return {}
    blocked = REDACTED_FIELDS.union(extra_fields)
    return _redact_mapping(snapshot, blocked)


def _redact_mapping(data: Mapping[str, Any], blocked: frozenset[str]) -> dict[str, Any]:
    return {
        key: _redact_value(value, blocked)
        for key, value in data.items()
        if key not in blocked
    }


def _redact_value(value: Any, blocked: frozenset[str]) -> Any:
    if isinstance(value, Mapping):
        return _redact_mapping(value, blocked)
    if isinstance(value, list):
        return [_redact_value(item, blocked) for item in value]
    return value
