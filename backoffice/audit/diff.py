"""Changed-field detection between two snapshots.

Only keys present in ``after`` are inspected. A key that exists in
``before`` but is missing from ``after`` is not reported: update payloads
are partial, so absence means "not touched", not "removed".
"""

import json
from collections.abc import Mapping
from typing import Any

_MISSING = object()


def changed_fields(before: Mapping[str, Any], after: Mapping[str, Any]) -> list[str]:
    """List keys of after whose value differs from before.

    Values are compared by canonical JSON: object key order is ignored,
    array order is not.

    Returns:
        Keys in the iteration order of after
    """
    return [
        key
        for key, value in after.items()
        if _canonical(before.get(key, _MISSING)) != _canonical(value)
    ]


def _canonical(value: Any) -> str | None:
    if value is _MISSING:
        return None
    return json.dumps(value, sort_keys=True, separators=(",", ":"), default=str)
