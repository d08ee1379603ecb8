"""Target info projection and snapshot normalisation.

The projection is a small denormalized summary stored on each record so the
audit log can be displayed without joining the (possibly deleted) target.
"""

from collections.abc import Mapping
from typing import Any
from uuid import UUID

from pydantic import BaseModel
from pydantic.alias_generators import to_snake
from pydantic_core import to_jsonable_python

from backoffice.audit.models.enums import TargetModel


def to_snapshot(entity: Any) -> dict[str, Any]:
    """Plain JSON-compatible copy of an entity's fields.

    Accepts pydantic models (dumped by alias) and mappings; datetimes,
    UUIDs and other rich values become their JSON representations.
    """
    if entity is None:
        return {}
    if isinstance(entity, BaseModel):
        return entity.model_dump(mode="json", by_alias=True)
    if isinstance(entity, Mapping):
        return dict(to_jsonable_python(dict(entity)))
    raise TypeError(f"Cannot snapshot {type(entity).__name__}; pass a mapping or pydantic model")


def entity_id(entity: Any) -> UUID:
    """Extract the storage identifier of an entity (``id`` or ``_id``).

    Raises:
        ValueError: If the entity carries no valid identifier
    """
    snapshot = to_snapshot(entity)
    raw = snapshot.get("id", snapshot.get("_id"))
    if raw is None:
        raise ValueError("Entity has no 'id' or '_id'")
    return UUID(str(raw))


def project(target_model: TargetModel | str, entity: Any) -> dict[str, Any]:
    """Display summary of an entity for the given target model.

    Unknown target models project to an empty dict; fields whose value is
    unset are left out rather than stored as null.
    """
    try:
        model = TargetModel.parse(target_model) if isinstance(target_model, str) else target_model
    except ValueError:
        return {}

    data = to_snapshot(entity)
    info: dict[str, Any]

    if model is TargetModel.USER:
        info = {
            "name": _field(data, "name"),
            "identifier": _field(data, "userId") or _field(data, "adminId"),
        }
    elif model is TargetModel.FORM:
        info = {
            "formNumber": _field(data, "formNumber"),
            "clientName": _field(data, "clientName"),
        }
    elif model is TargetModel.FORM_TEMPLATE:
        info = {
            "name": _field(data, "name"),
            "type": _field(data, "type"),
        }
    elif model is TargetModel.MARKETING_CATEGORY:
        info = {"name": _field(data, "name")}
    elif model is TargetModel.MARKETING_EXPENSE:
        theme = _field(data, "theme")
        info = {
            "invoiceDate": _field(data, "invoiceDate"),
            # Only a populated theme document carries a display name
            "theme": theme.get("name") if isinstance(theme, Mapping) else None,
        }
    else:
        # MarketingBudget has no dedicated summary
        info = {}

    return {key: value for key, value in info.items() if value is not None}


def _field(data: Mapping[str, Any], camel_name: str) -> Any:
    """Read a field by its camelCase name, falling back to snake_case."""
    if camel_name in data:
        return data[camel_name]
    return data.get(to_snake(camel_name))
