"""Operator models."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Operator(BaseModel):
    """Authenticated principal performing an action.

    Ordinary users carry a ``user_id``, administrators an ``admin_id``;
    either one serves as the display identifier.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: UUID = Field(..., description="Storage identifier of the principal")
    name: str = Field(..., description="Display name")
    user_id: str | None = Field(default=None, description="Staff number for ordinary users")
    admin_id: str | None = Field(default=None, description="Staff number for administrators")
    roles: list[str] = Field(default_factory=list, description="Role claims")

    @property
    def identifier(self) -> str | None:
        """Display identifier: userId, else adminId."""
        return self.user_id or self.admin_id

    def has_role(self, role: str) -> bool:
        """Check role membership (case-insensitive)."""
        return role.lower() in (r.lower() for r in self.roles)


class OperatorSummary(BaseModel):
    """Live operator display data joined into audit search results."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: UUID
    name: str
    user_id: str | None = None
    admin_id: str | None = None
