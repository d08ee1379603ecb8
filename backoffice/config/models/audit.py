"""Audit recording and search configuration."""

from typing import Literal

from pydantic import BaseModel, Field, model_validator

FailurePolicy = Literal["raise", "log"]


class AuditConfig(BaseModel):
    """Audit trail behaviour."""

    default_page_size: int = Field(
        default=10,
        gt=0,
        description="Page size when itemsPerPage is not supplied",
    )
    max_page_size: int = Field(
        default=100,
        gt=0,
        description="Largest accepted itemsPerPage",
    )
    failure_policy: FailurePolicy = Field(
        default="raise",
        description="raise: AuditWriteError reaches the caller; log: logged and dropped",
    )
    extra_redacted_fields: list[str] = Field(
        default_factory=list,
        description="Snapshot keys stripped in addition to the built-in set",
    )

    @model_validator(mode="after")
    def check_page_sizes(self) -> "AuditConfig":
        """Default page size must fit under the cap."""
        if self.default_page_size > self.max_page_size:
            raise ValueError("default_page_size cannot exceed max_page_size")
        return self
