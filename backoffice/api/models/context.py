"""Request context model for observability."""

from pydantic import BaseModel


class RequestContext(BaseModel):
    """Identifiers bound to every log line emitted while serving a request."""

    request_id: str
    trace_id: str
    operator_id: str | None = None
