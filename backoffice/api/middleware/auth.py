"""JWT authentication for API requests."""

import os
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import ValidationError

from backoffice.api.dependencies import SettingsDep
from backoffice.api.exceptions import ForbiddenError, UnauthorizedError
from backoffice.observability.logging import bind_request_context, get_logger
from backoffice.operators.models import Operator

logger = get_logger(__name__)

# Security scheme for OpenAPI docs
security_scheme = HTTPBearer(auto_error=False)


def get_jwt_secret() -> str:
    """Get JWT secret from environment."""
    secret = os.environ.get("BACKOFFICE_JWT_SECRET")
    if not secret:
        raise RuntimeError("BACKOFFICE_JWT_SECRET environment variable not set")
    return secret


async def get_current_operator(
    request: Request,
    settings: SettingsDep,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security_scheme)],
) -> Operator:
    """Decode the bearer token into the acting Operator.

    Claims: ``sub`` (operator id), ``name``, ``userId``, ``adminId``, ``roles``.

    Raises:
        UnauthorizedError: If the token is missing, invalid or expired
    """
    if credentials is None:
        logger.warning("auth_missing_token", path=request.url.path)
        raise UnauthorizedError("Missing authentication token")

    try:
        payload = jwt.decode(
            credentials.credentials,
            get_jwt_secret(),
            algorithms=[settings.api.jwt_algorithm],
        )
        operator = Operator(
            id=payload.get("sub"),
            name=payload.get("name", ""),
            user_id=payload.get("userId"),
            admin_id=payload.get("adminId"),
            roles=payload.get("roles", []),
        )
    except JWTError as e:
        logger.warning("auth_jwt_error", error=str(e), path=request.url.path)
        raise UnauthorizedError("Invalid or expired token") from None
    except ValidationError as e:
        logger.warning("auth_validation_error", error=str(e), path=request.url.path)
        raise UnauthorizedError("Invalid token claims") from None

    bind_request_context(operator_id=str(operator.id))
    logger.debug("auth_success", operator_id=str(operator.id))
    return operator


CurrentOperatorDep = Annotated[Operator, Depends(get_current_operator)]


async def require_admin(operator: CurrentOperatorDep, settings: SettingsDep) -> Operator:
    """Require the configured admin role.

    Raises:
        ForbiddenError: If the operator lacks the role
    """
    if not operator.has_role(settings.api.admin_role):
        logger.warning("auth_forbidden", operator_id=str(operator.id), required=settings.api.admin_role)
        raise ForbiddenError("Administrator role required")
    return operator


AdminOperatorDep = Annotated[Operator, Depends(require_admin)]
