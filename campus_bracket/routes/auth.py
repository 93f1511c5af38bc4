from fastapi import Depends, HTTPException, Request
from starlette import status

from campus_bracket.models.db.user import Principal
from campus_bracket.utils.errors import PermissionDenied


def get_principal(request: Request) -> Principal:
    """
    The authenticated caller, as placed on the request state by the identity layer.

    Sessions and tokens are handled in front of this service. The identity middleware must set
    `request.state.principal` to a mapping (or object) with `id` (the user id) and `role`
    (`REGULAR` or `ADMIN`). Without it every authenticated route answers 401.
    """
    principal = getattr(request.state, "principal", None)
    if principal is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return Principal.model_validate(principal)


def require_admin(principal: Principal = Depends(get_principal)) -> Principal:
    if not principal.is_admin:
        raise PermissionDenied("Admin access is required.")
    return principal
