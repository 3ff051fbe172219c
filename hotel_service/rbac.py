from fastapi import Depends

from .errors import Forbidden
from .schemas import Principal, Role
from .security import get_current_user


def check_role(principal: Principal, allowed_roles) -> None:
    allowed = {Role(r) for r in allowed_roles}
    if principal.role not in allowed:
        raise Forbidden("Insufficient permissions")


def require_role(*allowed_roles: Role):
    """Dependency that authenticates the caller, then gates on role."""

    def guard(principal: Principal = Depends(get_current_user)) -> Principal:
        check_role(principal, allowed_roles)
        return principal

    return guard
