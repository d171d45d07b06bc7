from enum import Enum

from fastapi import Depends, HTTPException, Request

from app.deps.auth import require_auth


class Role(Enum):
    ADMIN = "admin"
    SITE_MANAGER = "sitemanager"


def require_role(*roles: Role):
    allowed = {r.value for r in roles}

    def dependency(request: Request, auth: tuple[int, str] = Depends(require_auth)):
        _user_id, claim_role = auth

        try:
            user_role = Role(str(claim_role).lower())
        except ValueError as exc:
            raise HTTPException(status_code=403, detail="Invalid role claim") from exc

        if user_role.value not in allowed:
            if allowed == {Role.ADMIN.value}:
                raise HTTPException(status_code=403, detail="Forbidden. Admin access required.")
            raise HTTPException(status_code=403, detail="Forbidden. Site Manager access required.")

        request.state.role = user_role.value
        return user_role

    return dependency
