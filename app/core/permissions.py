from fastapi import Depends, HTTPException
from loguru import logger

from app.core.auth import Principal, get_current_user
from app.schemas.enums import Action, Role


# --------------------------------------------------
# GRANTS
# --------------------------------------------------

_STAFF_ACTIONS = frozenset(
    {
        Action.share_location,
        Action.view_locations,
        Action.broadcast,
        Action.check_weather,
    }
)

GRANTS: dict[Role, frozenset[Action]] = {
    Role.STUDENT: frozenset({Action.share_location}),
    Role.TEACHER: _STAFF_ACTIONS,
    Role.ADMIN: _STAFF_ACTIONS | {Action.manage_users},
}


def is_allowed(role: Role, action: Action) -> bool:
    return action in GRANTS.get(role, frozenset())


def require(action: Action):
    """Dependency factory: resolve the caller and check one action for them."""

    def _dependency(user: Principal = Depends(get_current_user)) -> Principal:
        if not is_allowed(user.role, action):
            logger.warning(f"Forbidden | user={user.id} role={user.role.value} action={action.value}")
            raise HTTPException(
                status_code=403,
                detail=f"Role {user.role.value} is not allowed to {action.value}",
            )
        return user

    return _dependency
