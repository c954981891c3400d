"""소유권 기반 권한 판정 헬퍼입니다. 모든 Project/Task 정책은 여기서만 판단합니다."""

from typing import Any

from taskboard.models.user import User

VIEW = "view"
UPDATE = "update"
DELETE = "delete"


def owner_column_of(model) -> str:
    column = getattr(model, "__owner_column__", None)
    if column is None:
        raise TypeError(f"{model.__name__} does not declare __owner_column__")
    return column


def owner_id_of(entity: Any) -> int:
    return getattr(entity, owner_column_of(type(entity)))


def is_owner(entity: Any, user: User) -> bool:
    return owner_id_of(entity) == user.id


def can_view(entity: Any, user: User) -> bool:
    return is_owner(entity, user)


def can_update(entity: Any, user: User) -> bool:
    return is_owner(entity, user)


def can_delete(entity: Any, user: User) -> bool:
    return is_owner(entity, user)


_POLICIES = {
    VIEW: can_view,
    UPDATE: can_update,
    DELETE: can_delete,
}


def can(action: str, entity: Any, user: User) -> bool:
    policy = _POLICIES.get(action)
    if policy is None:
        raise ValueError(f"Unknown action: {action}")
    return policy(entity, user)
