"""소유자 범위로 제한된 저장소 레이어입니다.

Project/Task 에 대한 모든 조회와 변경은 이 클래스를 거칩니다. 소유자 조건
(``owner_id`` 또는 ``user_id`` == 현재 사용자)은 호출자가 넘기는 값이 아니라
모델의 ``__owner_column__`` 에서 결정되며, 다른 어떤 필터보다 먼저 적용됩니다.
"""

from typing import Generic, Optional, Type, TypeVar

from sqlalchemy.orm import Query, Session

from taskboard.exceptions import AuthorizationError, NotFoundError
from taskboard.models.user import User
from taskboard.utils.helpers import fits_db_int
from taskboard.utils.pagination import paginate
from taskboard.utils.permissions import VIEW, can, owner_column_of

ModelT = TypeVar("ModelT")


class OwnedRepository(Generic[ModelT]):
    def __init__(self, db: Session, model: Type[ModelT], user: User, label: Optional[str] = None):
        self.db = db
        self.model = model
        self.user = user
        self.owner_column = getattr(model, owner_column_of(model))
        self.label = label or model.__name__

    def query(self) -> Query:
        return self.db.query(self.model).filter(self.owner_column == self.user.id)

    def find(self, entity_id: int) -> Optional[ModelT]:
        """소유한 엔티티만 반환하고, 아니면 None (목록/참조 검증용)."""
        if not fits_db_int(entity_id):
            return None
        return self.query().filter(self.model.id == entity_id).first()

    def authorize(self, entity_id: int, action: str = VIEW) -> ModelT:
        """단건 접근 정책: 없으면 404, 있지만 남의 것이면 403."""
        entity = None
        if fits_db_int(entity_id):
            entity = self.db.query(self.model).filter(self.model.id == entity_id).first()
        if entity is None:
            raise NotFoundError(f"{self.label} not found.")
        if not can(action, entity, self.user):
            raise AuthorizationError(f"You are not authorized to {action} this {self.label.lower()}.")
        return entity

    def add(self, entity: ModelT) -> ModelT:
        # 생성 시에도 소유자는 항상 세션 사용자로 강제한다.
        setattr(entity, self.owner_column.key, self.user.id)
        self.db.add(entity)
        return entity

    def paginate(self, query: Query, page: int = 1, per_page: Optional[int] = None) -> dict:
        return paginate(query.order_by(self.model.id), page, per_page)
