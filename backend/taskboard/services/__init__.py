"""서비스 레이어 패키지 초기화 모듈입니다."""

from taskboard.services import (
    token_service,
    user_service,
    auth_service,
    project_service,
    task_service,
    notification_service,
)
