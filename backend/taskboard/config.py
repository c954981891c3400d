"""환경 변수 기반 애플리케이션 설정을 중앙에서 관리합니다."""

from pydantic_settings import BaseSettings
from typing import List
from pathlib import Path


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./taskboard.db"
    SECRET_KEY: str = "change-me-to-a-random-secret-key"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]

    # Bearer token / password
    TOKEN_EXPIRE_MINUTES: int = 24 * 60  # 0 = no expiry
    PASSWORD_RESET_EXPIRE_MINUTES: int = 60
    BCRYPT_ROUNDS: int = 12

    # Pagination
    DEFAULT_PER_PAGE: int = 10
    MAX_PER_PAGE: int = 100

    # Mail delivery (비어 있으면 발송을 건너뜁니다)
    MAIL_API_URL: str = ""
    MAIL_API_KEY: str = ""
    MAIL_FROM: str = "no-reply@taskboard.local"
    FRONTEND_RESET_URL: str = "http://localhost:3000/reset-password"

    # Background notification retry policy
    NOTIFICATION_MAX_ATTEMPTS: int = 3
    NOTIFICATION_TIMEOUT_SECONDS: float = 30.0
    NOTIFICATION_RETRY_UNTIL_MINUTES: int = 5
    NOTIFICATION_RETRY_BACKOFF_SECONDS: float = 5.0

    class Config:
        # 실행 cwd와 무관하게 backend/.env를 로드한다.
        env_file = str(Path(__file__).resolve().parents[1] / ".env")


settings = Settings()
