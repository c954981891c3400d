"""외부 메일 발송 API(HTTP)를 호출하는 얇은 클라이언트입니다."""

from dataclasses import dataclass
from typing import Optional

import httpx

from taskboard.config import settings


@dataclass
class MailMessage:
    to: str
    subject: str
    body: str
    # 로그에는 수신 주소 대신 이 id 만 남긴다.
    user_id: Optional[int] = None


def is_mail_configured() -> bool:
    return bool(settings.MAIL_API_URL.strip())


def _build_headers() -> dict:
    headers = {"Content-Type": "application/json"}
    if settings.MAIL_API_KEY:
        headers["Authorization"] = f"Bearer {settings.MAIL_API_KEY}"
    return headers


def send_mail(message: MailMessage, timeout: Optional[float] = None) -> None:
    """발송에 실패하면 httpx 예외를 그대로 올린다. 재시도는 notification_service 가 한다."""
    payload = {
        "from": settings.MAIL_FROM,
        "to": [message.to],
        "subject": message.subject,
        "text": message.body,
    }
    response = httpx.post(
        settings.MAIL_API_URL,
        json=payload,
        headers=_build_headers(),
        timeout=timeout or settings.NOTIFICATION_TIMEOUT_SECONDS,
    )
    response.raise_for_status()
