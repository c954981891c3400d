"""Notification Service 도메인 서비스 레이어입니다. 가입 환영/비밀번호 재설정 메일을 요청 밖에서 발송합니다.

발송은 FastAPI BackgroundTasks 로 응답 이후(즉 DB commit 이후)에 실행되며,
실패는 로그로만 남기고 요청에는 절대 전파하지 않습니다.
"""

import logging
import time
from datetime import datetime, timedelta
from typing import Callable, Optional
from urllib.parse import urlencode

from fastapi import BackgroundTasks

from taskboard.config import settings
from taskboard.models.user import User
from taskboard.services import mail_client
from taskboard.services.mail_client import MailMessage
from taskboard.utils.helpers import utcnow

logger = logging.getLogger(__name__)


def build_welcome_message(user: User) -> MailMessage:
    return MailMessage(
        to=user.email,
        subject="Welcome to Taskboard",
        user_id=user.id,
        body=(
            f"Hi {user.name},\n\n"
            "Your account has been created. You can now create projects and start tracking tasks.\n"
        ),
    )


def build_password_reset_message(user: User, token: str) -> MailMessage:
    email = user.email
    link = f"{settings.FRONTEND_RESET_URL}?{urlencode({'email': email, 'token': token})}"
    return MailMessage(
        to=email,
        subject="Reset your Taskboard password",
        user_id=user.id,
        body=(
            "We received a request to reset your password.\n\n"
            f"Reset link: {link}\n\n"
            f"This link expires in {settings.PASSWORD_RESET_EXPIRE_MINUTES} minutes. "
            "If you did not request a reset, you can ignore this email.\n"
        ),
    )


def deliver(
    message: MailMessage,
    kind: str,
    enqueued_at: Optional[datetime] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """재시도 정책: 최대 N회, 시도당 timeout, enqueue 후 retry-until 마감 이후에는 시도하지 않는다."""
    if not mail_client.is_mail_configured():
        logger.debug("Mail delivery not configured, skipping %s notification for user_id=%s", kind, message.user_id)
        return False

    enqueued_at = enqueued_at or utcnow()
    deadline = enqueued_at + timedelta(minutes=settings.NOTIFICATION_RETRY_UNTIL_MINUTES)
    max_attempts = max(1, settings.NOTIFICATION_MAX_ATTEMPTS)

    attempt = 0
    while attempt < max_attempts:
        if utcnow() >= deadline:
            logger.error(
                "%s notification for user_id=%s dropped: retry deadline passed after %s attempt(s)",
                kind, message.user_id, attempt,
            )
            return False
        attempt += 1
        try:
            mail_client.send_mail(message, timeout=settings.NOTIFICATION_TIMEOUT_SECONDS)
            logger.info("%s notification sent to user_id=%s (attempt %s)", kind, message.user_id, attempt)
            return True
        except Exception as exc:
            logger.warning(
                "%s notification for user_id=%s failed (attempt %s/%s): %s",
                kind, message.user_id, attempt, max_attempts, exc,
            )
            if attempt < max_attempts and settings.NOTIFICATION_RETRY_BACKOFF_SECONDS > 0:
                sleep(settings.NOTIFICATION_RETRY_BACKOFF_SECONDS)

    logger.error("%s notification for user_id=%s failed permanently after %s attempts", kind, message.user_id, attempt)
    return False


def _queue(background_tasks: BackgroundTasks, message: MailMessage, kind: str) -> bool:
    try:
        background_tasks.add_task(deliver, message, kind, utcnow())
    except Exception as exc:
        logger.error("Failed to queue %s notification for user_id=%s: %s", kind, message.user_id, exc)
        return False
    logger.info("%s notification queued for user_id=%s", kind, message.user_id)
    return True


def queue_welcome_notification(background_tasks: BackgroundTasks, user: User) -> bool:
    return _queue(background_tasks, build_welcome_message(user), "welcome")


def queue_password_reset_notification(background_tasks: BackgroundTasks, user: User, token: str) -> bool:
    return _queue(background_tasks, build_password_reset_message(user, token), "password_reset")
