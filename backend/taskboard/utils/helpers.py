import hashlib
from datetime import date, datetime, timezone


def utcnow() -> datetime:
    # DB 컬럼이 naive DateTime 이므로 UTC 기준 naive 값으로 맞춘다.
    return datetime.now(timezone.utc).replace(tzinfo=None)


def utctoday() -> date:
    return utcnow().date()


def sha256_hex(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


# SQLite/BIGINT 가 담을 수 있는 가장 큰 정수
MAX_DB_INT = 2 ** 63 - 1


def fits_db_int(value: int) -> bool:
    return -MAX_DB_INT - 1 <= value <= MAX_DB_INT
