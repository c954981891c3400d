"""current_page/last_page/from/to 형식의 페이지 envelope 을 만드는 페이지네이션 헬퍼입니다."""

import math
from typing import Optional

from sqlalchemy.orm import Query

from taskboard.config import settings
from taskboard.utils.helpers import fits_db_int


def clamp_per_page(per_page: Optional[int]) -> int:
    if not per_page or per_page < 1:
        return settings.DEFAULT_PER_PAGE
    return min(per_page, settings.MAX_PER_PAGE)


def paginate(query: Query, page: int = 1, per_page: Optional[int] = None) -> dict:
    page = max(1, page or 1)
    per_page = clamp_per_page(per_page)

    # 필터가 모두 적용된 query 기준으로 total 을 센다.
    total = query.order_by(None).count()
    offset = (page - 1) * per_page
    # DB 정수 범위를 넘는 offset 은 어차피 빈 페이지다.
    items = query.offset(offset).limit(per_page).all() if fits_db_int(offset) else []

    first = (page - 1) * per_page + 1 if items else None
    last = first + len(items) - 1 if items else None
    return {
        "data": items,
        "current_page": page,
        "per_page": per_page,
        "total": total,
        "last_page": max(1, math.ceil(total / per_page)),
        "from": first,
        "to": last,
    }
