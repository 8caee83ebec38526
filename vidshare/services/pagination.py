from __future__ import annotations

from typing import Any, Sequence

from sqlalchemy import Row, Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession


async def paginate(
    db: AsyncSession, stmt: Select[Any], page: int, limit: int
) -> tuple[Sequence[Row[Any]], int]:
    """Run ``stmt`` for one page and return the rows with the unpaged total."""
    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total = (await db.execute(count_stmt)).scalar_one()
    offset = (page - 1) * limit
    rows = (await db.execute(stmt.offset(offset).limit(limit))).all()
    return rows, total
