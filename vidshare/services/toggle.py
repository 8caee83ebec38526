from __future__ import annotations

import logging
from typing import Any, Type

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.models.base import Base

logger = logging.getLogger("vidshare.toggle")


async def toggle_relation(db: AsyncSession, model: Type[Base], **criteria: Any) -> bool:
    """Remove the row matching ``criteria`` if present, otherwise create it.

    Returns True when the relation exists afterwards. The delete is a single
    conditional statement and the insert relies on the table's unique
    constraint, so two identical concurrent toggles cannot leave a duplicate.
    """
    conditions = [getattr(model, key) == value for key, value in criteria.items()]
    result = await db.execute(delete(model).where(*conditions))
    if result.rowcount:
        await db.commit()
        return False

    db.add(model(**criteria))
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.info("Concurrent toggle already created %s %s", model.__tablename__, criteria)
    return True
