"""
Paged reads shared by every list endpoint.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession


async def paginate(
    db: AsyncSession,
    stmt: Select[Any],
    page: int,
    page_size: int,
) -> dict[str, Any]:
    """Run *stmt* for one page and count the full result set.

    Returns the keyword arguments of ``PagedResponse``.
    """
    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total = (await db.execute(count_stmt)).scalar_one()

    result = await db.execute(stmt.offset((page - 1) * page_size).limit(page_size))
    return {
        "items": list(result.scalars().all()),
        "page": page,
        "page_size": page_size,
        "total_count": total,
    }
