"""Read-side helpers for assertions against the test database."""

from typing import Optional

from sqlalchemy import func, select

from housedirect.models import JobsOutbox


async def job_by_scope(db, unique_scope: str) -> Optional[JobsOutbox]:
    result = await db.execute(select(JobsOutbox).where(JobsOutbox.unique_scope == unique_scope))
    return result.scalar_one_or_none()


async def count_rows(db, model) -> int:
    return (await db.execute(select(func.count()).select_from(model))).scalar_one()
