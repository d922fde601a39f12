"""Checkpoint helpers — let long maintenance jobs resume after the last processed id."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from afritable.models import JobCheckpoint

logger = logging.getLogger(__name__)


async def get_checkpoint(session: AsyncSession, job_name: str) -> Optional[int]:
    """Return the last processed restaurant id for `job_name`, or None."""
    row = await session.get(JobCheckpoint, job_name)
    return row.last_id if row else None


async def save_checkpoint(session: AsyncSession, job_name: str, last_id: int) -> None:
    """Record progress. The caller commits."""
    row = await session.get(JobCheckpoint, job_name)
    if row is None:
        session.add(JobCheckpoint(job_name=job_name, last_id=last_id))
    else:
        row.last_id = last_id
    logger.debug("Checkpoint %s → %d", job_name, last_id)


async def clear_checkpoint(session: AsyncSession, job_name: str) -> None:
    await session.execute(delete(JobCheckpoint).where(JobCheckpoint.job_name == job_name))
