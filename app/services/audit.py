from __future__ import annotations
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from app.models.audit_log import AuditLog

async def audit(
    db: AsyncSession,
    *,
    actor_session_id: str | None,
    action: str,
    target_type: str | None = None,
    target_id: str | None = None,
    detail: dict | None = None,
) -> None:
    db.add(AuditLog(
        actor_session_id=actor_session_id,
        action=action,
        target_type=target_type,
        target_id=target_id,
        detail=detail or {},
    ))


async def audit_trail(db: AsyncSession, *, target_type: str, target_id: str) -> list[AuditLog]:
    stmt = (
        select(AuditLog)
        .where(AuditLog.target_type == target_type, AuditLog.target_id == target_id)
        .order_by(AuditLog.created_at.asc())
    )
    return list((await db.execute(stmt)).scalars().all())
