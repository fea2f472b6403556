from sqlalchemy import select
from sqlalchemy.orm import Session
from allowance.models.audit_log import AuditLog


def log_event(
    s: Session,
    user_id: str,
    action: str,
    entity_type: str,
    entity_id: int | None = None,
    details: dict | None = None,
):
    row = AuditLog(
        user_id=user_id,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        details=details,
    )
    s.add(row)
    s.commit()
    return row


def events_for(s: Session, user_id: str, entity_type: str | None = None, action: str | None = None, limit: int = 200):
    q = select(AuditLog).where(AuditLog.user_id == user_id).order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
    if entity_type:
        q = q.where(AuditLog.entity_type == entity_type)
    if action:
        q = q.where(AuditLog.action == action)
    return s.execute(q.limit(limit)).scalars().all()
