"""
Audit trail of logins and fleet record changes.
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.sql import func
from fleetflow.app.db.session import Base


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Unknown emails on failed logins leave actor_id empty
    actor_id = Column(Integer, index=True, nullable=True)
    actor_email = Column(String(255), nullable=True)

    action = Column(String(100), nullable=False, index=True)

    # "vehicle" / "driver" / "trip"; the id is a string so trip codes fit too
    entity_type = Column(String(50), nullable=True, index=True)
    entity_id = Column(String(50), nullable=True)

    meta_data = Column(JSON, nullable=True)
    ip_address = Column(String(50), nullable=True)

    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    def __repr__(self):
        return f"<AuditLog {self.action} {self.entity_type}:{self.entity_id} by {self.actor_email}>"
