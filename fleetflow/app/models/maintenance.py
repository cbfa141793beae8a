"""
Maintenance record database model.
"""

from sqlalchemy import Column, Integer, String, Float, Date, Text, DateTime, Enum
from sqlalchemy.sql import func
from fleetflow.app.db.session import Base
from fleetflow.app.models.enums import MaintenanceStatus, enum_values


class Maintenance(Base):
    """Service performed (or scheduled) on a vehicle."""
    __tablename__ = "maintenance_records"
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    vehicle_id = Column(Integer, nullable=False, index=True)
    
    service_type = Column(String(255), nullable=False)
    cost = Column(Float, nullable=False)
    description = Column(Text, nullable=True)
    service_date = Column(Date, nullable=False, index=True)
    next_service_date = Column(Date, nullable=True)
    
    status = Column(
        Enum(MaintenanceStatus, name="maintenance_status", values_callable=enum_values),
        default=MaintenanceStatus.SCHEDULED,
        nullable=False,
        index=True
    )
    notes = Column(Text, nullable=True)
    
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    
    def __repr__(self):
        return f"<Maintenance(id={self.id}, vehicle_id={self.vehicle_id}, status='{self.status.value}')>"
