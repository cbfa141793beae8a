"""
Driver database model.
"""

from sqlalchemy import Column, Integer, String, Float, Date, DateTime, Enum
from sqlalchemy.sql import func
from fleetflow.app.db.session import Base
from fleetflow.app.models.enums import DriverStatus, enum_values


class Driver(Base):
    """
    Driver model.
    
    License expiry and safety score are stored as-is; compliance buckets
    (expiring/expired, risk level) are derived at read time.
    """
    __tablename__ = "drivers"
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    
    # Licensing
    license_number = Column(String(100), nullable=False)
    license_expiry = Column(Date, nullable=False)
    
    # Performance
    safety_score = Column(Float, default=100, nullable=False)
    trips_completed = Column(Integer, default=0, nullable=False)
    trips_assigned = Column(Integer, default=0, nullable=False)
    
    status = Column(
        Enum(DriverStatus, name="driver_status", values_callable=enum_values),
        default=DriverStatus.ON_DUTY,
        nullable=False,
        index=True
    )
    
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    
    def __repr__(self):
        return f"<Driver(id={self.id}, email='{self.email}', status='{self.status.value}')>"
