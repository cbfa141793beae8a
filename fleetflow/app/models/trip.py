"""
Trip database model.

Trips are created by Dispatchers and carry cargo with one vehicle and one driver.
"""

from sqlalchemy import Column, Integer, String, Float, Text, DateTime, Enum
from sqlalchemy.sql import func
from fleetflow.app.db.session import Base
from fleetflow.app.models.enums import enum_values
from fleetflow.app.models.trip_enums import TripStatus


class Trip(Base):
    """
    Trip model.
    
    vehicle_id and driver_id are plain references without a foreign-key
    constraint: deleting a vehicle or driver leaves its trips in place.
    """
    __tablename__ = "trips"
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    trip_id = Column(String(50), unique=True, nullable=False, index=True)
    
    # Assignment
    vehicle_id = Column(Integer, nullable=False, index=True)
    driver_id = Column(Integer, nullable=False, index=True)
    
    # Cargo
    cargo_weight = Column(Float, nullable=False)  # kg
    cargo_description = Column(Text, nullable=True)
    start_location = Column(String(255), nullable=False)
    end_location = Column(String(255), nullable=False)
    
    # Odometer readings captured on dispatch/completion
    start_odometer = Column(Float, nullable=True)
    end_odometer = Column(Float, nullable=True)
    total_distance = Column(Float, nullable=True)
    
    status = Column(
        Enum(TripStatus, name="trip_status", values_callable=enum_values),
        default=TripStatus.DRAFT,
        nullable=False,
        index=True
    )
    notes = Column(Text, nullable=True)
    
    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    start_time = Column(DateTime(timezone=True), nullable=True)
    end_time = Column(DateTime(timezone=True), nullable=True)
    
    def __repr__(self):
        return f"<Trip(id={self.id}, trip_id='{self.trip_id}', status='{self.status.value}')>"
