"""
Vehicle database model.

A vehicle carries its own running cost totals, which the fuel and
maintenance endpoints keep in step with the linked records.
"""

from sqlalchemy import Column, Integer, String, Float, DateTime, Enum
from sqlalchemy.sql import func
from fleetflow.app.db.session import Base
from fleetflow.app.models.enums import VehicleType, VehicleStatus, enum_values


class Vehicle(Base):
    """
    Vehicle model.
    
    Registered by the Manager with its load capacity and acquisition cost.
    Status moves with trip dispatch/completion and maintenance.
    """
    __tablename__ = "vehicles"
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    
    # Identification
    name = Column(String(100), nullable=False)
    license_plate = Column(String(50), unique=True, nullable=False, index=True)
    model = Column(String(100), nullable=False)
    vehicle_type = Column(
        Enum(VehicleType, name="vehicle_type", values_callable=enum_values),
        nullable=False,
        index=True
    )
    
    # Capacity and usage
    max_load_capacity = Column(Float, nullable=False)  # kg
    current_odometer = Column(Float, default=0, nullable=False)  # km
    
    status = Column(
        Enum(VehicleStatus, name="vehicle_status", values_callable=enum_values),
        default=VehicleStatus.AVAILABLE,
        nullable=False,
        index=True
    )
    region = Column(String(100), default="Unknown", nullable=False, index=True)
    
    # Financials
    acquisition_cost = Column(Float, default=0, nullable=False)
    total_fuel_cost = Column(Float, default=0, nullable=False)
    total_maintenance_cost = Column(Float, default=0, nullable=False)
    
    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    
    def __repr__(self):
        return f"<Vehicle(id={self.id}, plate='{self.license_plate}', status='{self.status.value}')>"
