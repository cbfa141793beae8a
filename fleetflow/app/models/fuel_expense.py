"""
Fuel expense database model.
"""

from sqlalchemy import Column, Integer, Float, Date, Text, DateTime
from sqlalchemy.sql import func
from fleetflow.app.db.session import Base


class FuelExpense(Base):
    """A single refuelling logged against a vehicle (optionally a trip)."""
    __tablename__ = "fuel_expenses"
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    vehicle_id = Column(Integer, nullable=False, index=True)
    trip_id = Column(Integer, nullable=True, index=True)
    
    liters = Column(Float, nullable=False)
    cost = Column(Float, nullable=False)
    cost_per_liter = Column(Float, nullable=False)
    km = Column(Float, default=0, nullable=False)
    fuel_date = Column(Date, nullable=False, index=True)
    notes = Column(Text, nullable=True)
    
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    
    def __repr__(self):
        return f"<FuelExpense(id={self.id}, vehicle_id={self.vehicle_id}, cost={self.cost})>"
