"""
Report export service.

Builds the four finance/payroll reports as plain rows, then renders them
either as CSV or as a printable HTML document (print-to-PDF from the browser).
"""

import csv
import io
from datetime import date
from pathlib import Path
from typing import List, Optional

from fastapi.templating import Jinja2Templates
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from fleetflow.app.models.driver import Driver
from fleetflow.app.models.enums import DriverStatus
from fleetflow.app.models.fuel_expense import FuelExpense
from fleetflow.app.models.maintenance import Maintenance
from fleetflow.app.models.trip import Trip
from fleetflow.app.models.trip_enums import TripStatus
from fleetflow.app.models.vehicle import Vehicle
from fleetflow.app.services.compliance import percent

BASE_PAY = 38000
BONUS_PER_TRIP = 100
REPORT_FOOTER = "FleetFlow Report System | Confidential"

templates = Jinja2Templates(directory=Path(__file__).resolve().parent.parent / "templates")


class ReportType:
    FUEL = "fuel"
    MAINTENANCE = "maintenance"
    VEHICLE_COST = "vehicle-cost"
    PAYROLL = "payroll"

    ALL = (FUEL, MAINTENANCE, VEHICLE_COST, PAYROLL)


class Report:
    """Renderer-agnostic report: header, body rows, totals row and summary lines."""

    def __init__(self, title: str, filename: str, headers: List[str]):
        self.title = title
        self.filename = filename
        self.headers = headers
        self.rows: List[list] = []
        self.totals: Optional[list] = None
        self.summary: List[str] = []


def _num(value: float):
    """Whole numbers print without decimals."""
    value = float(value or 0)
    return int(value) if value.is_integer() else round(value, 2)


async def _vehicle_names(db: AsyncSession, vehicle_ids) -> dict:
    ids = set(vehicle_ids)
    if not ids:
        return {}
    result = await db.execute(select(Vehicle.id, Vehicle.name).where(Vehicle.id.in_(ids)))
    return dict(result.all())


async def build_fuel_report(db: AsyncSession, vehicle_id: Optional[int] = None) -> Report:
    query = select(FuelExpense).order_by(FuelExpense.fuel_date.desc(), FuelExpense.id.desc())
    if vehicle_id:
        query = query.where(FuelExpense.vehicle_id == vehicle_id)
    expenses = (await db.execute(query)).scalars().all()
    names = await _vehicle_names(db, (e.vehicle_id for e in expenses))

    report = Report("Fuel Expense Report", "fuel-expense-report", [
        "Vehicle", "Date", "Liters", "Cost", "Km Driven", "Efficiency (km/L)",
    ])
    for expense in expenses:
        efficiency = f"{expense.km / expense.liters:.1f}" if expense.liters and expense.km else ""
        report.rows.append([
            names.get(expense.vehicle_id, "Unknown"),
            expense.fuel_date.isoformat(),
            _num(expense.liters),
            _num(expense.cost),
            _num(expense.km),
            efficiency,
        ])

    total_liters = sum(e.liters for e in expenses)
    total_cost = sum(e.cost for e in expenses)
    total_km = sum(e.km for e in expenses)
    report.totals = [
        "Totals", "", _num(total_liters), _num(total_cost), _num(total_km),
        f"{total_km / total_liters:.1f}" if total_liters and total_km else "",
    ]
    report.summary = [
        f"Records: {len(expenses)}",
        f"Total fuel cost: {_num(total_cost)}",
    ]
    return report


async def build_maintenance_report(db: AsyncSession, vehicle_id: Optional[int] = None) -> Report:
    query = select(Maintenance).order_by(Maintenance.service_date.desc(), Maintenance.id.desc())
    if vehicle_id:
        query = query.where(Maintenance.vehicle_id == vehicle_id)
    records = (await db.execute(query)).scalars().all()
    names = await _vehicle_names(db, (r.vehicle_id for r in records))

    report = Report("Maintenance Cost Report", "maintenance-cost-report", [
        "Vehicle", "Date", "Service Type", "Cost", "Status",
    ])
    for record in records:
        report.rows.append([
            names.get(record.vehicle_id, "Unknown"),
            record.service_date.isoformat(),
            record.service_type,
            _num(record.cost),
            record.status.value,
        ])

    total_cost = sum(r.cost for r in records)
    report.totals = ["Total Cost", "", "", _num(total_cost), ""]
    report.summary = [
        f"Records: {len(records)}",
        f"Total maintenance cost: {_num(total_cost)}",
    ]
    return report


async def build_vehicle_cost_report(db: AsyncSession, vehicle_id: Optional[int] = None) -> Report:
    query = select(Vehicle).order_by(Vehicle.name)
    if vehicle_id:
        query = query.where(Vehicle.id == vehicle_id)
    vehicles = (await db.execute(query)).scalars().all()

    report = Report("Vehicle Cost Summary Report", "vehicle-cost-summary", [
        "Vehicle", "Fuel Cost", "Maintenance Cost", "Total Cost", "Acquisition Cost", "ROI %",
    ])
    for vehicle in vehicles:
        total = vehicle.total_fuel_cost + vehicle.total_maintenance_cost
        report.rows.append([
            vehicle.name,
            _num(vehicle.total_fuel_cost),
            _num(vehicle.total_maintenance_cost),
            _num(total),
            _num(vehicle.acquisition_cost),
            percent(total, vehicle.acquisition_cost, digits=2),
        ])

    fleet_total = sum(v.total_fuel_cost + v.total_maintenance_cost for v in vehicles)
    report.totals = [
        "Totals",
        _num(sum(v.total_fuel_cost for v in vehicles)),
        _num(sum(v.total_maintenance_cost for v in vehicles)),
        _num(fleet_total),
        _num(sum(v.acquisition_cost for v in vehicles)),
        "",
    ]
    report.summary = [
        f"Vehicles: {len(vehicles)}",
        f"Total operational cost: {_num(fleet_total)}",
    ]
    return report


async def build_payroll_report(db: AsyncSession, vehicle_id: Optional[int] = None) -> Report:
    """Base pay for on-duty drivers plus a bonus per completed trip."""
    completed_query = select(Trip.driver_id, func.count(Trip.id))\
        .where(Trip.status == TripStatus.COMPLETED)\
        .group_by(Trip.driver_id)
    if vehicle_id:
        completed_query = completed_query.where(Trip.vehicle_id == vehicle_id)
    completed_by_driver = dict((await db.execute(completed_query)).all())

    drivers = (await db.execute(select(Driver).order_by(Driver.name))).scalars().all()

    report = Report("Payroll Summary Report", "payroll-summary", [
        "Driver", "Trips Completed", "Base Pay", "Bonus", "Total Pay",
    ])
    total_pay = 0
    for driver in drivers:
        trips = completed_by_driver.get(driver.id, 0)
        base_pay = BASE_PAY if driver.status == DriverStatus.ON_DUTY else 0
        bonus = trips * BONUS_PER_TRIP
        total_pay += base_pay + bonus
        report.rows.append([driver.name, trips, base_pay, bonus, base_pay + bonus])

    report.totals = [
        "Total",
        sum(row[1] for row in report.rows),
        sum(row[2] for row in report.rows),
        sum(row[3] for row in report.rows),
        total_pay,
    ]
    report.summary = [
        f"Drivers: {len(drivers)}",
        f"Total payroll: {total_pay}",
    ]
    return report


REPORT_BUILDERS = {
    ReportType.FUEL: build_fuel_report,
    ReportType.MAINTENANCE: build_maintenance_report,
    ReportType.VEHICLE_COST: build_vehicle_cost_report,
    ReportType.PAYROLL: build_payroll_report,
}


def render_csv(report: Report) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(report.headers)
    writer.writerows(report.rows)
    if report.totals:
        writer.writerow([])
        writer.writerow(report.totals)
    return buffer.getvalue()


def render_html(report: Report, generated_on: Optional[date] = None) -> str:
    """Printable HTML document rendered from ``templates/report.html``; cells are autoescaped."""
    return templates.get_template("report.html").render(
        report=report,
        generated_on=generated_on or date.today(),
        footer=REPORT_FOOTER,
    )
