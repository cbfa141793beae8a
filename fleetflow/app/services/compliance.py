"""
Driver compliance rules.

Pure functions over already-loaded Driver rows. Nothing here is stored:
license buckets, risk levels and rates are recomputed on every read.
"""

from datetime import date
from typing import Iterable, List, Optional, Dict

from fleetflow.app.core.config import settings
from fleetflow.app.models.enums import DriverStatus


class LicenseStatus:
    VALID = "valid"
    EXPIRING = "expiring"
    EXPIRED = "expired"


class RiskLevel:
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# (label, lower bound inclusive, upper bound exclusive)
SAFETY_BANDS = [
    ("90-100", 90, None),
    ("80-89", 80, 90),
    ("70-79", 70, 80),
    ("Below 70", None, 70),
]

AT_RISK_SAFETY_THRESHOLD = 75
TOP_PERFORMER_COUNT = 3


def percent(numerator: float, denominator: float, digits: int = 1) -> str:
    """
    Format numerator/denominator as a percentage string.
    
    Returns "0" when the denominator is zero, otherwise the value rounded
    to `digits` decimals ("66.7").
    """
    if not denominator:
        return "0"
    return f"{numerator / denominator * 100:.{digits}f}"


def average(values: Iterable[float], digits: int = 1) -> str:
    values = list(values)
    if not values:
        return "0"
    return f"{sum(values) / len(values):.{digits}f}"


def days_until_expiry(expiry: date, today: Optional[date] = None) -> int:
    today = today or date.today()
    return (expiry - today).days


def license_status(expiry: date, today: Optional[date] = None) -> str:
    """Bucket a license by remaining validity: expired, expiring or valid."""
    days = days_until_expiry(expiry, today)
    if days < 0:
        return LicenseStatus.EXPIRED
    if days < settings.license_expiry_warning_days:
        return LicenseStatus.EXPIRING
    return LicenseStatus.VALID


def risk_level(driver, today: Optional[date] = None) -> str:
    """
    Classify a driver's risk.
    
    high: license expired, safety score below 70, or suspended
    medium: license expiring or safety score below 80
    low: everything else
    """
    status = license_status(driver.license_expiry, today)
    if (
        status == LicenseStatus.EXPIRED
        or driver.safety_score < 70
        or driver.status == DriverStatus.SUSPENDED
    ):
        return RiskLevel.HIGH
    if status == LicenseStatus.EXPIRING or driver.safety_score < 80:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def is_assignable(driver, today: Optional[date] = None) -> bool:
    """A driver can take a trip when on duty with an unexpired license."""
    return (
        driver.status == DriverStatus.ON_DUTY
        and license_status(driver.license_expiry, today) != LicenseStatus.EXPIRED
    )


def driver_completion_rate(driver) -> str:
    return percent(driver.trips_completed or 0, driver.trips_assigned or 0)


def compliance_fields(driver, today: Optional[date] = None) -> Dict[str, object]:
    """Read-time fields merged into every driver response."""
    return {
        "license_status": license_status(driver.license_expiry, today),
        "days_until_license_expiry": days_until_expiry(driver.license_expiry, today),
        "risk_level": risk_level(driver, today),
        "is_assignable": is_assignable(driver, today),
        "completion_rate": driver_completion_rate(driver),
    }


def safety_band(score: float) -> str:
    for label, low, high in SAFETY_BANDS:
        if (low is None or score >= low) and (high is None or score < high):
            return label
    return SAFETY_BANDS[-1][0]


def safety_distribution(drivers) -> List[Dict[str, object]]:
    """Count drivers per safety score band, in band order."""
    counts = {label: 0 for label, _, _ in SAFETY_BANDS}
    for driver in drivers:
        counts[safety_band(driver.safety_score)] += 1
    return [{"range": label, "count": counts[label]} for label, _, _ in SAFETY_BANDS]


def top_performers(drivers, limit: int = TOP_PERFORMER_COUNT) -> list:
    return sorted(drivers, key=lambda d: d.safety_score, reverse=True)[:limit]


def at_risk_drivers(drivers) -> list:
    return [
        d for d in drivers
        if d.safety_score < AT_RISK_SAFETY_THRESHOLD or d.status == DriverStatus.SUSPENDED
    ]
