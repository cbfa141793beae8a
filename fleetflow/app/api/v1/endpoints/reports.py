"""
Report Export API Endpoints.

CSV downloads and printable HTML documents for finance and payroll.
"""

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query, Path
from fastapi.responses import Response, HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from fleetflow.app.db.session import get_db
from fleetflow.app.core.guards import require_role, REPORT_READERS
from fleetflow.app.services import reports

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/{report_type}")
async def export_report(
    report_type: str = Path(..., description="fuel, maintenance, vehicle-cost or payroll"),
    export_format: str = Query("csv", alias="format", pattern="^(csv|html)$", description="csv or html"),
    vehicle_id: Optional[int] = Query(None, description="Restrict to one vehicle"),
    current_user: dict = Depends(require_role(REPORT_READERS)),
    db: AsyncSession = Depends(get_db)
):
    """
    Export a report (Manager, Financial Analyst).
    
    csv: attachment download. html: printable document (print to PDF from the browser).
    """
    builder = reports.REPORT_BUILDERS.get(report_type)
    if builder is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown report type: {report_type}"
        )
    
    report = await builder(db, vehicle_id=vehicle_id)
    
    if export_format == "html":
        return HTMLResponse(content=reports.render_html(report))
    
    return Response(
        content=reports.render_csv(report),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{report.filename}.csv"'}
    )
