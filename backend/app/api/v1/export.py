"""
Export API endpoints.

- POST /export/csv: Amortization schedule as a downloadable CSV report
"""
from fastapi import APIRouter
from fastapi.responses import Response

from backend.app.logging_config import get_logger
from backend.app.schemas.export import CSVExportRequest
from backend.app.services.export_service import CSV_FILENAME, CSV_MEDIA_TYPE, build_csv_report

logger = get_logger(__name__)

export_router = APIRouter(prefix="/export", tags=["Export"])


@export_router.post("/csv")
async def export_csv(request: CSVExportRequest) -> Response:
    """
    Download an amortization schedule as CSV.

    The request carries the rows already shown to the user plus the loan
    summary; missing summary figures are written as `N/A`.

    **Example Request**:
    ```json
    {
      "principal": "100000",
      "rate": "10",
      "tenure": 12,
      "emi": "8791.59",
      "currency": "INR",
      "amortization": [
        {"month": 1, "payment": "8791.59", "principal": "7958.26", "interest": "833.33", "balance": "92041.74"}
      ]
    }
    ```

    **Response**: `text/csv` attachment named `emi-schedule.csv`.
    """
    content = build_csv_report(request)
    logger.info("CSV report exported", rows=len(request.amortization))
    return Response(
        content=content,
        media_type=CSV_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{CSV_FILENAME}"'},
        )
