"""GET /v1/quality - data quality report and its recorded history"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from chronos_analytics.api.dependencies import get_request_id, get_store
from chronos_analytics.api.v1.schemas import QualityHistoryItem, QualityHistoryResponse
from chronos_analytics.domain.exceptions import DataStoreError
from chronos_analytics.domain.models import DataQualityReport
from chronos_analytics.domain.reporting import get_data_quality_report
from chronos_analytics.domain.store import DocumentStore
from chronos_analytics.infrastructure.database.repositories import QualityReportRepository
from chronos_analytics.infrastructure.database.session import get_db

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/quality", response_model=DataQualityReport)
async def quality_report(
    request: Request,
    db: Session = Depends(get_db),
    store: DocumentStore = Depends(get_store),
):
    """
    Compare headline counts against the expected baselines.

    Flow:
    1. Run a fresh complete analysis
    2. Evaluate each check as CORRECT or NEEDS_REVIEW
    3. Record the report in the history table
    """
    request_id = get_request_id(request)

    try:
        report = await get_data_quality_report(store)
        QualityReportRepository(db).create_report(report)
        db.commit()
        return report

    except DataStoreError as e:
        db.rollback()
        logger.error(f"Document store error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Document store unavailable")

    except Exception as e:
        db.rollback()
        logger.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/quality/history", response_model=QualityHistoryResponse)
def quality_history(
    limit: int = Query(20, ge=1, le=100, description="Number of reports to return"),
    db: Session = Depends(get_db),
):
    """Most recent recorded quality reports, newest first"""
    records = QualityReportRepository(db).get_recent_reports(limit=limit)

    return QualityHistoryResponse(
        reports=[
            QualityHistoryItem(
                report_id=str(r.id),
                status=r.status,
                analysis_timestamp=r.analysis_timestamp,
                checks=r.checks,
                recommendations=r.recommendations or [],
                created_at=r.created_at.isoformat(),
            )
            for r in records
        ]
    )
