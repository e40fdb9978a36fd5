"""Pydantic schemas for API responses"""

from pydantic import BaseModel
from typing import Any, Dict, List


class QualityHistoryItem(BaseModel):
    """Single recorded quality report"""

    report_id: str
    status: str
    analysis_timestamp: str
    checks: Dict[str, Dict[str, Any]]
    recommendations: List[str]
    created_at: str


class QualityHistoryResponse(BaseModel):
    """Response for GET /v1/quality/history"""

    reports: List[QualityHistoryItem]
