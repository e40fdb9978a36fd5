"""Data access layer for recorded quality reports"""

from dataclasses import asdict
from typing import List
from sqlalchemy.orm import Session
from chronos_analytics.infrastructure.database.models import QualityReportRecord
from chronos_analytics.domain.models import DataQualityReport


class QualityReportRepository:
    """Repository for quality report history"""

    def __init__(self, db: Session):
        self.db = db

    def create_report(self, report: DataQualityReport) -> QualityReportRecord:
        """Persist a quality report"""
        record = QualityReportRecord(
            status=report.status,
            analysis_timestamp=report.timestamp,
            checks={name: asdict(check) for name, check in report.quality.items()},
            summary=asdict(report.summary),
            recommendations=list(report.recommendations),
        )
        self.db.add(record)
        self.db.flush()  # Get ID without committing
        return record

    def get_recent_reports(self, limit: int = 20) -> List[QualityReportRecord]:
        """Fetch the most recent reports, newest first"""
        return (
            self.db.query(QualityReportRecord)
            .order_by(QualityReportRecord.created_at.desc())
            .limit(limit)
            .all()
        )
