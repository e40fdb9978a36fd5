"""SQLAlchemy ORM models for recorded quality reports"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, DateTime, Text, JSON
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class QualityReportRecord(Base):
    """One data quality report as returned to a caller"""

    __tablename__ = "quality_report"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    status = Column(Text, nullable=False, index=True)
    analysis_timestamp = Column(Text, nullable=False)
    checks = Column(JSON, nullable=False)
    summary = Column(JSON, nullable=False)
    recommendations = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
