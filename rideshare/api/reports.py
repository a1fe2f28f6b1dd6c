"""Abuse report endpoint."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from rideshare.api.dependencies import get_current_user_id
from rideshare.database import get_db
from rideshare.models.report import Report
from rideshare.schemas.report import ReportCreatedResponse, ReportRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["reports"])


@router.post("/report", response_model=ReportCreatedResponse, response_model_exclude_none=True)
async def create_report(
    current_user_id: Annotated[int, Depends(get_current_user_id)],
    payload: ReportRequest,
    db: Annotated[Session, Depends(get_db)],
):
    """File a report against another user."""
    report = Report(
        reporter_id=current_user_id,
        reported_email=payload.report.reported_email.lower(),
        title=payload.report.title,
        body=payload.report.body,
    )
    db.add(report)
    db.commit()
    db.refresh(report)

    logger.info(f"User {current_user_id} filed report {report.id}")
    return ReportCreatedResponse(result=1, report_id=report.id)
