import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sensorlog.deps import get_db_session
from sensorlog.schemas.submit import SubmissionRequest, SubmissionResponse
from sensorlog.services.ingestion import ingest_submission

log = logging.getLogger("sensorlog.api")

router = APIRouter(prefix="/api/v1", tags=["ingest"])


@router.post("/submit", response_model=SubmissionResponse)
async def submit_readings(
    payload: SubmissionRequest,
    session: AsyncSession = Depends(get_db_session),
):
    try:
        accepted = await ingest_submission(session, payload.entries)
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        log.exception("Error processing sensor data")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error"
        ) from exc

    return SubmissionResponse(
        success=True,
        message="Sensor data processed successfully",
        accepted=accepted,
    )
