"""Analysis API: validate a biometric record and return derived health metrics."""

import logging
from typing import Any

from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse

from app.config import settings
from app.core.errors import ValidationError
from app.core.metrics import ANALYSES_TOTAL, FAILURES_TOTAL, REJECTIONS_TOTAL
from app.schemas.health import ErrorResponse, MetricsResult
from app.services.health_metrics import analyze_health
from app.services.validation import validate_biometric_record

logger = logging.getLogger(__name__)

router = APIRouter(tags=["analysis"])

ANALYSIS_FAILED_MESSAGE = "Failed to analyze health data"


@router.post(
    "/analyze",
    response_model=MetricsResult,
    summary="Analyze health data",
    responses={
        400: {"model": ErrorResponse, "description": "Missing or invalid fields"},
        500: {"model": ErrorResponse, "description": "Analysis failed"},
    },
)
def analyze(payload: Any = Body(...)) -> MetricsResult | JSONResponse:
    """Return BMI, BMR, calorie targets, sleep and hydration status for one record."""
    try:
        record = validate_biometric_record(payload)
    except ValidationError as e:
        REJECTIONS_TOTAL.inc()
        logger.info("Rejected health data (%s): %s", e.field or "body", e.message)
        raise
    if settings.log_payloads:
        logger.debug("Received health data: %s", record.model_dump(by_alias=True))
    try:
        result = analyze_health(record)
    except Exception:
        FAILURES_TOTAL.inc()
        logger.exception("Error processing health data")
        return JSONResponse(status_code=500, content={"error": ANALYSIS_FAILED_MESSAGE})
    ANALYSES_TOTAL.labels(bmi_category=result.bmi.category.value).inc()
    return result
