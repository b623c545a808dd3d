from fastapi import APIRouter, Depends, HTTPException
import logging

from ..application.lifecycle import CANCELLATION_REASONS, REJECTION_REASONS, SERVICE_TYPES
from ..application.pricing import CATEGORIES, CUSTOM_ISSUE, issues_for
from ..application.services.estimator_service import EstimateRequest, EstimatorService
from ..dependencies import CurrentActor, get_estimator_service, require_customer
from ..schemas import CatalogResponse, EstimateRequestBody, EstimateResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/diagnoses", tags=["Diagnosis"])


@router.get("/catalog", response_model=CatalogResponse)
def get_catalog():
    """Categories, their predefined issues and the reason lists used by the apps."""
    return CatalogResponse(
        categories=CATEGORIES,
        issues={category: issues_for(category) for category in CATEGORIES},
        custom_issue=CUSTOM_ISSUE,
        service_types=list(SERVICE_TYPES),
        rejection_reasons=REJECTION_REASONS,
        cancellation_reasons=CANCELLATION_REASONS,
    )


@router.post("/estimate", response_model=EstimateResponse)
async def estimate(
    payload: EstimateRequestBody,
    actor: CurrentActor = Depends(require_customer),
    service: EstimatorService = Depends(get_estimator_service),
):
    try:
        result = await service.estimate(actor.id, EstimateRequest(**payload.model_dump()))
        return EstimateResponse(
            diagnosis=result.diagnosis,
            estimated_cost=result.estimated_cost,
            currency=result.currency,
            source=result.source,
            is_custom_issue=result.is_custom_issue,
            provider=result.provider,
            diagnosis_id=result.diagnosis_id,
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error estimating repair for {payload.category}: {e}")
        raise HTTPException(status_code=500, detail="Failed to estimate repair")
