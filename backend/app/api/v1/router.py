"""
API v1 router.
Aggregates all v1 endpoints.
"""
from fastapi import APIRouter

from backend.app.api.v1 import (
    chit,
    contact,
    dti,
    export,
    interest,
    investments,
    loans,
    mortgage,
    rental,
    savings,
    sessions,
    taxes,
    tvm,
    )
from backend.app.api.v1.utilities import router as utilities_router
from backend.app.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter()

# Calculators
router.include_router(loans.loan_router)
router.include_router(mortgage.mortgage_router)
router.include_router(taxes.tax_router)
router.include_router(interest.interest_router)
router.include_router(chit.chit_router)
router.include_router(dti.dti_router)
router.include_router(investments.investment_router)
router.include_router(tvm.tvm_router)
router.include_router(savings.savings_router)
router.include_router(rental.rental_router)

# Export, contact, persistence
router.include_router(export.export_router)
router.include_router(contact.contact_router)
router.include_router(sessions.session_router)
router.include_router(sessions.preference_router)
router.include_router(sessions.scenario_router)

router.include_router(utilities_router)


@router.get("/health")
async def health_check():
    """Liveness probe."""
    logger.debug("Health check requested")
    return {"status": "ok"}
