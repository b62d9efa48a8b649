"""Property routes."""

from fastapi import APIRouter, Depends, HTTPException

from src.api.deps import get_coop_client
from src.api.routes.payments import journey_to_response
from src.api.schemas import PaymentJourneyResponse
from src.config import settings
from src.data.coop_api import CooperativeAPIClient
from src.engine.reconciler import build_journey

router = APIRouter(prefix="/api/v1/properties", tags=["properties"])


@router.get("/{property_id}/journey", response_model=PaymentJourneyResponse)
async def get_property_journey(
    property_id: str,
    client: CooperativeAPIClient = Depends(get_coop_client),
):
    """Fetch a property's payment setup from the backend and build its journey."""
    setup = await client.get_payment_setup(property_id)
    if setup is None:
        raise HTTPException(status_code=404, detail="No payment setup for this property")

    journey = build_journey(setup, tolerance=settings.totals_tolerance)
    return journey_to_response(journey, property_id)
