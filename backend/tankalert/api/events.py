from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from tankalert.database import get_db
from tankalert.schemas import AssociationSummary
from tankalert.services.event_association import EventAssociationService

router = APIRouter()


@router.post("/associate", response_model=AssociationSummary)
async def associate_events(
    threshold: Optional[float] = Query(None, ge=0.0, le=1.0, description="Minimum confidence to link a driver"),
    review_threshold: Optional[float] = Query(None, ge=0.0, le=1.0, description="Minimum confidence to list for review"),
    db: Session = Depends(get_db)
):
    """
    Link unassociated safety events to drivers and vehicles.
    Names below the link threshold are returned for review, never dropped.
    """
    return EventAssociationService(db).associate(threshold=threshold, review_threshold=review_threshold)
