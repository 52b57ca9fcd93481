"""
Feedback API Router

Post-event ratings become preference signals that bias future suggestions.
"""

import logging

from app.core.preference_aggregator import signal_from_rating
from app.core.schemas import FeedbackRequest, FeedbackResponse
from fastapi import APIRouter, HTTPException, Request

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/feedback", tags=["feedback"])


@router.post("", response_model=FeedbackResponse)
def submit_feedback(req: FeedbackRequest, request: Request) -> FeedbackResponse:
    try:
        signal = signal_from_rating(
            req.member_id, req.rating, req.venue_type, req.venue_attributes
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        request.app.state.repo.record_preference_signal(signal)
    except Exception as e:
        logger.error(f"Error saving preference signal: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to save feedback")

    return FeedbackResponse(success=True, positive_signal=signal.positive_signal)
