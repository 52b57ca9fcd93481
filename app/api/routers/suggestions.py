from app.core.geo_utils import InvalidGroupError, apply_initiator_weight
from app.core.schemas import SuggestionRequest, SuggestionResponse
from fastapi import APIRouter, HTTPException, Request

router = APIRouter(prefix="/suggestions", tags=["suggestions"])


@router.post("", response_model=SuggestionResponse)
async def get_suggestions(req: SuggestionRequest, request: Request) -> SuggestionResponse:
    """
    Rank venues for a group by travel convenience and current buzz.

    The member matching ``initiator_id`` is weighted 1.5x when picking the
    meeting point.
    """
    members = apply_initiator_weight(req.members, req.initiator_id)

    try:
        centroid, suggestions = await request.app.state.engine.recommend(
            members, req.activity_type, req.mood
        )
    except InvalidGroupError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return SuggestionResponse(centroid=centroid, suggestions=suggestions)
