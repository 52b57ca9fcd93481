from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field

# =============================================================================
# Geography
# =============================================================================


class GeoPoint(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)


class MemberLocation(BaseModel):
    """A group member's location, weighted for the meeting-point calculation."""

    id: str
    name: str
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)
    weight: float = Field(1.0, gt=0, description="Initiator 1.5, everyone else 1.0")


class GeocodeResult(BaseModel):
    lat: float
    lon: float
    display_name: str


# =============================================================================
# Preference history
# =============================================================================


class PreferenceSignal(BaseModel):
    """Historical like/dislike record for a venue a member attended."""

    member_id: str | None = None
    positive_signal: bool
    venue_type: str | None = None
    venue_attributes: list[str] = Field(default_factory=list)
    weight: float = 1.0
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


# =============================================================================
# Contextual search
# =============================================================================


class SearchResult(BaseModel):
    title: str = ""
    snippet: str = ""
    url: str = ""
    age: str | None = None


class ContextSignal(BaseModel):
    """Buzz and sentiment for a venue. The default instance is the neutral signal."""

    trending_mentions: list[str] = Field(default_factory=list, max_length=5)
    sentiment_summary: Literal["Neutral", "Highly Positive"] = "Neutral"
    recent_features: list[str] = Field(default_factory=list, max_length=3)
    social_buzz_score: int = Field(0, ge=0, le=10)


# =============================================================================
# Venues
# =============================================================================


class VenueCandidate(BaseModel):
    name: str
    near: GeoPoint


class VenueSuggestion(BaseModel):
    name: str
    address: str
    lat: float
    lon: float
    als_score: int = Field(..., description="Aggregate Location Score")
    context: ContextSignal = Field(default_factory=ContextSignal)
    travel_times_minutes: dict[str, float] = Field(
        default_factory=dict, description="Estimated minutes keyed by member id"
    )
    # Open extension map for extra venue details (e.g. external ids)
    extras: dict[str, str] = Field(default_factory=dict)


# =============================================================================
# API Schemas
# =============================================================================


class SuggestionRequest(BaseModel):
    members: list[MemberLocation] = Field(..., min_length=1)
    activity_type: str = Field(..., min_length=1, max_length=120)
    mood: str = Field(..., min_length=1, max_length=120)
    initiator_id: str | None = Field(
        None, description="Member id of the event creator; weighted 1.5x when set"
    )


class SuggestionResponse(BaseModel):
    centroid: GeoPoint
    suggestions: list[VenueSuggestion]


class GeocodeRequest(BaseModel):
    address: str = Field(..., min_length=3)


class FeedbackRequest(BaseModel):
    member_id: str
    rating: int = Field(..., ge=1, le=5)
    venue_type: str | None = None
    venue_attributes: list[str] = Field(default_factory=list)


class FeedbackResponse(BaseModel):
    success: bool
    positive_signal: bool
