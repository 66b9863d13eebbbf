from typing import Any, List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

CATEGORIES: Tuple[str, ...] = (
    "cultural",
    "nature",
    "adventure",
    "food",
    "shopping",
    "entertainment",
    "historical",
)

# One year, in hours.
MAX_AVAILABLE_HOURS = 24 * 365

# ------- Candidate models -------
class Destination(BaseModel):
    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        frozen=True,
        str_strip_whitespace=True,
        allow_inf_nan=False,
    )

    name: str = Field(..., min_length=1)
    visit_time: float = Field(..., ge=0, alias="visitTime")
    travel_time_from_source: float = Field(..., ge=0, alias="travelTimeFromSource")
    distance_from_source: float = Field(..., ge=0, alias="distanceFromSource")
    distance_to_source: Optional[float] = Field(None, ge=0, alias="distanceToSource")
    rating: float = Field(..., ge=0, le=5)
    category: Optional[str] = None      # unknown values are kept; the scorer copes
    popularity: Optional[float] = Field(None, ge=1, le=10)

    @field_validator("category", mode="before")
    @classmethod
    def _normalise_category(cls, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, str):
            return value.strip().lower() or None
        return value

    @property
    def combined_time(self) -> float:
        return self.visit_time + self.travel_time_from_source


class ScoredDestination(Destination):
    score: float = Field(..., ge=0, le=1)

# ------- Request models -------
class TripRequest(BaseModel):
    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        str_strip_whitespace=True,
        allow_inf_nan=False,
    )

    start_location: str = Field(..., min_length=1, alias="startLocation")
    home_address: Optional[str] = Field(None, alias="homeAddress")
    available_time: float = Field(..., gt=0, le=MAX_AVAILABLE_HOURS, alias="availableTime")  # hours
    user_preferences: List[str] = Field(default_factory=list, alias="userPreferences")
    destinations: Optional[List[Destination]] = None

    @field_validator("user_preferences", mode="before")
    @classmethod
    def _coerce_preferences(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value

    @model_validator(mode="after")
    def _default_home_address(self) -> "TripRequest":
        if not self.home_address:
            self.home_address = self.start_location
        return self

    @property
    def available_minutes(self) -> float:
        return self.available_time * 60

# ------- Response models -------
class TripSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    total_locations: int = Field(0, alias="totalLocations")
    total_visit_time: float = Field(0.0, alias="totalVisitTime")
    total_travel_time: float = Field(0.0, alias="totalTravelTime")
    total_distance: float = Field(0.0, alias="totalDistance")
    average_rating: float = Field(0.0, alias="averageRating")
    average_score: float = Field(0.0, alias="averageScore")
    total_trip_time: float = Field(0.0, alias="totalTripTime")


class TripPlan(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    start_location: str = Field(..., alias="startLocation")
    home_address: str = Field(..., alias="homeAddress")
    optimized_route: List[ScoredDestination] = Field(default_factory=list, alias="optimizedRoute")
    skipped_destinations: List[ScoredDestination] = Field(default_factory=list, alias="skippedDestinations")
    remaining_time: float = Field(..., alias="remainingTime")
    estimated_return_time: float = Field(0.0, alias="estimatedReturnTime")
    summary: TripSummary = TripSummary()
    remaining_time_label: str = Field("", alias="remainingTimeLabel")


class RejectedCandidate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    index: int
    name: Optional[str] = None
    field: str
    reason: str


class RecommendedTripPlan(TripPlan):
    rejected_candidates: List[RejectedCandidate] = Field(default_factory=list, alias="rejectedCandidates")

# ------- Gateway proxy models -------
class Coordinates(BaseModel):
    lat: float
    lng: float


class LandmarkRequest(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    image: str = Field(..., min_length=1)      # data URL or bare base64
    language: Optional[str] = None


class LandmarkInfo(BaseModel):
    name: str
    summary: str = ""
    coordinates: Optional[Coordinates] = None
    fun_facts: List[str] = Field(default_factory=list)


class TextQueryRequest(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    query: str = Field(..., min_length=1)


class TextQueryResponse(BaseModel):
    response: str
