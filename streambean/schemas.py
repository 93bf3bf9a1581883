from pydantic import BaseModel, Field


class CategoryResponse(BaseModel):
    """Configured category"""
    id: str = Field(..., description="Twitch game/category ID")
    name: str = Field(..., description="Display name")


class ScheduleItemResponse(BaseModel):
    """Single schedule segment of one broadcaster"""
    id: str | None
    startTime: str | None
    endTime: str | None
    title: str | None
    isRecurring: bool | None


class BroadcasterResponse(BaseModel):
    """Channel information with its schedule"""
    id: str
    name: str | None
    category_name: str | None
    category_id: str | None
    tags: list[str] = Field(default_factory=list)
    schedule: list[ScheduleItemResponse] = Field(default_factory=list)


class VideoResponse(BaseModel):
    id: str | None
    title: str | None
    thumbnailUrl: str | None
    url: str | None
    publishedAt: str | None
    duration: str | None
    viewCount: int | None


class CategorySearchResponse(BaseModel):
    id: str | None
    name: str | None
    boxArtUrl: str | None


class ChannelSearchResponse(BaseModel):
    id: str | None
    displayName: str | None
    name: str | None
    thumbnailUrl: str | None
    isLive: bool | None
    gameId: str | None
    gameName: str | None


class ErrorDetail(BaseModel):
    """Standard error detail"""
    code: str = Field(..., description="Error code (e.g., 'UPSTREAM_UNAVAILABLE', 'VALIDATION_ERROR')")
    message: str = Field(..., description="Human-readable error message")
    context: dict | None = Field(None, description="Additional context about the error")


class StandardErrorResponse(BaseModel):
    """Standardized error response for all endpoints"""
    status: str = Field("error", description="Status indicator")
    timestamp: str = Field(..., description="ISO8601 timestamp of error")
    error: ErrorDetail = Field(..., description="Error details")
