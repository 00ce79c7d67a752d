"""
Data shapes exchanged with the scoring service.

Public API:
    PLATFORMS                      supported platform tags, in display order
    Candidate                      one scored host returned by the service
    RedditFilters ... LinkedinFilters
                                   per-platform thresholds (tagged union)
    PlatformFilters                discriminated union of the above
    default_filters(platform)      thresholds used when the user sets none
    SearchRequest                  validated outbound request
"""

from typing import Annotated, Any, Literal, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

PLATFORMS: tuple[str, ...] = ("reddit", "twitter", "instagram", "tiktok", "linkedin")

Platform = Literal["reddit", "twitter", "instagram", "tiktok", "linkedin"]


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

class Candidate(BaseModel):
    """
    A host returned by the service.

    Nothing is required: the service is trusted for shape, not for content,
    and every consumer must cope with blank fields. Text fields are untrusted
    and must be escaped before they reach markup.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    platform: str = ""
    username: str = ""
    source: str = ""
    reasoning: str = ""
    profile_url: str = Field(
        "",
        validation_alias=AliasChoices("profileUrl", "profile_url"),
        serialization_alias="profileUrl",
    )
    score: float | None = Field(None, validation_alias=AliasChoices("score", "host_score"))
    stats: dict[str, Any] = Field(default_factory=dict)
    included: bool = True

    @field_validator("platform", "username", "source", "reasoning", "profile_url", mode="before")
    @classmethod
    def _text(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("score", mode="before")
    @classmethod
    def _score(cls, value: Any) -> float | None:
        if value is None or isinstance(value, bool):
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            return None

    @field_validator("included", mode="before")
    @classmethod
    def _included(cls, value: Any) -> bool:
        # Client-side flag; whatever the service sends, results arrive kept.
        return value if isinstance(value, bool) else True

    @field_validator("stats", mode="before")
    @classmethod
    def _stats(cls, value: Any) -> dict[str, Any]:
        return dict(value) if isinstance(value, dict) else {}


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------

class _Filters(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)


class RedditFilters(_Filters):
    platform: Literal["reddit"] = "reddit"
    min_karma: int = Field(1000, ge=0)
    min_comments: int = Field(50, ge=0)
    moderators_only: bool = False


class TwitterFilters(_Filters):
    platform: Literal["twitter"] = "twitter"
    min_followers: int = Field(1000, ge=0)
    min_engagement_rate: float = Field(1.0, ge=0)


class InstagramFilters(_Filters):
    platform: Literal["instagram"] = "instagram"
    min_followers: int = Field(5000, ge=0)
    verified_only: bool = False


class TiktokFilters(_Filters):
    platform: Literal["tiktok"] = "tiktok"
    min_followers: int = Field(5000, ge=0)
    min_likes: int = Field(10000, ge=0)


class LinkedinFilters(_Filters):
    platform: Literal["linkedin"] = "linkedin"
    min_connections: int = Field(500, ge=0)


PlatformFilters = Annotated[
    Union[RedditFilters, TwitterFilters, InstagramFilters, TiktokFilters, LinkedinFilters],
    Field(discriminator="platform"),
]

_FILTER_TYPES: dict[str, type[_Filters]] = {
    "reddit":    RedditFilters,
    "twitter":   TwitterFilters,
    "instagram": InstagramFilters,
    "tiktok":    TiktokFilters,
    "linkedin":  LinkedinFilters,
}


def default_filters(platform: str) -> _Filters:
    return _FILTER_TYPES[platform]()


# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------

class SearchRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    topic: str = Field(min_length=1)
    num_leads: int = Field(20, ge=1, le=100)
    platforms: list[Platform] = Field(min_length=1)
    filters: dict[str, PlatformFilters] = Field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        """JSON body in the service's camelCase shape, filters keyed by platform."""
        return {
            "topic":     self.topic,
            "numLeads":  self.num_leads,
            "platforms": list(self.platforms),
            "filters": {
                platform: f.model_dump(by_alias=True, exclude={"platform"})
                for platform, f in self.filters.items()
            },
        }
