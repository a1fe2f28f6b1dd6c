"""Post schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from rideshare.models.post import Post
from rideshare.schemas.envelope import ResultResponse

MAX_SEATS = 8


class PostFields(BaseModel):
    """Fields a client controls on every post."""

    departure_time: datetime
    origin: str = Field(..., min_length=1, max_length=255)
    destination: str = Field(..., min_length=1, max_length=255)
    memo: str | None = Field(None, max_length=2000)
    driver_needed: bool = False
    total_seats: int = Field(..., ge=1, le=MAX_SEATS)


class PostCreate(PostFields):
    """A new post.

    ``uploader`` is accepted for compatibility with older clients but is always
    replaced by the caller. ``passengers`` lists riders already travelling
    together; the caller is appended when ``driver_needed`` is set.
    """

    model_config = ConfigDict(extra="forbid")

    uploader: int | None = None
    passengers: list[int] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_passengers(self) -> "PostCreate":
        if len(set(self.passengers)) != len(self.passengers):
            raise ValueError("passengers must not contain duplicates")
        if len(self.passengers) > self.total_seats:
            raise ValueError("more passengers than total_seats")
        return self


class PostDocument(PostFields):
    """A complete replacement for a stored post."""

    model_config = ConfigDict(extra="forbid")

    id: int
    driver: int | None = None
    passengers: list[int] = Field(default_factory=list)
    # Server-owned; accepted so clients can send back what they fetched
    uploader: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    driver_avail: int | None = None

    @model_validator(mode="after")
    def check_slots(self) -> "PostDocument":
        if len(set(self.passengers)) != len(self.passengers):
            raise ValueError("passengers must not contain duplicates")
        if len(self.passengers) > self.total_seats:
            raise ValueError("more passengers than total_seats")
        if self.driver is not None and self.driver in self.passengers:
            raise ValueError("driver cannot also be a passenger")
        return self


class PostEdit(BaseModel):
    """Partial edit of the descriptive fields of a post."""

    model_config = ConfigDict(extra="forbid")

    departure_time: datetime | None = None
    origin: str | None = Field(None, min_length=1, max_length=255)
    destination: str | None = Field(None, min_length=1, max_length=255)
    memo: str | None = Field(None, max_length=2000)
    total_seats: int | None = Field(None, ge=1, le=MAX_SEATS)


class PostCreateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    post: PostCreate


class PostUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    post: PostDocument


class PostIdRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    post_id: int


class AddDriverRequest(BaseModel):
    """Volunteer as driver, optionally limiting the seats on offer."""

    model_config = ConfigDict(extra="forbid")

    post_id: int
    avail: int | None = Field(None, ge=1, le=MAX_SEATS)


class PostResponse(BaseModel):
    """A post as returned to clients."""

    id: int
    created_at: datetime
    updated_at: datetime
    departure_time: datetime
    origin: str
    destination: str
    memo: str | None
    driver_needed: bool
    driver: int | None
    driver_avail: int | None
    uploader: int
    passengers: list[int]
    total_seats: int

    @classmethod
    def from_post(cls, post: Post) -> "PostResponse":
        return cls(
            id=post.id,
            created_at=post.created_at,
            updated_at=post.updated_at,
            departure_time=post.departure_time,
            origin=post.origin,
            destination=post.destination,
            memo=post.memo,
            driver_needed=post.driver_needed,
            driver=post.driver_id,
            driver_avail=post.driver_avail,
            uploader=post.uploader_id,
            passengers=post.passenger_ids,
            total_seats=post.total_seats,
        )


class PostLookupResponse(ResultResponse):
    post: PostResponse | None = None


class PostListResponse(ResultResponse):
    posts: list[PostResponse] | None = None


class PostCreatedResponse(ResultResponse):
    post_id: int | None = None
