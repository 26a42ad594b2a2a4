"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
JSON fields use camelCase; Python attributes stay snake_case.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from src.domain.models import Auction, AuctionHouse, AuctionStatus, Bidder


class ApiModel(BaseModel):
    """Base model: camelCase aliases, construction from domain objects."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def _assume_utc(value: datetime | None) -> datetime | None:
    """Naive timestamps are taken as UTC so they compare with stored ones."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class AuctionHouseRequest(ApiModel):
    """Request model for auction house creation."""

    name: str = Field(..., min_length=1, description="Unique auction house name")
    creator_name: str = Field(..., min_length=1, description="Identifier of the creator")

    def to_domain(self) -> AuctionHouse:
        return AuctionHouse(name=self.name, creator_name=self.creator_name)


class AuctionRequest(ApiModel):
    """Request model for auction creation."""

    name: str = Field(..., min_length=1)
    description: str | None = None
    creator_id: str | None = Field(
        default=None, description="Defaults to the creator of the auction house"
    )
    starting_time: datetime | None = Field(default=None, description="Defaults to now")
    end_time: datetime | None = None
    max_bidders: int = Field(default=0, ge=0)
    status: AuctionStatus = AuctionStatus.NOT_STARTED
    initial_price: float = Field(..., gt=0)
    current_price: float = Field(
        default=0.0, ge=0, description="Zero means: start at the initial price"
    )

    @field_validator("starting_time", "end_time")
    @classmethod
    def normalize_times(cls, value: datetime | None) -> datetime | None:
        return _assume_utc(value)

    def to_domain(self) -> Auction:
        auction = Auction(
            name=self.name,
            description=self.description,
            creator_id=self.creator_id,
            end_time=self.end_time,
            max_bidders=self.max_bidders,
            status=self.status,
            initial_price=self.initial_price,
            current_price=self.current_price,
        )
        if self.starting_time is not None:
            auction.starting_time = self.starting_time
        return auction


class BidRequest(ApiModel):
    """Request model for a bid. The name may be a pseudonym."""

    name: str = Field(..., min_length=1)
    price: float = Field(..., gt=0)
    bidding_time: datetime | None = Field(default=None, description="Defaults to now")

    @field_validator("bidding_time")
    @classmethod
    def normalize_time(cls, value: datetime | None) -> datetime | None:
        return _assume_utc(value)

    def to_domain(self) -> Bidder:
        bidder = Bidder(name=self.name, price=self.price)
        if self.bidding_time is not None:
            bidder.bidding_time = self.bidding_time
        return bidder


class BidderResponse(ApiModel):
    """Response model for an accepted bid."""

    id: str
    name: str
    bidding_time: datetime
    price: float


class AuctionResponse(ApiModel):
    """Response model for an auction with its bids."""

    id: str
    name: str
    description: str | None
    creator_id: str | None
    starting_time: datetime
    end_time: datetime | None
    max_bidders: int
    status: AuctionStatus
    initial_price: float
    current_price: float
    bidders: dict[str, BidderResponse] = Field(default_factory=dict)
    bidding: dict[str, float] = Field(default_factory=dict)


class AuctionHouseResponse(ApiModel):
    """Response model for an auction house with its auctions."""

    id: str
    name: str
    creator_name: str
    auctions: dict[str, AuctionResponse] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Problem document returned for domain errors."""

    type: str
    title: str
    status: int
    detail: str | None = None
    path: str
