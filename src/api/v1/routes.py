"""
API v1 routes.

Defines REST endpoints for auction houses, auctions and bids.
Domain errors propagate to the handlers in src.api.error_handlers.
"""

import logging

from fastapi import APIRouter, Depends, status

from src.api.dependencies import get_auction_house_service
from src.api.models import (
    AuctionHouseRequest,
    AuctionHouseResponse,
    AuctionRequest,
    AuctionResponse,
    BidderResponse,
    BidRequest,
    ErrorResponse,
)
from src.domain.auction_house import AuctionHouseService
from src.domain.models import AuctionStatus

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auction/house", tags=["v1"])

HOUSE_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Auction house not found"}}
AUCTION_NOT_FOUND = {
    404: {"model": ErrorResponse, "description": "Auction house or auction not found"}
}


@router.post(
    "",
    response_model=AuctionHouseResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse, "description": "Name already used"}},
    summary="Create an auction house",
)
async def create_auction_house(
    request_data: AuctionHouseRequest,
    service: AuctionHouseService = Depends(get_auction_house_service),
) -> AuctionHouseResponse:
    """
    Create an auction house.

    - **name**: Unique auction house name
    - **creatorName**: Identifier of the creator
    """
    logger.debug("Create auction house %s", request_data.name)
    house = service.create_house(request_data.to_domain())
    return AuctionHouseResponse.model_validate(house)


@router.get("", response_model=list[AuctionHouseResponse], summary="List auction houses")
async def list_auction_houses(
    service: AuctionHouseService = Depends(get_auction_house_service),
) -> list[AuctionHouseResponse]:
    logger.debug("List all auction houses")
    return [AuctionHouseResponse.model_validate(house) for house in service.list_houses()]


@router.get(
    "/creator/{creator_id}",
    response_model=list[AuctionHouseResponse],
    summary="List auction houses of a creator",
)
async def list_auction_houses_by_creator(
    creator_id: str,
    service: AuctionHouseService = Depends(get_auction_house_service),
) -> list[AuctionHouseResponse]:
    logger.debug("List auction houses of creator %s", creator_id)
    return [
        AuctionHouseResponse.model_validate(house)
        for house in service.list_houses_by_creator(creator_id)
    ]


@router.delete(
    "/{house_id}",
    response_model=bool,
    responses=HOUSE_NOT_FOUND,
    summary="Delete an auction house",
)
async def delete_auction_house(
    house_id: str,
    service: AuctionHouseService = Depends(get_auction_house_service),
) -> bool:
    logger.debug("Delete auction house %s", house_id)
    return service.delete_house(house_id)


@router.post(
    "/{house_id}/create",
    response_model=AuctionResponse,
    status_code=status.HTTP_201_CREATED,
    responses=HOUSE_NOT_FOUND,
    summary="Create an auction in an auction house",
)
async def create_auction(
    house_id: str,
    request_data: AuctionRequest,
    service: AuctionHouseService = Depends(get_auction_house_service),
) -> AuctionResponse:
    """
    Create an auction in an auction house.

    The current price starts at the initial price when omitted or zero.
    """
    logger.debug("Create auction %s in auction house %s", request_data.name, house_id)
    auction = service.create_auction(house_id, request_data.to_domain())
    return AuctionResponse.model_validate(auction)


@router.get(
    "/{house_id}",
    response_model=list[AuctionResponse],
    responses=HOUSE_NOT_FOUND,
    summary="List auctions of an auction house",
)
async def list_auctions(
    house_id: str,
    service: AuctionHouseService = Depends(get_auction_house_service),
) -> list[AuctionResponse]:
    logger.debug("List auctions of auction house %s", house_id)
    return [AuctionResponse.model_validate(auction) for auction in service.list_auctions(house_id)]


@router.delete(
    "/{house_id}/{auction_id}",
    response_model=bool,
    responses=AUCTION_NOT_FOUND,
    summary="Delete an auction",
)
async def delete_auction(
    house_id: str,
    auction_id: str,
    service: AuctionHouseService = Depends(get_auction_house_service),
) -> bool:
    logger.debug("Delete auction %s from auction house %s", auction_id, house_id)
    return service.delete_auction(house_id, auction_id)


@router.get(
    "/{house_id}/{auction_status}",
    response_model=list[AuctionResponse],
    responses=HOUSE_NOT_FOUND,
    summary="List auctions of an auction house by status",
)
async def list_auctions_by_status(
    house_id: str,
    auction_status: AuctionStatus,
    service: AuctionHouseService = Depends(get_auction_house_service),
) -> list[AuctionResponse]:
    logger.debug("List %s auctions of auction house %s", auction_status.value, house_id)
    return [
        AuctionResponse.model_validate(auction)
        for auction in service.list_auctions_by_status(house_id, auction_status)
    ]


@router.put(
    "/{house_id}/{auction_id}/status/{auction_status}",
    response_model=AuctionResponse,
    responses={
        **AUCTION_NOT_FOUND,
        400: {"model": ErrorResponse, "description": "Auction already finished"},
    },
    summary="Update the status of an auction",
)
async def update_auction_status(
    house_id: str,
    auction_id: str,
    auction_status: AuctionStatus,
    service: AuctionHouseService = Depends(get_auction_house_service),
) -> AuctionResponse:
    logger.debug(
        "Change status of auction %s in auction house %s to %s",
        auction_id,
        house_id,
        auction_status.value,
    )
    auction = service.update_auction_status(house_id, auction_id, auction_status)
    return AuctionResponse.model_validate(auction)


@router.post(
    "/{house_id}/{auction_id}/bid",
    response_model=BidderResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        **AUCTION_NOT_FOUND,
        400: {"model": ErrorResponse, "description": "Auction not running or price too low"},
    },
    summary="Bid on an auction",
)
async def bid_on_auction(
    house_id: str,
    auction_id: str,
    request_data: BidRequest,
    service: AuctionHouseService = Depends(get_auction_house_service),
) -> BidderResponse:
    """
    Bid on a running auction.

    - **name**: Display name of the bidder (may be a pseudonym)
    - **price**: Must be strictly above the current and initial price
    """
    logger.debug("Bid on auction %s in auction house %s", auction_id, house_id)
    bidder = service.bid_on_auction(house_id, auction_id, request_data.to_domain())
    return BidderResponse.model_validate(bidder)


@router.get(
    "/{house_id}/{auction_id}/bid",
    response_model=dict[str, float],
    responses=AUCTION_NOT_FOUND,
    summary="List the bids of an auction",
)
async def get_all_bidding(
    house_id: str,
    auction_id: str,
    service: AuctionHouseService = Depends(get_auction_house_service),
) -> dict[str, float]:
    logger.debug("Get all bidding of auction %s in auction house %s", auction_id, house_id)
    return service.get_all_bidding(house_id, auction_id)


@router.get(
    "/{house_id}/{auction_id}/winner",
    response_model=BidderResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Not found or no bidding"},
        400: {"model": ErrorResponse, "description": "Auction not finished"},
    },
    summary="Get the winner of a terminated auction",
)
async def get_winner(
    house_id: str,
    auction_id: str,
    service: AuctionHouseService = Depends(get_auction_house_service),
) -> BidderResponse:
    logger.debug("Get winner of auction %s in auction house %s", auction_id, house_id)
    bidder = service.get_winner(house_id, auction_id)
    return BidderResponse.model_validate(bidder)
