"""
Error handlers - Translate domain exceptions into HTTP problem responses.

Each domain error kind maps to a status code and a stable problem type.
Unexpected exceptions become a generic 500 without internal details.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from src.domain.exceptions import (
    AuctionAlreadyFinished,
    AuctionHouseAlreadyExists,
    AuctionHouseError,
    AuctionHouseNotFound,
    AuctionNotFinished,
    AuctionNotFound,
    AuctionNotStarted,
    BiddingPriceTooLow,
    GeneralFailure,
    NoBiddingFound,
)

logger = logging.getLogger(__name__)

DEFAULT_PROBLEM = ("exception-occured", "general-exception", status.HTTP_400_BAD_REQUEST)

# exception class -> (problem type, title, status code)
PROBLEMS: dict[type[AuctionHouseError], tuple[str, str, int]] = {
    AuctionHouseAlreadyExists: (
        "auction-house-already-exist",
        "Auction House already exist",
        status.HTTP_400_BAD_REQUEST,
    ),
    AuctionHouseNotFound: (
        "auction-house-not-found",
        "Auction House doesn't exist",
        status.HTTP_404_NOT_FOUND,
    ),
    AuctionNotFound: ("auction-not-found", "Auction doesn't exist", status.HTTP_404_NOT_FOUND),
    AuctionAlreadyFinished: (
        "auction-already-finished",
        "Auction already finished",
        status.HTTP_400_BAD_REQUEST,
    ),
    AuctionNotStarted: ("bidding-not-started", "Auction didn't start", status.HTTP_400_BAD_REQUEST),
    BiddingPriceTooLow: ("bidding-price-is-low", "Bidding price is low", status.HTTP_400_BAD_REQUEST),
    AuctionNotFinished: (
        "auction-not-finished",
        "Auction didn't finish",
        status.HTTP_400_BAD_REQUEST,
    ),
    NoBiddingFound: (
        "bidding-not-found",
        "No bidding found in the auction",
        status.HTTP_404_NOT_FOUND,
    ),
    GeneralFailure: DEFAULT_PROBLEM,
}


def problem_for(exc: AuctionHouseError) -> tuple[str, str, int]:
    """Most specific (type, title, status) registered for the exception."""
    for cls in type(exc).__mro__:
        if cls in PROBLEMS:
            return PROBLEMS[cls]
    return DEFAULT_PROBLEM


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_domain_error_handler(app)
    _register_generic_error_handler(app)


def _register_domain_error_handler(app: FastAPI) -> None:
    @app.exception_handler(AuctionHouseError)
    async def domain_error_handler(request: Request, exc: AuctionHouseError) -> JSONResponse:
        """Render a domain error as a problem document."""
        problem_type, title, status_code = problem_for(exc)
        logger.info("%s on %s: %s", type(exc).__name__, request.url.path, exc)
        return JSONResponse(
            status_code=status_code,
            content={
                "type": problem_type,
                "title": title,
                "status": status_code,
                "detail": str(exc) or None,
                "path": request.url.path,
            },
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all - never leaks internal details."""
        logger.error("Unhandled exception on %s: %s", request.url.path, exc, exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "type": "exception-occured",
                "title": "Internal error",
                "status": status.HTTP_500_INTERNAL_SERVER_ERROR,
                "detail": None,
                "path": request.url.path,
            },
        )
