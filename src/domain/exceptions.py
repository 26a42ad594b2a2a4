"""
Domain exceptions - Semantic error types for auction houses.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
The API layer is responsible for translating them into responses.
"""


class AuctionHouseError(Exception):
    """Base class for auction house domain errors."""

    pass


class NotFound(AuctionHouseError):
    """A required auction house or auction is absent."""

    pass


class AuctionHouseAlreadyExists(AuctionHouseError):
    """An auction house with the same name is already registered."""

    pass


class AuctionHouseNotFound(NotFound):
    """No auction house with the requested id."""

    pass


class AuctionNotFound(NotFound):
    """No auction with the requested id inside the auction house."""

    pass


class AuctionAlreadyFinished(AuctionHouseError):
    """Status change attempted on a TERMINATED or DELETED auction."""

    pass


class AuctionNotStarted(AuctionHouseError):
    """Bid attempted on an auction that is not RUNNING."""

    pass


class BiddingPriceTooLow(AuctionHouseError):
    """Bid price is not strictly above both the current and initial price."""

    pass


class AuctionNotFinished(AuctionHouseError):
    """Winner requested before the auction was TERMINATED."""

    pass


class NoBiddingFound(AuctionHouseError):
    """Winner requested on an auction without any recorded bid."""

    pass


class GeneralFailure(AuctionHouseError):
    """Unexpected persistence failure (save returned no result)."""

    pass
