"""
Reveal and balance API endpoints.

Provides REST endpoints for revealing listings, listing what the user
owns, reading the credit balance, and an SSE stream of balance changes.
"""

import asyncio
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sse_starlette.sse import EventSourceResponse

from api.dependencies import get_reveal_service
from api.middleware.auth import get_current_user
from api.models.errors import ERROR_RESPONSES, http_error
from modules.ledger.models import CreditBalance, RevealRecord
from shared.exceptions import LeadvaultError
from shared.models import AuthenticatedUser

from .models import BulkRevealOutcome, BulkRevealRequest, LowCreditWarning, RevealOutcome, RevealRequest
from .service import RevealService

router = APIRouter()
balance_router = APIRouter()


class RevealedStatusResponse(BaseModel):
    listing_id: str
    revealed: bool


@router.get("", response_model=list[RevealRecord], responses=ERROR_RESPONSES)
async def list_reveals(
    user: AuthenticatedUser = Depends(get_current_user),
    service: RevealService = Depends(get_reveal_service),
) -> list[RevealRecord]:
    """
    List the current user's revealed listings, most recent first.
    """
    try:
        return await service.revealed_listings(user.id)
    except LeadvaultError as e:
        raise http_error(e)


@router.post("/bulk", response_model=BulkRevealOutcome, responses=ERROR_RESPONSES)
async def reveal_bulk(
    request: BulkRevealRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: RevealService = Depends(get_reveal_service),
) -> BulkRevealOutcome:
    """
    Reveal several listings at one price.

    All or nothing: if the user cannot afford every listing not already
    owned, nothing is charged and 402 is returned with the shortfall.
    """
    try:
        outcome = await service.reveal_many(
            user.id,
            request.listing_ids,
            listing_type=request.listing_type,
            cost=request.cost,
        )
        return outcome.raise_for_status()
    except LeadvaultError as e:
        raise http_error(e)


@router.post("/{listing_id}", response_model=RevealOutcome, responses=ERROR_RESPONSES)
async def reveal_listing(
    listing_id: str,
    request: Optional[RevealRequest] = None,
    user: AuthenticatedUser = Depends(get_current_user),
    service: RevealService = Depends(get_reveal_service),
) -> RevealOutcome:
    """
    Reveal one listing.

    Revealing a listing the user already owns is free and returns
    status "already_owned".
    """
    request = request or RevealRequest()
    try:
        outcome = await service.reveal(
            user.id,
            listing_id,
            listing_type=request.listing_type,
            cost=request.cost,
        )
        return outcome.raise_for_status()
    except LeadvaultError as e:
        raise http_error(e)


@router.get("/{listing_id}", response_model=RevealedStatusResponse, responses=ERROR_RESPONSES)
async def get_reveal_status(
    listing_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: RevealService = Depends(get_reveal_service),
) -> RevealedStatusResponse:
    """
    Whether the current user has revealed a listing.
    """
    try:
        revealed = await service.is_revealed(user.id, listing_id)
    except LeadvaultError as e:
        raise http_error(e)
    return RevealedStatusResponse(listing_id=listing_id, revealed=revealed)


@balance_router.get("", response_model=CreditBalance, responses=ERROR_RESPONSES)
async def get_balance(
    user: AuthenticatedUser = Depends(get_current_user),
    service: RevealService = Depends(get_reveal_service),
) -> CreditBalance:
    """
    Get the current user's credit balance.
    """
    try:
        return await service.current_balance(user.id)
    except LeadvaultError as e:
        raise http_error(e)


async def balance_event_generator(
    user_id: str,
    initial: CreditBalance,
    service: RevealService,
):
    """
    Generate SSE events for a user's balance.

    Yields the initial balance, then one "balance" event per change and
    a "low_credit" event whenever a warning is raised.
    """
    queue: asyncio.Queue[tuple[str, BaseModel]] = asyncio.Queue()

    def on_balance(balance: Optional[CreditBalance]) -> None:
        if balance is not None:
            queue.put_nowait(("balance", balance))

    def on_warning(warning: Optional[LowCreditWarning]) -> None:
        if warning is not None:
            queue.put_nowait(("low_credit", warning))

    unsubscribe_balance = service.subscribe_balance(user_id, on_balance)
    unsubscribe_warnings = service.subscribe_warnings(user_id, on_warning)
    try:
        last = initial
        yield {"event": "balance", "data": initial.model_dump_json()}
        while True:
            event, payload = await queue.get()
            if event == "balance":
                if payload == last:
                    continue
                last = payload
            yield {"event": event, "data": payload.model_dump_json()}
    finally:
        unsubscribe_balance()
        unsubscribe_warnings()


@balance_router.get("/stream", responses=ERROR_RESPONSES)
async def stream_balance(
    user: AuthenticatedUser = Depends(get_current_user),
    service: RevealService = Depends(get_reveal_service),
):
    """
    Stream balance changes via SSE.

    Event format:
        event: balance | low_credit
        data: {"user_id": "...", "credits_remaining": 42, "unlimited": false}
    """
    try:
        initial = await service.current_balance(user.id)
    except LeadvaultError as e:
        raise http_error(e)

    return EventSourceResponse(
        balance_event_generator(user.id, initial, service),
        media_type="text/event-stream",
    )
