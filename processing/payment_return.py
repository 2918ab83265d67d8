"""
Payment return receiver.

The payment provider redirects the customer's browser to config.PAYMENT_RETURN_URL
when the payment finishes. The URL is classified and the outcome applied to the
order; unrecognized URLs leave the order untouched.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

import config
from db import session_maker
from enums.payment_outcome import PaymentOutcomeKind, RedirectState
from exceptions.order import OrderNotFoundException, StateConflictException
from order_api.http_client import HttpOrderApi
from services.cart import CartStore
from services.order_submission import OrderSubmissionPipeline
from services.payment_redirect import PaymentRedirectResolver
from utils.error_handler import handle_service_error

logger = logging.getLogger(__name__)

payment_return_router = APIRouter(prefix=config.PAYMENT_RETURN_PATH.rstrip("/"), tags=["payment"])

_pipeline: OrderSubmissionPipeline | None = None


def get_order_pipeline() -> OrderSubmissionPipeline:
    global _pipeline
    if _pipeline is None:
        _pipeline = OrderSubmissionPipeline(HttpOrderApi(), CartStore(session_maker), session_maker)
    return _pipeline


@payment_return_router.get("/{rest:path}")
async def payment_return(rest: str, request: Request,
                         pipeline: OrderSubmissionPipeline = Depends(get_order_pipeline)):
    """
    Returns:
        200: {"status": "AWAITING_REDIRECT"} for URLs without a result marker,
             otherwise {"status": <outcome>, "order_id": ..., "order_status": ...}
        404: Order unknown locally
        409: Order already in a final status that the outcome would change
    """
    url = str(request.url)
    outcome = PaymentRedirectResolver.classify(url)
    if outcome is None:
        return {"status": RedirectState.AWAITING_REDIRECT.value}

    if outcome.kind == PaymentOutcomeKind.ERROR:
        logger.warning(f"Payment return rejected: {outcome.message}")
        return {"status": outcome.kind.value, "message": outcome.message}

    order_id = outcome.order_id or PaymentRedirectResolver.extract_order_id(url)
    try:
        order = await pipeline.apply_payment_outcome(outcome, order_id)
    except OrderNotFoundException as e:
        message_key, _ = handle_service_error(e)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=message_key)
    except StateConflictException as e:
        message_key, _ = handle_service_error(e)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=message_key)

    return {
        "status": outcome.kind.value,
        "order_id": order_id,
        "order_status": order.status.value if order is not None else None,
    }
