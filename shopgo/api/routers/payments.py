from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from fastapi.concurrency import run_in_threadpool

from shopgo.api.deps import (
    get_create_payment_intent_use_case,
    get_current_user_id,
    get_process_stripe_webhook_use_case,
)
from shopgo.api.schemas.payments import PaymentIntentResponse, StripeWebhookResponse
from shopgo.application.dto.payments import CreatePaymentIntentInput, StripeWebhookInput
from shopgo.application.use_cases.create_payment_intent import CreatePaymentIntentUseCase
from shopgo.application.use_cases.process_stripe_webhook import ProcessStripeWebhookUseCase
from shopgo.domain.exceptions import (
    EmptyCartError,
    MissingReferenceError,
    MissingUserError,
    NotFoundError,
    PaymentGatewayError,
)


logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/v1/checkout/intent", response_model=PaymentIntentResponse)
def create_payment_intent(
    user_id: str = Depends(get_current_user_id),
    use_case: CreatePaymentIntentUseCase = Depends(get_create_payment_intent_use_case),
):
    try:
        output = use_case.execute(CreatePaymentIntentInput(user_id=user_id))
    except EmptyCartError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except PaymentGatewayError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    return PaymentIntentResponse(
        client_secret=output.client_secret,
        payment_reference=output.payment_reference,
        amount_minor=output.amount_minor,
        currency=output.currency,
    )


@router.post("/v1/webhooks/stripe", response_model=StripeWebhookResponse)
async def stripe_webhook(
    request: Request,
    stripe_signature: str = Header(default="", alias="Stripe-Signature"),
    use_case: ProcessStripeWebhookUseCase = Depends(get_process_stripe_webhook_use_case),
):
    payload = await request.body()
    try:
        output = await run_in_threadpool(
            use_case.execute,
            StripeWebhookInput(
                signature=stripe_signature,
                payload=payload,
            ),
        )
    except (PaymentGatewayError, MissingReferenceError, MissingUserError) as exc:
        logger.warning("stripe_webhook: rejected error=%s", exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    return StripeWebhookResponse(
        event_type=output.event_type,
        handled=output.handled,
        outcome=output.outcome,
    )
