from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


PaymentEventKind = Literal["succeeded", "failed", "ignored"]

MaterializeOutcome = Literal[
    "created",
    "completed",
    "already_paid",
    "already_failed",
    "empty_cart",
]

MarkFailedOutcome = Literal[
    "ignored",
    "no_order",
    "already_failed",
    "already_paid",
    "marked_failed",
]


@dataclass(frozen=True)
class MaterializeOrderInput:
    payment_reference: str
    user_id: str


@dataclass(frozen=True)
class MaterializeOrderOutput:
    outcome: MaterializeOutcome
    order_id: str | None


@dataclass(frozen=True)
class MarkOrderFailedInput:
    payment_reference: str


@dataclass(frozen=True)
class MarkOrderFailedOutput:
    outcome: MarkFailedOutcome
    order_id: str | None


@dataclass(frozen=True)
class StripeWebhookInput:
    signature: str
    payload: bytes


@dataclass(frozen=True)
class StripeWebhookOutput:
    event_type: str
    handled: bool
    outcome: str | None


@dataclass(frozen=True)
class PaymentWebhookEvent:
    event_type: str
    kind: PaymentEventKind
    payment_reference: str | None
    user_id: str | None


@dataclass(frozen=True)
class CreatePaymentIntentInput:
    user_id: str


@dataclass(frozen=True)
class CreatePaymentIntentOutput:
    client_secret: str
    payment_reference: str
    amount_minor: int
    currency: str


@dataclass(frozen=True)
class PaymentIntentResult:
    id: str
    client_secret: str
