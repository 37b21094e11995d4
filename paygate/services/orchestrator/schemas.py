"""API request/response schemas for the payment endpoints."""

from decimal import Decimal

from pydantic import BaseModel, Field

from paygate.gateways.base import RejectionReason


class PaymentCreateRequest(BaseModel):
    """Payment payload accepted by `POST /payments`."""

    amount: Decimal = Field(gt=0)
    card_number: str = Field(min_length=1)
    gateway: str = Field(min_length=1)


class PaymentResponse(BaseModel):
    """Outcome of one payment: `COMPLETED` with an id, or `REJECTED` without one."""

    status: str
    gateway: str
    transaction_id: str | None = None
    reason: RejectionReason | None = None
    message: str | None = None


class GatewayListResponse(BaseModel):
    gateways: list[str]
