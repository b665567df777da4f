"""
支付路由模块

请求路径: POST /api/create-checkout-session
"""
from __future__ import annotations

from fastapi import APIRouter

from nfj_gateway.api.deps import PaymentServiceDep
from nfj_gateway.api.schemas import CheckoutSessionData, CheckoutSessionRequest

router = APIRouter(tags=["payment"])


@router.post("/create-checkout-session", response_model=CheckoutSessionData)
async def create_checkout_session(
    payments: PaymentServiceDep,
    body: CheckoutSessionRequest | None = None,
) -> CheckoutSessionData:
    user_id = body.user_id if body else None
    session = await payments.create_checkout_session(user_id=user_id)
    return CheckoutSessionData(id=session.id, url=session.url)
