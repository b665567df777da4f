"""
Stripe webhook 路由模块

请求路径: POST /webhook（不带 /api 前缀，地址在 Stripe 控制台配置）
"""
from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Header

from nfj_gateway.api.deps import PaymentServiceDep, RawBodyDep, ReconcilerDep, SessionDep
from nfj_gateway.api.schemas import WebhookAck

router = APIRouter(tags=["payment"])


@router.post("/webhook", response_model=WebhookAck)
def stripe_webhook(
    session: SessionDep,
    payload: RawBodyDep,
    payments: PaymentServiceDep,
    reconciler: ReconcilerDep,
    stripe_signature: Annotated[str | None, Header()] = None,
) -> WebhookAck:
    # 先校验签名，失败直接 400，不访问数据库
    event = payments.verify_webhook(payload=payload, signature=stripe_signature)

    # 存储失败在 apply() 内记录日志，这里仍返回 2xx
    reconciler.apply(session=session, event=event)
    return WebhookAck(received=True)
