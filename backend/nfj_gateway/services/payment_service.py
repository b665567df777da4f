"""
Stripe 支付服务

文档: https://docs.stripe.com/payments/checkout
Webhook: https://docs.stripe.com/webhooks#verify-official-libraries

负责两件事：
- 创建 Stripe Checkout 支付会话（固定商品、固定价格）
- 校验 webhook 签名并解析事件（签名校验必须基于原始请求体字节）
"""
from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any

import stripe

from nfj_gateway.api.errors import (
    payment_not_configured,
    payment_provider_error,
    webhook_verification_failed,
)
from nfj_gateway.core.config import Settings

logger = logging.getLogger(__name__)

CHECKOUT_COMPLETED = "checkout.session.completed"


@dataclass(frozen=True)
class CheckoutSessionResult:
    id: str
    url: str | None


class PaymentService:
    """Stripe 服务封装"""

    def __init__(self, settings: Settings) -> None:
        self._secret_key = settings.STRIPE_SECRET_KEY
        self._webhook_secret = settings.STRIPE_WEBHOOK_SECRET
        self._tolerance = settings.STRIPE_WEBHOOK_TOLERANCE_SECONDS
        self._timeout = settings.PAYMENT_TIMEOUT_SECONDS
        self._public_url = settings.PUBLIC_URL.rstrip("/")
        self._product_name = settings.PREMIUM_PRODUCT_NAME
        self._unit_amount = settings.PREMIUM_UNIT_AMOUNT
        self._currency = settings.PREMIUM_CURRENCY

    def checkout_params(self, user_id: str | None) -> dict[str, Any]:
        """
        构建 Checkout Session 创建参数

        success_url 中的 {CHECKOUT_SESSION_ID} 由 Stripe 替换为真实会话 ID，
        前端据此查询支付结果。
        """
        return {
            "payment_method_types": ["card"],
            "line_items": [
                {
                    "price_data": {
                        "currency": self._currency,
                        "product_data": {"name": self._product_name},
                        "unit_amount": self._unit_amount,
                    },
                    "quantity": 1,
                }
            ],
            "mode": "payment",
            "success_url": f"{self._public_url}/payment-success?session_id={{CHECKOUT_SESSION_ID}}",
            "cancel_url": f"{self._public_url}/payment-cancel",
            "metadata": {"userId": user_id or ""},
        }

    def _stripe_client(self) -> stripe.StripeClient:
        """
        构建 Stripe 客户端

        HTTP 超时与外层 wait_for 相同，超时后工作线程里的请求也会结束；不做 SDK 内部重试。
        """
        return stripe.StripeClient(
            self._secret_key,
            http_client=stripe.RequestsClient(timeout=self._timeout),
            max_network_retries=0,
        )

    async def create_checkout_session(self, *, user_id: str | None) -> CheckoutSessionResult:
        """
        创建支付会话

        Stripe SDK 是同步的，放到线程里执行并加超时，避免阻塞事件循环。

        Raises:
            AppError: 未配置 Stripe（在任何网络调用之前）或 Stripe 调用失败/超时
        """
        if not self._secret_key:
            logger.error("create checkout session rejected: STRIPE_SECRET_KEY not configured")
            raise payment_not_configured()

        params = self.checkout_params(user_id)
        client = self._stripe_client()
        # 新版 SDK 的服务挂在 client.v1 下
        sessions = getattr(client, "v1", client).checkout.sessions
        try:
            session = await asyncio.wait_for(
                asyncio.to_thread(sessions.create, params=params),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            logger.error(f"Stripe checkout session timed out after {self._timeout}s (user_id={user_id!r})")
            raise payment_provider_error() from None
        except stripe.StripeError as e:
            logger.exception(f"Stripe checkout session error (user_id={user_id!r}): {e}")
            raise payment_provider_error() from e

        logger.info(f"Created Stripe checkout session {session.id} (user_id={user_id!r})")
        return CheckoutSessionResult(id=session.id, url=session.url)

    def verify_webhook(self, *, payload: bytes, signature: str | None) -> dict[str, Any]:
        """
        校验 webhook 签名并解析事件

        Args:
            payload: 请求体原始字节（不能先解析再序列化，否则签名必然不匹配）
            signature: Stripe-Signature 头部值

        Returns:
            解析后的事件 JSON

        Raises:
            AppError: 任何校验失败（未配置、缺少签名头、签名错误、时间戳过期、非 JSON）
        """
        try:
            if not self._secret_key:
                raise ValueError("Stripe not configured")
            if not self._webhook_secret:
                raise ValueError("Stripe webhook secret not configured")
            if not signature:
                raise ValueError("Missing Stripe-Signature header")

            body = payload.decode("utf-8")
            stripe.WebhookSignature.verify_header(
                body, signature, self._webhook_secret, tolerance=self._tolerance
            )
            event = json.loads(body)
            if not isinstance(event, dict):
                raise ValueError("Webhook payload is not a JSON object")
        except (stripe.SignatureVerificationError, ValueError) as e:
            logger.warning(f"Webhook signature verification failed: {e}")
            raise webhook_verification_failed(str(e)) from e

        return event
