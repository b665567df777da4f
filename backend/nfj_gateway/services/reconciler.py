"""
支付对账服务

把已通过签名校验的 Stripe 事件应用到用户权益和购买流水上。

Stripe 的 webhook 至少投递一次，可能重复、可能并发。幂等由数据库保证：
购买记录写入和高级版开通在同一个事务里，(provider, provider_id) 唯一约束冲突时整体回滚。
不使用进程内锁，多实例部署时同样正确。
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any

import sentry_sdk
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from nfj_gateway import crud
from nfj_gateway.core.config import Settings
from nfj_gateway.enums import PaymentProvider, ReconcileOutcome
from nfj_gateway.services.payment_service import CHECKOUT_COMPLETED

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompletedCheckout:
    """从 checkout.session.completed 事件中提取的字段"""
    session_id: str
    user_ref: str | None  # metadata.userId，可能为空（匿名购买）
    amount: int
    currency: str


def _parse_user_id(value: str | None) -> uuid.UUID | None:
    if not value:
        return None
    try:
        return uuid.UUID(value)
    except ValueError:
        return None


def _parse_amount(value: Any, default: int) -> int:
    """金额（最小货币单位）解析失败时回退到固定价格"""
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning(f"Unparseable amount_total {value!r}, falling back to {default}")
        return default


class Reconciler:
    def __init__(self, settings: Settings) -> None:
        self._default_amount = settings.PREMIUM_UNIT_AMOUNT
        self._default_currency = settings.PREMIUM_CURRENCY

    def extract(self, event: dict[str, Any]) -> CompletedCheckout | None:
        """从事件中取出支付会话信息，缺少会话 ID 时返回 None"""
        data = event.get("data")
        obj = data.get("object") if isinstance(data, dict) else None
        if not isinstance(obj, dict) or not obj.get("id"):
            return None

        metadata = obj.get("metadata")
        user_ref = metadata.get("userId") if isinstance(metadata, dict) else None

        return CompletedCheckout(
            session_id=str(obj["id"]),
            user_ref=str(user_ref) if user_ref else None,
            amount=_parse_amount(obj.get("amount_total"), self._default_amount),
            currency=str(obj.get("currency") or self._default_currency),
        )

    def apply(self, *, session: Session, event: dict[str, Any]) -> ReconcileOutcome:
        """
        应用一个已校验的事件

        存储失败不会向上抛出：Stripe 已经持久化了这笔支付，返回非 2xx 只会引发无休止的重试。
        失败会记录错误日志并上报 Sentry，由运维人工对账。

        Returns:
            ReconcileOutcome: 处理结果
        """
        if event.get("type") != CHECKOUT_COMPLETED:
            return ReconcileOutcome.ignored

        checkout = self.extract(event)
        if checkout is None:
            logger.warning(f"Webhook event {event.get('id')!r} has no checkout session id, ignoring")
            return ReconcileOutcome.ignored

        try:
            return self._apply_checkout(session=session, checkout=checkout)
        except SQLAlchemyError as e:
            session.rollback()
            logger.exception(
                f"Webhook apply failed for session {checkout.session_id} "
                f"(user_ref={checkout.user_ref!r}); needs manual reconciliation"
            )
            sentry_sdk.capture_exception(e)
            return ReconcileOutcome.failed

    def _apply_checkout(self, *, session: Session, checkout: CompletedCheckout) -> ReconcileOutcome:
        user = None
        user_id = _parse_user_id(checkout.user_ref)
        if user_id is not None:
            user = crud.get_user(session=session, user_id=user_id)
        if checkout.user_ref and user is None:
            # 无法关联到用户时仍然记账，保证流水完整
            logger.warning(
                f"Checkout session {checkout.session_id} references unknown user "
                f"{checkout.user_ref!r}; recording anonymous purchase"
            )

        purchase = crud.add_purchase_once(
            session=session,
            provider=PaymentProvider.stripe,
            provider_id=checkout.session_id,
            user_id=user.id if user else None,
            amount=checkout.amount,
            currency=checkout.currency,
        )
        if purchase is None:
            logger.info(f"Duplicate webhook for checkout session {checkout.session_id}, already applied")
            return ReconcileOutcome.duplicate

        if user is not None:
            crud.grant_premium(session=session, user=user)
        session.commit()

        logger.info(
            f"Applied checkout session {checkout.session_id} "
            f"(user_id={user.id if user else None}, amount={checkout.amount} {checkout.currency})"
        )
        return ReconcileOutcome.applied
