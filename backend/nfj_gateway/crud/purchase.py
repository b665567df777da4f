"""购买记录 CRUD 操作"""
import uuid

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, func, select

from nfj_gateway.enums import PaymentProvider
from nfj_gateway.models import Purchase

UNIQUE_CONSTRAINT = "uq_purchases_provider_provider_id"


def _is_duplicate_key(error: IntegrityError) -> bool:
    """
    判断完整性错误是否来自 (provider, provider_id) 唯一约束

    PostgreSQL 通过 diag.constraint_name 给出约束名；SQLite 只有错误信息文本。
    """
    diag = getattr(error.orig, "diag", None)
    constraint = getattr(diag, "constraint_name", None)
    if constraint:
        return constraint == UNIQUE_CONSTRAINT
    message = str(error.orig)
    return "UNIQUE constraint failed: purchases.provider" in message


def add_once(
    *,
    session: Session,
    provider: PaymentProvider,
    provider_id: str,
    user_id: uuid.UUID | None,
    amount: int,
    currency: str,
) -> Purchase | None:
    """
    写入购买记录（不提交事务）

    依赖 (provider, provider_id) 唯一约束去重：flush 时违反约束说明
    同一个支付会话已经入账（或另一个并发投递抢先写入），此时回滚当前事务并返回 None。
    其他完整性错误（如外键）回滚后原样抛出，由调用方按存储失败处理。
    """
    purchase = Purchase(
        user_id=user_id,
        provider=provider,
        provider_id=provider_id,
        amount=amount,
        currency=currency,
    )
    try:
        session.add(purchase)
        session.flush()
    except IntegrityError as e:
        session.rollback()
        if not _is_duplicate_key(e):
            raise
        return None
    return purchase


def count_by_provider_id(*, session: Session, provider: PaymentProvider, provider_id: str) -> int:
    """统计某个支付会话的入账行数（对账核查用）"""
    stmt = (
        select(func.count())
        .select_from(Purchase)
        .where(Purchase.provider == provider, Purchase.provider_id == provider_id)
    )
    return session.exec(stmt).one()
