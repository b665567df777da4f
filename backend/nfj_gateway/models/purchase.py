"""
购买记录模型模块

定义支付对账写入的购买流水表。
"""
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint, Uuid
from sqlmodel import Field, SQLModel

from nfj_gateway.enums import PaymentProvider

from .base import utc_now


class Purchase(SQLModel, table=True):
    """
    购买记录模型（只追加，不修改、不删除）

    (provider, provider_id) 唯一约束是 webhook 幂等的唯一保障：
    同一个支付会话的重复投递（包括并发投递）只能写入一行。

    字段说明：
    - id: 主键
    - user_id: 用户 ID（可为空，匿名购买）
    - provider: 支付渠道
    - provider_id: 渠道侧的幂等键（Stripe checkout session id）
    - amount: 金额（最小货币单位，如欧分）
    - currency: 货币代码
    - created_at: 入账时间
    """
    __tablename__ = "purchases"
    __table_args__ = (
        UniqueConstraint("provider", "provider_id", name="uq_purchases_provider_provider_id"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID | None = Field(
        default=None,
        sa_column=Column(
            Uuid, ForeignKey("users.id", ondelete="SET NULL"), index=True, nullable=True
        ),
    )
    provider: PaymentProvider = Field(sa_column=Column(String(16), nullable=False))
    provider_id: str = Field(sa_column=Column(String(255), nullable=False))
    amount: int
    currency: str = Field(max_length=8)

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
