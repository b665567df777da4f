"""
用户模型模块

定义用户及其权益（积分、等级、高级版标记）的数据库模型。
"""
import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, String
from sqlmodel import Field, SQLModel

from .base import utc_now


class User(SQLModel, table=True):
    """
    用户模型

    以邮箱作为业务唯一键，注册接口按邮箱幂等创建。
    本服务只会修改 is_premium（由支付对账设置为 True），其余字段只读。

    字段说明：
    - id: 主键（UUID）
    - email: 邮箱（唯一且建立索引）
    - points: 学习积分（>= 0）
    - level: 学习等级（>= 1）
    - is_premium: 是否已购买高级版
    - created_at: 创建时间
    - updated_at: 更新时间
    """
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("points >= 0", name="ck_users_points_non_negative"),
        CheckConstraint("level >= 1", name="ck_users_level_positive"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    email: str = Field(
        max_length=255,
        sa_column=Column(String(255), unique=True, index=True, nullable=False),
    )
    points: int = Field(default=0)
    level: int = Field(default=1)
    is_premium: bool = Field(default=False)

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
