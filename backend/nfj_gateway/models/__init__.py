"""
数据库模型定义模块

本模块使用 SQLModel 定义所有数据库表结构。

模型按功能拆分：
- user.py: 用户模型（含权益字段）
- purchase.py: 购买记录模型
"""
from sqlmodel import SQLModel

from .base import utc_now
from .purchase import Purchase
from .user import User

__all__ = [
    "SQLModel",
    "utc_now",
    "User",
    "Purchase",
]
