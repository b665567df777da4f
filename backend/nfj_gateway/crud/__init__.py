"""CRUD 操作模块"""
from .purchase import add_once as add_purchase_once
from .purchase import count_by_provider_id as count_purchases
from .user import (
    get as get_user,
)
from .user import (
    get_by_email as get_user_by_email,
)
from .user import (
    grant_premium,
)
from .user import (
    register_by_email as register_user_by_email,
)

__all__ = [
    "add_purchase_once",
    "count_purchases",
    "get_user",
    "get_user_by_email",
    "grant_premium",
    "register_user_by_email",
]
