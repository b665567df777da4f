"""
用户路由模块

处理用户相关的 API 端点，包括：
- 按邮箱注册（幂等）
- 按 ID 查询用户资料
"""
from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter
from sqlalchemy.exc import SQLAlchemyError

from nfj_gateway import crud  # 数据库操作
from nfj_gateway.api.deps import SessionDep  # 依赖注入
from nfj_gateway.api.errors import invalid_request, storage_failure
from nfj_gateway.api.schemas import RegisterRequest, UserData

logger = logging.getLogger(__name__)

router = APIRouter(tags=["user"])


@router.post("/register", response_model=UserData)
def register(session: SessionDep, body: RegisterRequest | None = None) -> UserData:
    """
    注册用户

    同一邮箱重复注册返回已存在的用户，不会创建第二行。

    请求路径: POST /api/register

    Raises:
        AppError: 邮箱缺失（400）或数据库错误（500）
    """
    email = body.email.strip() if body and body.email else None
    if not email:
        raise invalid_request("email required", code=400401)

    try:
        user = crud.register_user_by_email(session=session, email=email)
    except SQLAlchemyError:
        logger.exception("register: storage error")
        raise storage_failure() from None
    return UserData.model_validate(user)


@router.get("/me/{user_id}", response_model=UserData | None)
def me(session: SessionDep, user_id: str) -> UserData | None:
    """
    查询用户资料

    请求路径: GET /api/me/{user_id}

    Returns:
        用户数据；用户不存在（或 ID 不是合法 UUID）时返回 null
    """
    try:
        uid = uuid.UUID(user_id)
    except ValueError:
        return None

    try:
        user = crud.get_user(session=session, user_id=uid)
    except SQLAlchemyError:
        logger.exception(f"me: storage error for user {user_id}")
        raise storage_failure() from None
    return UserData.model_validate(user) if user else None
