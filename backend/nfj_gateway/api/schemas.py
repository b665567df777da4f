"""
API 请求/响应数据模型（Schema）

定义所有 API 接口的请求和响应数据结构。
使用 Pydantic 进行数据验证和序列化。

注意：
- 请求字段全部声明为可选，缺失/为空的检查在业务层完成，统一返回 400
- 响应字段使用前端约定的 camelCase 别名（translatedText、isPremium 等）
"""
from __future__ import annotations

import uuid
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# ============================================================
# 通用响应模型
# ============================================================


class ErrorEnvelope(BaseModel):
    """
    错误响应格式

    所有错误响应都使用这个格式：
        {"code": 400101, "message": "Missing q/source/target", "data": None}
    """
    code: int
    message: str
    data: Any | None = None


class HealthData(BaseModel):
    ok: bool = True


# ============================================================
# 翻译
# ============================================================


class TranslateRequest(BaseModel):
    """
    翻译请求模型

    q: 原文；source / target: 语言代码（如 "en"、"de"、"no"）
    """
    q: str | None = None
    source: str | None = None
    target: str | None = None


class TranslateData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    translated_text: str = Field(alias="translatedText")
    provider: str  # 实际使用的翻译服务（deepl / libre / none）


# ============================================================
# 支付
# ============================================================


class CheckoutSessionRequest(BaseModel):
    """创建支付会话请求，userId 可选（匿名购买）"""
    model_config = ConfigDict(populate_by_name=True)

    user_id: str | None = Field(default=None, alias="userId")


class CheckoutSessionData(BaseModel):
    id: str  # Stripe checkout session id
    url: str | None = None  # Stripe 托管支付页面地址


class WebhookAck(BaseModel):
    """Webhook 确认响应，任何通过签名校验的事件都返回 received=True"""
    received: bool = True


# ============================================================
# 用户
# ============================================================


class RegisterRequest(BaseModel):
    email: str | None = None


class UserData(BaseModel):
    """
    用户数据模型

    用于返回用户信息，包含积分、等级和高级版标记。
    """
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: uuid.UUID
    email: str
    points: int
    level: int
    is_premium: bool = Field(alias="isPremium")
