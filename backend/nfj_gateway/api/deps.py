"""
FastAPI 依赖注入模块

提供可复用的依赖项，用于路由处理函数中。
各个服务在这里用全局 settings 构造，测试时通过 app.dependency_overrides 替换。

关键概念：
- Depends: FastAPI 的依赖注入装饰器
- Generator: 用于创建需要清理的资源（如数据库会话）
"""
from collections.abc import Generator  # 生成器类型，用于资源管理
from typing import Annotated  # 类型注解，用于依赖注入

from fastapi import Depends, Request
from sqlmodel import Session  # 数据库会话

from nfj_gateway.core.config import settings
from nfj_gateway.core.db import engine
from nfj_gateway.integrations.translation import build_adapters
from nfj_gateway.services.payment_service import PaymentService
from nfj_gateway.services.reconciler import Reconciler
from nfj_gateway.services.translation_service import TranslationService


def get_db() -> Generator[Session, None, None]:
    """
    获取数据库会话（依赖注入）

    使用 yield 确保会话在请求结束后自动关闭。
    """
    with Session(engine) as session:
        yield session


def get_translation_service() -> TranslationService:
    """按配置构建翻译降级链"""
    return TranslationService(
        build_adapters(settings),
        timeout=settings.TRANSLATION_TIMEOUT_SECONDS,
    )


def get_payment_service() -> PaymentService:
    return PaymentService(settings)


def get_reconciler() -> Reconciler:
    return Reconciler(settings)


async def get_raw_body(request: Request) -> bytes:
    """
    读取原始请求体字节

    webhook 签名基于原始字节计算，不能让 FastAPI 先解析成 JSON。
    """
    return await request.body()


# 类型别名，简化依赖注入的写法
SessionDep = Annotated[Session, Depends(get_db)]  # 数据库会话依赖
TranslationServiceDep = Annotated[TranslationService, Depends(get_translation_service)]
PaymentServiceDep = Annotated[PaymentService, Depends(get_payment_service)]
ReconcilerDep = Annotated[Reconciler, Depends(get_reconciler)]
RawBodyDep = Annotated[bytes, Depends(get_raw_body)]
