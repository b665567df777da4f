"""
翻译路由模块

请求路径: POST /api/translate
"""
from __future__ import annotations

from fastapi import APIRouter

from nfj_gateway.api.deps import TranslationServiceDep
from nfj_gateway.api.schemas import TranslateData, TranslateRequest

router = APIRouter(tags=["translate"])


@router.post("/translate", response_model=TranslateData)
async def translate(
    service: TranslationServiceDep,
    body: TranslateRequest | None = None,
) -> TranslateData:
    """
    翻译文本

    按优先级尝试已配置的翻译服务，全部不可用时返回带前缀的原文（provider 为 "none"）。
    q / source / target 任一缺失返回 400，不会调用任何上游服务。
    """
    body = body or TranslateRequest()
    result = await service.translate(text=body.q, source=body.source, target=body.target)
    return TranslateData(translated_text=result.translated_text, provider=result.provider)
