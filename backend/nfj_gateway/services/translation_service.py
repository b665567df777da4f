"""
翻译服务（多服务降级链）

按优先级依次尝试已配置的翻译适配器：
1. 第一个返回 ok 的结果直接返回，后面的服务不再调用
2. soft_failure / 超时：记录日志，继续尝试下一个
3. hard_failure：直接抛出 500（这是接口本身失败的唯一情况）
4. 都没有配置或全部 soft_failure：返回确定性的兜底文本，provider 为 "none"
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from nfj_gateway.api.errors import invalid_request, translation_failed
from nfj_gateway.enums import TranslationOutcome
from nfj_gateway.integrations.translation import AdapterResult, TranslationAdapter

logger = logging.getLogger(__name__)

FALLBACK_PROVIDER = "none"
_FALLBACK_PREFIX = "(Übersetzung benötigt API)"


@dataclass(frozen=True)
class TranslationResult:
    translated_text: str
    provider: str


def fallback_text(text: str) -> str:
    """兜底文本：原文加固定前缀"""
    return f"{_FALLBACK_PREFIX} {text}"


class TranslationService:
    """翻译降级链协调器"""

    def __init__(self, adapters: Sequence[TranslationAdapter], *, timeout: float) -> None:
        """
        Args:
            adapters: 按优先级排序的适配器
            timeout: 单个适配器调用的总超时（秒）
        """
        self._adapters = list(adapters)
        self._timeout = timeout

    @property
    def configured_adapters(self) -> list[TranslationAdapter]:
        return [a for a in self._adapters if a.configured]

    async def translate(
        self, *, text: str | None, source: str | None, target: str | None
    ) -> TranslationResult:
        """
        翻译文本

        Raises:
            AppError: 参数缺失（400，且不会调用任何上游）或不可降级的错误（500）
        """
        if not all(value and value.strip() for value in (text, source, target)):
            raise invalid_request("Missing q/source/target")

        for adapter in self.configured_adapters:
            result = await self._attempt(adapter, text=text, source=source, target=target)
            if result.kind == TranslationOutcome.ok and result.text:
                return TranslationResult(translated_text=result.text, provider=adapter.name)
            if result.kind == TranslationOutcome.hard_failure:
                logger.error(
                    f"translate aborted by {adapter.name} ({source}->{target}): {result.error_message}"
                )
                raise translation_failed()
            logger.warning(
                f"translate via {adapter.name} failed ({source}->{target}), trying next: "
                f"{result.error_message}"
            )

        return TranslationResult(translated_text=fallback_text(text), provider=FALLBACK_PROVIDER)

    async def _attempt(
        self, adapter: TranslationAdapter, *, text: str, source: str, target: str
    ) -> AdapterResult:
        try:
            return await asyncio.wait_for(
                adapter.translate(text=text, source=source, target=target),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            return AdapterResult.soft_failure(f"timed out after {self._timeout}s")
        except Exception as e:
            # 适配器内部未归类的异常同样按可恢复失败处理
            logger.exception(f"translate adapter {adapter.name} raised")
            return AdapterResult.soft_failure(f"{type(e).__name__}: {e}")
