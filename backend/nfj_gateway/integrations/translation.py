"""
翻译服务 API 集成模块

封装上游翻译服务，统一为同一种调用方式和返回结构：
- DeepL（https://www.deepl.com/docs-api）
- LibreTranslate（https://libretranslate.com/docs）

每个适配器都返回 AdapterResult，而不是抛异常：
- ok: 翻译成功
- soft_failure: 超时、网络错误、HTTP 错误、响应格式不对 —— 调用方应尝试下一个服务
- hard_failure: 在发出请求之前就发现配置错误 —— 调用方应直接失败
"""
from __future__ import annotations

from dataclasses import dataclass  # 数据类
from typing import Any, Protocol  # 类型工具

import httpx  # HTTP 客户端

from nfj_gateway.core.config import Settings
from nfj_gateway.enums import TranslationOutcome


@dataclass(frozen=True)
class AdapterResult:
    """
    单个翻译服务的调用结果

    kind 决定调用方的行为，text 只在 kind == ok 时有值。
    """
    kind: TranslationOutcome
    text: str | None = None
    error_message: str | None = None  # 失败原因（仅用于日志）
    raw: dict[str, Any] | None = None  # 原始响应数据

    @classmethod
    def ok(cls, text: str, raw: dict[str, Any] | None = None) -> AdapterResult:
        return cls(kind=TranslationOutcome.ok, text=text, raw=raw)

    @classmethod
    def soft_failure(cls, message: str, raw: dict[str, Any] | None = None) -> AdapterResult:
        return cls(kind=TranslationOutcome.soft_failure, error_message=message, raw=raw)

    @classmethod
    def hard_failure(cls, message: str) -> AdapterResult:
        return cls(kind=TranslationOutcome.hard_failure, error_message=message)


class TranslationAdapter(Protocol):
    """
    翻译服务适配器接口

    name: 返回给前端的 provider 标识
    configured: 是否具备调用所需的凭证/地址
    """
    name: str

    @property
    def configured(self) -> bool: ...

    async def translate(self, *, text: str, source: str, target: str) -> AdapterResult: ...


class DeepLAdapter:
    """DeepL 翻译 API 客户端"""

    name = "deepl"

    def __init__(self, *, api_key: str | None, api_url: str, timeout: float) -> None:
        self._api_key = api_key
        self._api_url = api_url
        self._timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    async def translate(self, *, text: str, source: str, target: str) -> AdapterResult:
        """
        调用 DeepL 翻译

        DeepL 的语言代码要求大写（EN、DE、NB）。

        Returns:
            AdapterResult: translations[0].text 存在时为 ok，否则为 soft_failure
        """
        if not self._api_url.startswith(("http://", "https://")):
            return AdapterResult.hard_failure(f"invalid DEEPL_API_URL: {self._api_url!r}")

        headers = {"Authorization": f"DeepL-Auth-Key {self._api_key}"}
        form = {
            "text": text,
            "source_lang": source.upper(),
            "target_lang": target.upper(),
        }
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                r = await client.post(self._api_url, data=form, headers=headers)
                r.raise_for_status()
                data = r.json()
        except httpx.HTTPError as e:
            return AdapterResult.soft_failure(f"DeepL request error: {e}")
        except ValueError as e:
            # 响应体不是 JSON
            return AdapterResult.soft_failure(f"DeepL invalid JSON: {e}")

        translations = data.get("translations") if isinstance(data, dict) else None
        if isinstance(translations, list) and translations:
            first = translations[0]
            if isinstance(first, dict) and first.get("text"):
                return AdapterResult.ok(str(first["text"]), raw=data)

        return AdapterResult.soft_failure(
            "DeepL invalid response", raw=data if isinstance(data, dict) else None
        )


class LibreTranslateAdapter:
    """LibreTranslate 翻译 API 客户端（可自建）"""

    name = "libre"

    def __init__(self, *, base_url: str | None, api_key: str | None, timeout: float) -> None:
        self._base_url = (base_url or "").rstrip("/")
        self._api_key = api_key
        self._timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self._base_url)

    async def translate(self, *, text: str, source: str, target: str) -> AdapterResult:
        if not self._base_url.startswith(("http://", "https://")):
            return AdapterResult.hard_failure(f"invalid LIBRETRANSLATE_URL: {self._base_url!r}")

        payload: dict[str, Any] = {"q": text, "source": source, "target": target, "format": "text"}
        if self._api_key:
            payload["api_key"] = self._api_key

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                r = await client.post(
                    f"{self._base_url}/translate",
                    json=payload,
                    headers={"accept": "application/json"},
                )
                r.raise_for_status()
                data = r.json()
        except httpx.HTTPError as e:
            return AdapterResult.soft_failure(f"LibreTranslate request error: {e}")
        except ValueError as e:
            return AdapterResult.soft_failure(f"LibreTranslate invalid JSON: {e}")

        if isinstance(data, dict) and data.get("translatedText"):
            return AdapterResult.ok(str(data["translatedText"]), raw=data)

        return AdapterResult.soft_failure(
            "LibreTranslate invalid response", raw=data if isinstance(data, dict) else None
        )


def build_adapters(settings: Settings) -> list[TranslationAdapter]:
    """
    按优先级构建翻译适配器列表

    顺序固定：DeepL -> LibreTranslate。未配置的适配器也会返回，
    由调用方根据 configured 跳过。
    """
    return [
        DeepLAdapter(
            api_key=settings.DEEPL_API_KEY,
            api_url=settings.DEEPL_API_URL,
            timeout=settings.TRANSLATION_TIMEOUT_SECONDS,
        ),
        LibreTranslateAdapter(
            base_url=settings.LIBRETRANSLATE_URL,
            api_key=settings.LIBRETRANSLATE_API_KEY,
            timeout=settings.TRANSLATION_TIMEOUT_SECONDS,
        ),
    ]
