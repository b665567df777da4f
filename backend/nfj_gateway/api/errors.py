"""
自定义异常模块

定义应用特定的异常类，用于统一的错误处理。
所有业务异常都继承自 AppError，在 main.py 中有统一的异常处理器。

错误分类（对应 HTTP 状态码）：
- 请求参数错误（400）：在任何 I/O 之前拒绝
- 上游服务硬失败 / 未配置（500）：没有降级路径时才会抛出
- Webhook 签名校验失败（400）：绝不会触发任何数据修改
- 存储失败（500）：注册、查询接口返回；webhook 对账路径只记录日志
"""
from __future__ import annotations


class AppError(Exception):
    """
    应用自定义异常类

    包含：
    - code: 业务错误码（用于前端和日志区分不同错误）
    - message: 错误消息（不包含堆栈、凭证等内部信息）
    - status_code: HTTP 状态码

    使用示例：
        raise AppError(code=400101, message="Missing q/source/target", status_code=400)
    """

    def __init__(self, *, code: int, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code


def invalid_request(message: str, *, code: int = 400101) -> AppError:
    """请求参数缺失或为空"""
    return AppError(code=code, message=message, status_code=400)


def translation_failed() -> AppError:
    """翻译链路出现不可降级的错误（如配置错误）"""
    return AppError(code=500101, message="Translation failed", status_code=500)


def payment_not_configured() -> AppError:
    """
    支付未配置

    与上游暂时性错误使用不同的错误码，便于在日志中区分。
    """
    return AppError(code=500201, message="Stripe not configured", status_code=500)


def payment_provider_error() -> AppError:
    """调用 Stripe 失败或超时"""
    return AppError(code=500202, message="stripe error", status_code=500)


def webhook_verification_failed(reason: str) -> AppError:
    """
    Webhook 签名校验失败

    Args:
        reason: 失败原因（签名不匹配、时间戳过期、请求头格式错误等）
    """
    return AppError(code=400301, message=f"Webhook Error: {reason}", status_code=400)


def storage_failure() -> AppError:
    """数据库操作失败"""
    return AppError(code=500401, message="db error", status_code=500)
