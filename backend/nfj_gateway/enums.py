"""
枚举类型定义模块

定义应用中使用的所有枚举类型。
所有枚举都继承自 str 和 Enum，这样既可以用作字符串，又具有枚举的特性。
"""
from enum import Enum  # 枚举类型，用于定义固定的选项集合


class PaymentProvider(str, Enum):
    """
    支付渠道枚举

    与 provider_id 一起构成购买记录的幂等键。
    """
    stripe = "stripe"


class TranslationOutcome(str, Enum):
    """
    单个翻译服务调用结果类型

    - ok: 成功，直接返回
    - soft_failure: 可恢复失败（超时、网络错误、响应格式不对），尝试下一个服务
    - hard_failure: 不可恢复失败（配置错误等），整个请求返回 500
    """
    ok = "ok"
    soft_failure = "soft_failure"
    hard_failure = "hard_failure"


class ReconcileOutcome(str, Enum):
    """
    Webhook 对账结果

    - applied: 首次处理，已写入购买记录并更新权益
    - duplicate: 重复投递，购买记录已存在，未做任何修改
    - ignored: 非 checkout.session.completed 事件，不处理
    - failed: 存储失败，已记录日志，需要人工对账
    """
    applied = "applied"
    duplicate = "duplicate"
    ignored = "ignored"
    failed = "failed"
