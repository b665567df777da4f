"""
应用配置模块

使用 Pydantic Settings 管理所有环境变量和配置。
配置从项目根目录的 .env 文件读取，支持类型验证和默认值。

配置只在进程启动时加载一次（见文件末尾的 settings），
各个服务通过构造函数接收 Settings 实例，不直接读取环境变量。
"""
import warnings  # 用于发出警告
from typing import Annotated, Any, Literal  # 类型注解工具

from pydantic import (
    AnyUrl,  # URL 类型验证
    BeforeValidator,  # 字段验证前的转换器
    HttpUrl,  # HTTP URL 类型验证
    PostgresDsn,  # PostgreSQL 连接字符串验证
    computed_field,  # 计算字段装饰器
    model_validator,  # 模型验证器装饰器
)
from pydantic_settings import BaseSettings, SettingsConfigDict  # 配置管理
from typing_extensions import Self  # 用于类型注解中引用自身类型


def parse_cors(v: Any) -> list[str] | str:
    """
    解析 CORS 配置值

    支持两种格式：
    1. 逗号分隔的字符串："http://localhost:3000,http://localhost:3001"
    2. 列表格式：["http://localhost:3000", "http://localhost:3001"]

    Args:
        v: 输入的配置值（字符串或列表）

    Returns:
        解析后的列表或字符串

    Raises:
        ValueError: 当输入格式不正确时
    """
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",") if i.strip()]
    elif isinstance(v, list | str):
        return v
    raise ValueError(v)


class Settings(BaseSettings):
    """
    应用配置类

    配置来源优先级：
    1. 环境变量（最高优先级）
    2. .env 文件
    3. 代码中的默认值（最低优先级）

    可选的第三方凭证（DeepL、LibreTranslate、Stripe）缺失时不会导致启动失败，
    对应的功能会降级（翻译走兜底文本）或返回类型化错误（支付未配置）。
    """
    model_config = SettingsConfigDict(
        # 使用项目根目录的 .env 文件（backend/ 目录的上一级）
        env_file="../.env",
        env_ignore_empty=True,  # 忽略空的环境变量
        extra="ignore",  # 忽略未定义的额外字段
    )
    API_STR: str = "/api"  # API 路由前缀
    PORT: int = 3000  # 监听端口
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"

    BACKEND_CORS_ORIGINS: Annotated[
        list[AnyUrl] | str, BeforeValidator(parse_cors)
    ] = []

    @computed_field  # type: ignore[prop-decorator]
    @property
    def all_cors_origins(self) -> list[str]:
        """CORS 允许的源（去除尾部斜杠）"""
        return [str(origin).rstrip("/") for origin in self.BACKEND_CORS_ORIGINS]

    PROJECT_NAME: str = "nfj-gateway"
    SENTRY_DSN: HttpUrl | None = None

    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_DB: str = ""
    DB_CONNECT_TIMEOUT_SECONDS: int = 10  # 建立连接超时（秒）
    DB_STATEMENT_TIMEOUT_MS: int = 15_000  # 单条 SQL 执行超时（毫秒）

    @computed_field  # type: ignore[prop-decorator]
    @property
    def SQLALCHEMY_DATABASE_URI(self) -> PostgresDsn:
        return PostgresDsn.build(
            scheme="postgresql+psycopg",
            username=self.POSTGRES_USER,
            password=self.POSTGRES_PASSWORD,
            host=self.POSTGRES_SERVER,
            port=self.POSTGRES_PORT,
            path=self.POSTGRES_DB,
        )

    # 翻译服务配置（按优先级：DeepL -> LibreTranslate）
    DEEPL_API_KEY: str | None = None  # 配置后启用 DeepL
    DEEPL_API_URL: str = "https://api-free.deepl.com/v2/translate"
    LIBRETRANSLATE_URL: str | None = None  # 配置后启用 LibreTranslate
    LIBRETRANSLATE_API_KEY: str | None = None  # 自建实例通常不需要
    TRANSLATION_TIMEOUT_SECONDS: float = 10.0  # 单个翻译服务调用超时（秒）

    # Stripe 支付配置
    STRIPE_SECRET_KEY: str | None = None  # 缺失时支付接口返回 "未配置" 错误
    STRIPE_WEBHOOK_SECRET: str | None = None  # Webhook 签名密钥
    STRIPE_WEBHOOK_TOLERANCE_SECONDS: int = 300  # 签名时间戳容忍窗口
    PAYMENT_TIMEOUT_SECONDS: float = 20.0  # 创建支付会话超时（秒）
    PUBLIC_URL: str = "http://localhost:3000"  # 用于拼接支付成功/取消跳转地址

    # 高级版商品（固定价格）
    PREMIUM_PRODUCT_NAME: str = "NFJ Premium"
    PREMIUM_UNIT_AMOUNT: int = 499  # 最小货币单位（欧分）
    PREMIUM_CURRENCY: str = "eur"

    def _check_default_secret(self, var_name: str, value: str | None) -> None:
        """
        检查敏感配置是否使用了默认值 "changethis"

        本地环境只警告，其他环境直接报错。

        Raises:
            ValueError: 在非本地环境使用默认值时
        """
        if value == "changethis":
            message = (
                f'The value of {var_name} is "changethis", '
                "for security, please change it, at least for deployments."
            )
            if self.ENVIRONMENT == "local":
                warnings.warn(message, stacklevel=1)
            else:
                raise ValueError(message)

    @model_validator(mode="after")
    def _enforce_non_default_secrets(self) -> Self:
        self._check_default_secret("POSTGRES_PASSWORD", self.POSTGRES_PASSWORD)
        self._check_default_secret("STRIPE_WEBHOOK_SECRET", self.STRIPE_WEBHOOK_SECRET)

        return self


# 创建全局配置实例，整个应用共享（启动后只读）
settings = Settings()  # type: ignore
