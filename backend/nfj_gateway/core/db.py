"""
数据库连接模块

管理数据库引擎的创建。
使用 SQLModel 的 create_engine 创建数据库连接池。

重要提示：
- 数据库表结构通过 Alembic 迁移管理，不要在这里创建表
- 每个连接都带有连接超时和语句超时，避免存储调用无限挂起
"""
from sqlmodel import create_engine  # SQLModel 的数据库工具

from nfj_gateway.core.config import settings

# 创建数据库引擎（连接池）
# statement_timeout 由 PostgreSQL 服务端执行，超时的查询会抛出 OperationalError
engine = create_engine(
    str(settings.SQLALCHEMY_DATABASE_URI),
    pool_pre_ping=True,  # 取连接前先探活，避免使用已断开的连接
    connect_args={
        "connect_timeout": settings.DB_CONNECT_TIMEOUT_SECONDS,
        "options": f"-c statement_timeout={settings.DB_STATEMENT_TIMEOUT_MS}",
    },
)
