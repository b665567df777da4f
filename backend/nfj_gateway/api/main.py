"""
API 路由聚合模块

将所有业务路由模块聚合到统一的 router 中，由主应用（nfj_gateway/main.py）注册。

路由模块说明：
- translate: 翻译（多服务降级）
- checkout: 创建 Stripe 支付会话
- certificate: 等级证书下载
- users: 注册、查询用户
- utils: 健康检查（无前缀）
- webhook: Stripe webhook（无前缀，地址已在 Stripe 后台配置）
"""
from fastapi import APIRouter

from nfj_gateway.api.routes import (
    certificate,  # 证书路由
    checkout,  # 支付路由
    translate,  # 翻译路由
    users,  # 用户路由
    utils,  # 工具路由
    webhook,  # Webhook 路由
)

# 业务 API 路由器，注册时添加 /api 前缀
api_router = APIRouter()
api_router.include_router(translate.router)  # /translate
api_router.include_router(checkout.router)  # /create-checkout-session
api_router.include_router(certificate.router)  # /certificate/*
api_router.include_router(users.router)  # /register, /me/*

# 根路径路由器
root_router = APIRouter()
root_router.include_router(utils.router)  # /health
root_router.include_router(webhook.router)  # /webhook
