"""
证书路由模块

请求路径: GET /api/certificate/{name}/{level}
"""
from fastapi import APIRouter, Response

from nfj_gateway.services.certificate_service import render_certificate

router = APIRouter(prefix="/certificate", tags=["certificate"])


@router.get("/{name}/{level}", response_class=Response)
def certificate(name: str, level: str) -> Response:
    """
    下载等级证书

    等级会被限制在 [1, 20]，文件名中使用限制后的等级。
    """
    cert = render_certificate(name=name, level=level)
    return Response(
        content=cert.content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{cert.filename}"'},
    )
