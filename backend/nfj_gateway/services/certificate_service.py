"""
等级证书生成服务

根据用户名和等级生成横版 A4 PDF 证书。纯函数，无状态。
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from io import BytesIO
from urllib.parse import unquote

from reportlab.lib.pagesizes import A4, landscape
from reportlab.pdfgen import canvas

MIN_LEVEL = 1
MAX_LEVEL = 20

# 等级称号表，按 level - 1 索引
TITLES = (
    "Ruderer",
    "Bootsmann",
    "Wächter",
    "Seefahrer",
    "Schildträger",
    "Seemann",
    "Wikingerjung",
    "Skalde",
    "Krieger",
    "Navigator",
    "Fährmann",
    "Stammesmitglied",
    "Hafenmeister",
    "Herscher",
    "Schiffbauer",
    "Häuptling",
    "Jarl",
    "Erzjäger",
    "Schildoberst",
    "König",
)

HEADER = "Norwegisch für Jedermann"


@dataclass(frozen=True)
class Certificate:
    level: int
    title: str
    content: bytes

    @property
    def filename(self) -> str:
        return f"certificate_level_{self.level}.pdf"


def clamp_level(raw: str | int | None) -> int:
    """
    解析并限制等级到 [1, 20]

    非数字按 1 处理，小数向零截断。
    """
    try:
        level = int(float(raw)) if raw is not None else MIN_LEVEL
    except (TypeError, ValueError, OverflowError):
        level = MIN_LEVEL
    return max(MIN_LEVEL, min(MAX_LEVEL, level))


def render_certificate(*, name: str, level: str | int | None, issued_on: date | None = None) -> Certificate:
    """
    生成证书 PDF

    Args:
        name: 获得者姓名（会再做一次 URL 解码）
        level: 请求的等级，超出范围会被限制
        issued_on: 颁发日期，默认今天

    Returns:
        Certificate: 包含限制后的等级、称号和 PDF 字节
    """
    clamped = clamp_level(level)
    title = TITLES[clamped - 1]
    issued_on = issued_on or date.today()

    buf = BytesIO()
    width, height = landscape(A4)
    pdf = canvas.Canvas(buf, pagesize=(width, height))
    pdf.setTitle(f"Zertifikat Level {clamped}")

    center = width / 2
    y = height - 150
    lines = (
        ("Helvetica-Bold", 28, HEADER),
        ("Helvetica", 20, f"Zertifikat: Level {clamped} — {title}"),
        ("Helvetica", 16, f"Für: {unquote(name)}"),
        ("Helvetica", 12, f"Datum: {issued_on.strftime('%d.%m.%Y')}"),
    )
    for font, size, text in lines:
        pdf.setFont(font, size)
        pdf.drawCentredString(center, y, text)
        y -= size * 2.5

    pdf.showPage()
    pdf.save()
    return Certificate(level=clamped, title=title, content=buf.getvalue())
