from __future__ import annotations

from datetime import date

import pytest

from nfj_gateway.services.certificate_service import TITLES, clamp_level, render_certificate


@pytest.mark.parametrize(
    ("level", "expected"),
    [("0", 1), ("99", 20), ("7", 7), ("-3", 1)],
)
def test_certificate_level_is_clamped(client, level, expected):
    r = client.get(f"/api/certificate/Erik/{level}")
    assert r.status_code == 200
    assert r.headers["content-type"] == "application/pdf"
    assert r.headers["content-disposition"] == f'attachment; filename="certificate_level_{expected}.pdf"'
    assert r.content.startswith(b"%PDF")


def test_certificate_url_encoded_name(client):
    r = client.get("/api/certificate/Erik%20R%C3%B8ed/3")
    assert r.status_code == 200
    assert r.content.startswith(b"%PDF")


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(None, 1), ("abc", 1), ("", 1), ("2.7", 2), ("20", 20), ("21", 20), (5, 5), ("nan", 1), ("1e400", 1)],
)
def test_clamp_level(raw, expected):
    assert clamp_level(raw) == expected


def test_render_certificate_titles():
    assert len(TITLES) == 20

    first = render_certificate(name="Erik", level=0, issued_on=date(2026, 10, 19))
    assert first.level == 1
    assert first.title == "Ruderer"
    assert first.filename == "certificate_level_1.pdf"

    last = render_certificate(name="Erik", level="99")
    assert last.level == 20
    assert last.title == "König"
    assert last.content.startswith(b"%PDF")
