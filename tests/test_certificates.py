"""Tests for the default certificate renderer."""

import base64
from datetime import datetime

from pay_equity_engine.models import Jurisdiction, Report
from pay_equity_engine.ports import TextCertificateRenderer, certificate_file_name


def test_file_name_replaces_whitespace():
    assert certificate_file_name("Lake  Haven City", 2024) == "Lake_Haven_City_Certificate_2024.pdf"
    assert certificate_file_name(" Ely ", 2025) == "Ely_Certificate_2025.pdf"


async def test_renders_data_url():
    jurisdiction = Jurisdiction(jurisdiction_id="CITY-0042", name="Lake Haven")
    report = Report(
        report_year=2024,
        case_number=3,
        case_description="Annual report",
        submitted_at=datetime(2024, 1, 15, 10, 0),
    )

    artifact = await TextCertificateRenderer(signatory="A. Commissioner").render(
        report, jurisdiction
    )

    assert artifact.file_name == "Lake_Haven_Certificate_2024.pdf"
    assert artifact.data.startswith("data:text/plain;base64,")
    text = base64.b64decode(artifact.data.split(",", 1)[1]).decode("utf-8")
    assert "PAY EQUITY COMPLIANCE CERTIFICATE" in text
    assert "Case Number: 3" in text
    assert "Submission Date: 01/15/2024" in text
    assert "Approved by: A. Commissioner" in text
