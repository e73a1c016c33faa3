"""Default certificate renderer.

Produces a plain-text certificate encoded as a base64 data URL. Deployments
that need the printed layout plug in their own ``CertificateRenderer``.
"""

from __future__ import annotations

import base64
import re
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from pay_equity_engine.ports.base import CertificateArtifact

if TYPE_CHECKING:
    from pay_equity_engine.models import Jurisdiction, Report

STATUTE = "Minnesota Statutes 471.991 - 471.999"

_WHITESPACE = re.compile(r"\s+")


def certificate_file_name(jurisdiction_name: str, report_year: int) -> str:
    """``{Jurisdiction_Name}_Certificate_{year}.pdf`` with whitespace runs as underscores."""
    slug = _WHITESPACE.sub("_", jurisdiction_name.strip())
    return f"{slug}_Certificate_{report_year}.pdf"


class TextCertificateRenderer:
    """Renders the certificate wording without any page layout."""

    content_type = "text/plain"

    def __init__(self, signatory: str = "Pay Equity Commissioner"):
        self.signatory = signatory

    def render_text(self, report: Report, jurisdiction: Jurisdiction) -> str:
        submitted = f"{report.submitted_at:%m/%d/%Y}" if report.submitted_at else "-"
        lines = [
            "PAY EQUITY COMPLIANCE CERTIFICATE",
            "",
            jurisdiction.name,
            "",
            f"This is to certify that {jurisdiction.name} has completed its annual pay equity",
            f"report for the year {report.report_year} in accordance with the Minnesota Local "
            "Government",
            f"Pay Equity Act ({STATUTE}).",
            "",
            "REPORT DETAILS",
            f"Reporting Year: {report.report_year}",
            f"Case Number: {report.case_number}",
            f"Case Description: {report.case_description}",
            f"Submission Date: {submitted}",
            "Compliance Status: In Compliance",
            "",
            f"Approved by: {self.signatory}",
            f"Issued: {datetime.now(timezone.utc):%m/%d/%Y}",
        ]
        return "\n".join(lines)

    async def render(self, report: Report, jurisdiction: Jurisdiction) -> CertificateArtifact:
        text = self.render_text(report, jurisdiction)
        encoded = base64.b64encode(text.encode("utf-8")).decode("ascii")
        return CertificateArtifact(
            data=f"data:{self.content_type};base64,{encoded}",
            file_name=certificate_file_name(jurisdiction.name, report.report_year),
            content_type=self.content_type,
        )
