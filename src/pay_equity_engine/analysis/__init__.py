"""Compliance analysis: classification, statistical tests and deadlines."""

from pay_equity_engine.analysis.classification import (
    dominance,
    female_dominated_count,
    male_dominated_count,
    validate_job,
)
from pay_equity_engine.analysis.compliance import ComplianceAnalyzer, analyze_compliance
from pay_equity_engine.analysis.deadlines import is_on_time, on_time, submission_deadline
from pay_equity_engine.analysis.predicted_pay import (
    calculate_regression,
    enrich_jobs_with_predicted_pay,
    fit_pay_line,
)
from pay_equity_engine.analysis.types import (
    ComplianceResult,
    Dominance,
    Evaluated,
    ExceptionalServiceCode,
    JobRecord,
    NotApplicable,
)

__all__ = [
    "ComplianceAnalyzer",
    "ComplianceResult",
    "Dominance",
    "Evaluated",
    "ExceptionalServiceCode",
    "JobRecord",
    "NotApplicable",
    "analyze_compliance",
    "calculate_regression",
    "dominance",
    "enrich_jobs_with_predicted_pay",
    "female_dominated_count",
    "fit_pay_line",
    "is_on_time",
    "male_dominated_count",
    "on_time",
    "submission_deadline",
    "validate_job",
]
