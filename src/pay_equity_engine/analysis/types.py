"""Type definitions for the compliance analysis pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Protocol, Union


class Dominance(str, Enum):
    """Gender dominance category of a job class."""

    MALE = "male-dominated"
    FEMALE = "female-dominated"
    BALANCED = "balanced"


class ExceptionalServiceCode(str, Enum):
    """Recognized exceptional service pay categories."""

    LONGEVITY = "longevity"
    PERFORMANCE = "performance"
    CERTIFICATION = "certification"
    EDUCATION = "education"
    OTHER = "other"


class JobData(Protocol):
    """Attributes the analyzer reads from a job class.

    Satisfied by both ``JobRecord`` and the ``JobClassification`` ORM model.
    """

    job_number: int
    title: str
    points: int
    male_count: int
    female_count: int
    min_salary: Decimal
    max_salary: Decimal
    years_to_max: Decimal
    years_service_pay: Decimal | None
    exceptional_service_code: str | None


@dataclass(frozen=True)
class JobRecord:
    """Detached job class values."""

    job_number: int
    title: str
    points: int
    male_count: int
    female_count: int
    min_salary: Decimal
    max_salary: Decimal
    years_to_max: Decimal = Decimal("0")
    years_service_pay: Decimal | None = None
    exceptional_service_code: str | None = None

    @classmethod
    def from_job(cls, job: JobData) -> JobRecord:
        return cls(
            job_number=job.job_number,
            title=job.title,
            points=job.points,
            male_count=job.male_count,
            female_count=job.female_count,
            min_salary=Decimal(job.min_salary),
            max_salary=Decimal(job.max_salary),
            years_to_max=Decimal(job.years_to_max or 0),
            years_service_pay=(
                Decimal(job.years_service_pay) if job.years_service_pay is not None else None
            ),
            exceptional_service_code=job.exceptional_service_code,
        )


@dataclass(frozen=True)
class Evaluated:
    """A conditional test that applied and produced a ratio."""

    ratio: Decimal
    passed: bool
    threshold: Decimal
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def applicable(self) -> bool:
        return True


@dataclass(frozen=True)
class NotApplicable:
    """A conditional test that did not apply to this job set."""

    reason: str

    @property
    def applicable(self) -> bool:
        return False


TestOutcome = Union[Evaluated, NotApplicable]


def is_satisfied(outcome: TestOutcome) -> bool:
    """A conditional test is satisfied when it passed or did not apply."""
    if isinstance(outcome, NotApplicable):
        return True
    return outcome.passed


@dataclass(frozen=True)
class TTestResult:
    """Welch t-test of male vs female residuals from the predicted pay line."""

    t_value: Decimal | None
    degrees_of_freedom: int
    critical_value: Decimal | None
    significant: bool

    @property
    def computable(self) -> bool:
        return self.t_value is not None


@dataclass(frozen=True)
class StatisticalTestResult:
    """Underpayment ratio test outcome."""

    ratio: Decimal | None
    passed: bool
    threshold: Decimal
    slope: Decimal
    intercept: Decimal
    male_classes: int
    female_classes: int
    female_classes_evaluated: int
    male_classes_below_predicted: int
    female_classes_below_predicted: int
    avg_diff_male: Decimal
    avg_diff_female: Decimal
    t_test: TTestResult
    reason: str | None = None


@dataclass(frozen=True)
class GeneralInfo:
    """Headcount and pay summary by dominance category."""

    male_classes: int
    female_classes: int
    balanced_classes: int
    total_classes: int
    male_employees: int
    female_employees: int
    balanced_employees: int
    total_employees: int
    avg_max_pay_male: Decimal
    avg_max_pay_female: Decimal
    avg_max_pay_balanced: Decimal
    avg_max_pay_all: Decimal


@dataclass(frozen=True)
class ComplianceResult:
    """Outcome of one compliance analysis run."""

    statistical_test: StatisticalTestResult
    salary_range_test: TestOutcome
    esp_test: TestOutcome
    requires_manual_review: bool
    is_compliant: bool
    general_info: GeneralInfo

    @property
    def total_jobs(self) -> int:
        return self.general_info.total_classes

    @property
    def message(self) -> str:
        if self.requires_manual_review:
            return (
                "Your jurisdiction has three or fewer male classes. "
                "Alternative Analysis (manual review) is required."
            )
        if self.is_compliant:
            return "Your jurisdiction is in compliance with pay equity requirements."
        return (
            "Your jurisdiction is out of compliance. "
            "Please review the test results below."
        )

    def failed_tests(self) -> list[str]:
        """Names of the tests that did not pass."""
        failed = []
        if not self.statistical_test.passed:
            failed.append("statistical")
        if not is_satisfied(self.salary_range_test):
            failed.append("salary_range")
        if not is_satisfied(self.esp_test):
            failed.append("exceptional_service_pay")
        return failed

    def test_results_snapshot(self) -> dict[str, Any]:
        """JSON-ready results stored on the report."""
        stat = self.statistical_test
        return _jsonable({
            "statistical": {
                "ratio": stat.ratio,
                "passed": stat.passed,
                "threshold": stat.threshold,
                "slope": stat.slope,
                "intercept": stat.intercept,
                "male_classes": stat.male_classes,
                "female_classes": stat.female_classes,
                "female_classes_evaluated": stat.female_classes_evaluated,
                "male_classes_below_predicted": stat.male_classes_below_predicted,
                "female_classes_below_predicted": stat.female_classes_below_predicted,
                "avg_diff_male": stat.avg_diff_male,
                "avg_diff_female": stat.avg_diff_female,
                "t_value": stat.t_test.t_value,
                "degrees_of_freedom": stat.t_test.degrees_of_freedom,
                "critical_value": stat.t_test.critical_value,
                "significant": stat.t_test.significant,
            },
            "salary_range": _outcome_results(self.salary_range_test),
            "exceptional_service_pay": _outcome_results(self.esp_test),
            "requires_manual_review": self.requires_manual_review,
            "is_compliant": self.is_compliant,
            "general_info": asdict(self.general_info),
        })

    def test_applicability_snapshot(self) -> dict[str, Any]:
        """Which conditional tests applied, with the reason when they did not."""
        return {
            "statistical": {"applicable": True, "reason": self.statistical_test.reason},
            "salary_range": _outcome_applicability(self.salary_range_test),
            "exceptional_service_pay": _outcome_applicability(self.esp_test),
        }


def _outcome_results(outcome: TestOutcome) -> dict[str, Any] | None:
    if isinstance(outcome, NotApplicable):
        return None
    return {
        "ratio": outcome.ratio,
        "passed": outcome.passed,
        "threshold": outcome.threshold,
        **outcome.details,
    }


def _outcome_applicability(outcome: TestOutcome) -> dict[str, Any]:
    if isinstance(outcome, NotApplicable):
        return {"applicable": False, "reason": outcome.reason}
    return {"applicable": True, "reason": None}


def _jsonable(obj: Any) -> Any:
    """Recursively convert Decimals to strings for JSON storage."""
    if isinstance(obj, dict):
        return {k: _jsonable(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_jsonable(v) for v in obj]
    elif isinstance(obj, Decimal):
        return str(obj)
    return obj
