"""Gender-dominance classification of job classes."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from pay_equity_engine.analysis.types import Dominance, ExceptionalServiceCode, JobData
from pay_equity_engine.errors import InvalidClassification

# A class is dominated by a gender when at least this share of incumbents hold it
DOMINANCE_THRESHOLD = Decimal("0.70")

VALID_ESP_CODES = frozenset(code.value for code in ExceptionalServiceCode)


def dominance(job: JobData) -> Dominance:
    """Classify a job class as male-dominated, female-dominated or balanced."""
    if job.male_count == 0 and job.female_count == 0:
        raise InvalidClassification(
            [f"Job {job.job_number} ({job.title}): male and female counts are both zero"]
        )

    total = job.male_count + job.female_count
    male_share = Decimal(job.male_count) / Decimal(total)
    female_share = Decimal(job.female_count) / Decimal(total)

    if male_share >= DOMINANCE_THRESHOLD:
        return Dominance.MALE
    if female_share >= DOMINANCE_THRESHOLD:
        return Dominance.FEMALE
    return Dominance.BALANCED


def male_dominated_count(jobs: Iterable[JobData]) -> int:
    return sum(1 for job in jobs if dominance(job) == Dominance.MALE)


def female_dominated_count(jobs: Iterable[JobData]) -> int:
    return sum(1 for job in jobs if dominance(job) == Dominance.FEMALE)


def has_exceptional_service_pay(job: JobData) -> bool:
    code = job.exceptional_service_code
    return code is not None and code.strip() != ""


def validate_job(job: JobData) -> list[str]:
    """Return the problems with a job class (empty if valid)."""
    label = f"Job {job.job_number} ({job.title})"
    problems: list[str] = []

    if job.points is None or job.points <= 0:
        problems.append(f"{label}: points must be a positive integer")
    if job.male_count < 0 or job.female_count < 0:
        problems.append(f"{label}: headcounts cannot be negative")
    elif job.male_count == 0 and job.female_count == 0:
        problems.append(f"{label}: male and female counts are both zero")
    if job.max_salary < job.min_salary:
        problems.append(f"{label}: maximum salary is below minimum salary")
    if job.years_to_max is not None and job.years_to_max < 0:
        problems.append(f"{label}: years to maximum cannot be negative")
    if job.years_service_pay is not None and job.years_service_pay < 0:
        problems.append(f"{label}: years of service pay cannot be negative")
    if has_exceptional_service_pay(job) and job.exceptional_service_code not in VALID_ESP_CODES:
        problems.append(
            f"{label}: unknown exceptional service code '{job.exceptional_service_code}'"
        )

    return problems


def validate_jobs(jobs: Iterable[JobData]) -> None:
    """Raise InvalidClassification listing every problem in a job set."""
    problems: list[str] = []
    seen_numbers: set[int] = set()
    for job in jobs:
        problems.extend(validate_job(job))
        if job.job_number in seen_numbers:
            problems.append(f"Job number {job.job_number} appears more than once")
        seen_numbers.add(job.job_number)
    if problems:
        raise InvalidClassification(problems)
