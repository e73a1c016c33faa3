"""Predicted pay line: least-squares fit of maximum monthly salary on job points."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Sequence

from pay_equity_engine.analysis.classification import dominance
from pay_equity_engine.analysis.types import Dominance, JobData

CENTS = Decimal("0.01")


@dataclass(frozen=True)
class PayLine:
    """A fitted line ``pay = slope * points + intercept``."""

    slope: Decimal
    intercept: Decimal

    def predict(self, points: int | Decimal) -> Decimal:
        return self.slope * Decimal(points) + self.intercept


@dataclass(frozen=True)
class RegressionResult:
    """Pay line over all valid job classes, with fit quality and plot bounds."""

    line: PayLine
    r_squared: Decimal
    min_points: int
    max_points: int
    min_predicted_pay: Decimal
    max_predicted_pay: Decimal
    sample_size: int


@dataclass(frozen=True)
class JobWithPredictedPay:
    """A job class annotated with its predicted pay."""

    job: JobData
    predicted_pay: Decimal
    pay_difference: Decimal
    category: Dominance


def fit_pay_line(samples: Sequence[tuple[int | Decimal, Decimal]]) -> PayLine:
    """Fit ``pay`` on ``points`` by ordinary least squares.

    With a single sample, or when every sample has the same points, the
    line is flat at the mean pay.
    """
    if not samples:
        raise ValueError("Cannot fit a pay line without samples")

    n = Decimal(len(samples))
    xs = [Decimal(x) for x, _ in samples]
    ys = [Decimal(y) for _, y in samples]
    mean_x = sum(xs) / n
    mean_y = sum(ys) / n

    sxx = sum((x - mean_x) ** 2 for x in xs)
    if sxx == 0:
        return PayLine(slope=Decimal("0"), intercept=mean_y)

    sxy = sum((x - mean_x) * (y - mean_y) for x, y in zip(xs, ys))
    slope = sxy / sxx
    return PayLine(slope=slope, intercept=mean_y - slope * mean_x)


def calculate_regression(jobs: Iterable[JobData]) -> RegressionResult | None:
    """Fit the pay line over every job with positive points and salary.

    Returns None when no job qualifies.
    """
    valid = [job for job in jobs if job.points > 0 and job.max_salary > 0]
    if not valid:
        return None

    samples = [(job.points, Decimal(job.max_salary)) for job in valid]
    line = fit_pay_line(samples)

    mean_y = sum(y for _, y in samples) / Decimal(len(samples))
    ss_residual = sum((y - line.predict(x)) ** 2 for x, y in samples)
    ss_total = sum((y - mean_y) ** 2 for _, y in samples)
    r_squared = Decimal("1") - ss_residual / ss_total if ss_total else Decimal("1")

    min_points = min(job.points for job in valid)
    max_points = max(job.points for job in valid)

    return RegressionResult(
        line=line,
        r_squared=r_squared.quantize(Decimal("0.0001"), rounding=ROUND_HALF_UP),
        min_points=min_points,
        max_points=max_points,
        min_predicted_pay=line.predict(min_points).quantize(CENTS, rounding=ROUND_HALF_UP),
        max_predicted_pay=line.predict(max_points).quantize(CENTS, rounding=ROUND_HALF_UP),
        sample_size=len(valid),
    )


def enrich_jobs_with_predicted_pay(jobs: Sequence[JobData]) -> list[JobWithPredictedPay]:
    """Annotate every job with predicted pay from the all-jobs regression."""
    regression = calculate_regression(jobs)
    enriched = []
    for job in jobs:
        if regression is None:
            predicted = Decimal("0")
        else:
            predicted = regression.line.predict(job.points).quantize(
                CENTS, rounding=ROUND_HALF_UP
            )
        enriched.append(
            JobWithPredictedPay(
                job=job,
                predicted_pay=predicted,
                pay_difference=Decimal(job.max_salary) - predicted,
                category=dominance(job),
            )
        )
    return enriched
