"""Compliance analyzer: the three statutory tests and the aggregate verdict."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from pay_equity_engine.analysis.classification import (
    dominance,
    has_exceptional_service_pay,
    validate_jobs,
)
from pay_equity_engine.analysis.predicted_pay import PayLine, fit_pay_line
from pay_equity_engine.analysis.t_distribution import critical_value
from pay_equity_engine.analysis.types import (
    ComplianceResult,
    Dominance,
    Evaluated,
    GeneralInfo,
    JobData,
    NotApplicable,
    StatisticalTestResult,
    TestOutcome,
    TTestResult,
    is_satisfied,
)
from pay_equity_engine.errors import InsufficientData

HUNDRED = Decimal("100")
RATIO_PLACES = Decimal("0.01")
T_PLACES = Decimal("0.0001")


def _quantize(value: Decimal, places: Decimal = RATIO_PLACES) -> Decimal:
    return value.quantize(places, rounding=ROUND_HALF_UP)


def _mean(values: Sequence[Decimal]) -> Decimal:
    if not values:
        return Decimal("0")
    return sum(values, Decimal("0")) / Decimal(len(values))


def _sample_variance(values: Sequence[Decimal], mean: Decimal) -> Decimal:
    return sum(((v - mean) ** 2 for v in values), Decimal("0")) / Decimal(len(values) - 1)


class ComplianceAnalyzer:
    """Runs the pay equity tests over one report's job classes.

    Tests:
    1) Statistical (underpayment ratio) against a male-class pay line
    2) Salary range (years to reach maximum salary)
    3) Exceptional service pay distribution
    plus the manual-review gate on the number of male-dominated classes.
    """

    UNDERPAYMENT_THRESHOLD = Decimal("80")
    SALARY_RANGE_THRESHOLD = Decimal("80")
    ESP_THRESHOLD = Decimal("80")
    # ESP test applies only above this share of male classes receiving ESP
    ESP_MALE_MIN_PERCENT = Decimal("20")
    # At or below this many male classes, Alternative Analysis is required
    MANUAL_REVIEW_MAX_MALE_CLASSES = 3

    def analyze(self, jobs: Sequence[JobData]) -> ComplianceResult:
        """Analyze a report's job classes.

        Raises:
            InsufficientData: If there are no job classes.
            InvalidClassification: If any job class is malformed.
        """
        if not jobs:
            raise InsufficientData("No job classifications to analyze")
        validate_jobs(jobs)

        male_jobs: list[JobData] = []
        female_jobs: list[JobData] = []
        balanced_jobs: list[JobData] = []
        for job in jobs:
            category = dominance(job)
            if category == Dominance.MALE:
                male_jobs.append(job)
            elif category == Dominance.FEMALE:
                female_jobs.append(job)
            else:
                balanced_jobs.append(job)

        requires_manual_review = len(male_jobs) <= self.MANUAL_REVIEW_MAX_MALE_CLASSES

        statistical_test = self.statistical_test(male_jobs, female_jobs)
        salary_range_test = self.salary_range_test(male_jobs, female_jobs)
        esp_test = self.exceptional_service_test(jobs, male_jobs, female_jobs)

        is_compliant = (
            not requires_manual_review
            and statistical_test.passed
            and is_satisfied(salary_range_test)
            and is_satisfied(esp_test)
        )

        return ComplianceResult(
            statistical_test=statistical_test,
            salary_range_test=salary_range_test,
            esp_test=esp_test,
            requires_manual_review=requires_manual_review,
            is_compliant=is_compliant,
            general_info=self._general_info(male_jobs, female_jobs, balanced_jobs, jobs),
        )

    def statistical_test(
        self,
        male_jobs: Sequence[JobData],
        female_jobs: Sequence[JobData],
    ) -> StatisticalTestResult:
        """Underpayment ratio of female classes against the male pay line.

        Each female class with a positive predicted pay contributes
        actual / predicted * 100; the ratio is the mean of those values.
        A ratio under the threshold still passes when the t-test could be
        computed and the male/female gap is not statistically significant.
        """
        if not male_jobs:
            return self._empty_statistical_test(
                male_jobs, female_jobs, passed=False,
                reason="No male-dominated classes to build a predicted pay line",
            )

        line = fit_pay_line([(job.points, Decimal(job.max_salary)) for job in male_jobs])

        if not female_jobs:
            return self._empty_statistical_test(
                male_jobs, female_jobs, passed=True,
                reason="No female-dominated classes to compare", line=line,
            )

        male_diffs = [Decimal(job.max_salary) - line.predict(job.points) for job in male_jobs]
        female_diffs = [Decimal(job.max_salary) - line.predict(job.points) for job in female_jobs]

        class_ratios = []
        for job in female_jobs:
            predicted = line.predict(job.points)
            if predicted > 0:
                class_ratios.append(Decimal(job.max_salary) / predicted * HUNDRED)

        t_test = self._t_test(male_diffs, female_diffs)

        if class_ratios:
            ratio = _quantize(_mean(class_ratios))
            passed = ratio >= self.UNDERPAYMENT_THRESHOLD or (
                t_test.computable and not t_test.significant
            )
            reason = None
        else:
            ratio = None
            passed = False
            reason = "Predicted pay is not positive for any female-dominated class"

        return StatisticalTestResult(
            ratio=ratio,
            passed=passed,
            threshold=self.UNDERPAYMENT_THRESHOLD,
            slope=_quantize(line.slope, T_PLACES),
            intercept=_quantize(line.intercept),
            male_classes=len(male_jobs),
            female_classes=len(female_jobs),
            female_classes_evaluated=len(class_ratios),
            male_classes_below_predicted=sum(1 for d in male_diffs if d < 0),
            female_classes_below_predicted=sum(1 for d in female_diffs if d < 0),
            avg_diff_male=_quantize(_mean(male_diffs)),
            avg_diff_female=_quantize(_mean(female_diffs)),
            t_test=t_test,
            reason=reason,
        )

    def salary_range_test(
        self,
        male_jobs: Sequence[JobData],
        female_jobs: Sequence[JobData],
    ) -> TestOutcome:
        """Average years to maximum: male average / female average * 100."""
        if not male_jobs or not female_jobs:
            return NotApplicable("Requires both male-dominated and female-dominated classes")

        male_average = _mean([Decimal(job.years_to_max or 0) for job in male_jobs])
        female_average = _mean([Decimal(job.years_to_max or 0) for job in female_jobs])

        if male_average == 0 or female_average == 0:
            return NotApplicable("No years to maximum salary reported for one or both groups")

        ratio = _quantize(male_average / female_average * HUNDRED)
        return Evaluated(
            ratio=ratio,
            passed=ratio >= self.SALARY_RANGE_THRESHOLD,
            threshold=self.SALARY_RANGE_THRESHOLD,
            details={
                "male_average": _quantize(male_average),
                "female_average": _quantize(female_average),
            },
        )

    def exceptional_service_test(
        self,
        jobs: Sequence[JobData],
        male_jobs: Sequence[JobData],
        female_jobs: Sequence[JobData],
    ) -> TestOutcome:
        """Share of female classes with ESP relative to male classes * 100."""
        if not any(has_exceptional_service_pay(job) for job in jobs):
            return NotApplicable("No exceptional service pay reported")
        if not male_jobs or not female_jobs:
            return NotApplicable("Requires both male-dominated and female-dominated classes")

        male_with_esp = sum(1 for job in male_jobs if has_exceptional_service_pay(job))
        female_with_esp = sum(1 for job in female_jobs if has_exceptional_service_pay(job))
        male_percentage = Decimal(male_with_esp) / Decimal(len(male_jobs)) * HUNDRED
        female_percentage = Decimal(female_with_esp) / Decimal(len(female_jobs)) * HUNDRED

        if male_percentage <= self.ESP_MALE_MIN_PERCENT:
            return NotApplicable(
                f"{self.ESP_MALE_MIN_PERCENT}% or fewer of male-dominated classes "
                "receive exceptional service pay"
            )

        ratio = _quantize(female_percentage / male_percentage * HUNDRED)
        return Evaluated(
            ratio=ratio,
            passed=ratio >= self.ESP_THRESHOLD,
            threshold=self.ESP_THRESHOLD,
            details={
                "male_percentage": _quantize(male_percentage),
                "female_percentage": _quantize(female_percentage),
            },
        )

    def _t_test(
        self,
        male_diffs: Sequence[Decimal],
        female_diffs: Sequence[Decimal],
    ) -> TTestResult:
        """Welch t statistic of mean male residual minus mean female residual."""
        df = len(male_diffs) + len(female_diffs) - 2
        if len(male_diffs) < 2 or len(female_diffs) < 2 or df < 1:
            return TTestResult(t_value=None, degrees_of_freedom=max(df, 0),
                               critical_value=None, significant=False)

        mean_male = _mean(male_diffs)
        mean_female = _mean(female_diffs)
        standard_error = (
            _sample_variance(male_diffs, mean_male) / Decimal(len(male_diffs))
            + _sample_variance(female_diffs, mean_female) / Decimal(len(female_diffs))
        ).sqrt()
        critical = critical_value(df)

        if standard_error == 0:
            return TTestResult(t_value=None, degrees_of_freedom=df,
                               critical_value=critical, significant=False)

        t_value = _quantize((mean_male - mean_female) / standard_error, T_PLACES)
        return TTestResult(
            t_value=t_value,
            degrees_of_freedom=df,
            critical_value=critical,
            significant=abs(t_value) > critical,
        )

    def _empty_statistical_test(
        self,
        male_jobs: Sequence[JobData],
        female_jobs: Sequence[JobData],
        passed: bool,
        reason: str,
        line: PayLine | None = None,
    ) -> StatisticalTestResult:
        return StatisticalTestResult(
            ratio=None,
            passed=passed,
            threshold=self.UNDERPAYMENT_THRESHOLD,
            slope=_quantize(line.slope, T_PLACES) if line else Decimal("0"),
            intercept=_quantize(line.intercept) if line else Decimal("0"),
            male_classes=len(male_jobs),
            female_classes=len(female_jobs),
            female_classes_evaluated=0,
            male_classes_below_predicted=0,
            female_classes_below_predicted=0,
            avg_diff_male=Decimal("0"),
            avg_diff_female=Decimal("0"),
            t_test=TTestResult(t_value=None, degrees_of_freedom=0,
                               critical_value=None, significant=False),
            reason=reason,
        )

    def _general_info(
        self,
        male_jobs: Sequence[JobData],
        female_jobs: Sequence[JobData],
        balanced_jobs: Sequence[JobData],
        all_jobs: Sequence[JobData],
    ) -> GeneralInfo:
        def avg_max_pay(group: Sequence[JobData]) -> Decimal:
            return _quantize(_mean([Decimal(job.max_salary) for job in group]))

        return GeneralInfo(
            male_classes=len(male_jobs),
            female_classes=len(female_jobs),
            balanced_classes=len(balanced_jobs),
            total_classes=len(all_jobs),
            male_employees=sum(job.male_count for job in male_jobs),
            female_employees=sum(job.female_count for job in female_jobs),
            balanced_employees=sum(job.male_count + job.female_count for job in balanced_jobs),
            total_employees=sum(job.male_count + job.female_count for job in all_jobs),
            avg_max_pay_male=avg_max_pay(male_jobs),
            avg_max_pay_female=avg_max_pay(female_jobs),
            avg_max_pay_balanced=avg_max_pay(balanced_jobs),
            avg_max_pay_all=avg_max_pay(all_jobs),
        )


def analyze_compliance(jobs: Sequence[JobData]) -> ComplianceResult:
    """Analyze job classes with the default analyzer."""
    return ComplianceAnalyzer().analyze(jobs)
