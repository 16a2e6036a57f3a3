"""
Hypothesis-testing statistics for the biostatistics toolkit.

Inputs are the raw values a user types into the calculators: comma-separated
numbers for the two-sample t-test and four counts for a 2x2 contingency
table. Everything here is pure and synchronous.
"""

import logging
import math
import numbers
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from research_assistant.errors import ValidationError

logger = logging.getLogger(__name__)

# Critical chi-square value at p = 0.05 with 1 degree of freedom
CHI_SQUARE_CRITICAL_1DF = 3.84

T_TEST_NOTE = (
    "P-value calculation is not performed. Use statistical software for a precise p-value. "
    "A larger absolute t-value suggests stronger evidence against equal means."
)

# Leading numeric prefix, the same portion a browser's parseFloat consumes
_NUMBER_PREFIX = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


@dataclass(frozen=True)
class Descriptives:
    mean: float
    variance: float
    n: int


@dataclass(frozen=True)
class TTestResult:
    """Pooled-variance unpaired t-test outcome."""

    statistic: float
    degrees_of_freedom: int
    mean_difference: float
    note: str = T_TEST_NOTE


@dataclass(frozen=True)
class TwoByTwoTable:
    """
    Contingency table with two groups (rows) and two outcomes (columns).

        a | b
        --+--
        c | d
    """

    a: int
    b: int
    c: int
    d: int

    @property
    def counts(self) -> Tuple[int, int, int, int]:
        return (self.a, self.b, self.c, self.d)

    @property
    def total(self) -> int:
        return self.a + self.b + self.c + self.d

    @property
    def row_totals(self) -> Tuple[int, int]:
        return (self.a + self.b, self.c + self.d)

    @property
    def column_totals(self) -> Tuple[int, int]:
        return (self.a + self.c, self.b + self.d)

    def expected(self) -> Tuple[float, float, float, float]:
        """Expected cell counts under independence, in a, b, c, d order."""
        total = self.total
        if total == 0:
            return (0.0, 0.0, 0.0, 0.0)
        row1, row2 = self.row_totals
        col1, col2 = self.column_totals
        return (
            row1 * col1 / total,
            row1 * col2 / total,
            row2 * col1 / total,
            row2 * col2 / total,
        )


@dataclass(frozen=True)
class ChiSquareResult:
    statistic: float
    significant: bool
    expected: Tuple[float, float, float, float]

    @property
    def interpretation(self) -> str:
        if self.significant:
            return (
                "Result is statistically significant at p < 0.05 "
                f"(since Chi-Square > {CHI_SQUARE_CRITICAL_1DF} for 1 df)."
            )
        return (
            "Result is not statistically significant at p < 0.05 "
            f"(since Chi-Square <= {CHI_SQUARE_CRITICAL_1DF} for 1 df)."
        )


def parse_sample_vector(text: Optional[str]) -> List[float]:
    """
    Parse a comma-separated list of numbers typed into a calculator field.

    Each token is trimmed and its leading numeric prefix is read ("3.5kg"
    becomes 3.5). Tokens without a numeric prefix, and non-finite values,
    are dropped silently; the caller inspects the resulting length.

    Args:
        text: Raw field content, e.g. "2.9, 3.0, 3.1"

    Returns:
        List of finite floats (possibly empty)
    """
    if not text:
        return []

    values = []
    for token in str(text).split(","):
        match = _NUMBER_PREFIX.match(token.strip())
        if not match:
            continue
        value = float(match.group())
        if math.isfinite(value):
            values.append(value)
    return values


def describe(values: Sequence[float]) -> Descriptives:
    """
    Mean and sample variance (n - 1 denominator).

    An empty vector gives Descriptives(0.0, 0.0, 0). A single value has no
    sample variance; 0.0 is returned and callers must guard n - 1 == 0.
    """
    n = len(values)
    if n == 0:
        return Descriptives(mean=0.0, variance=0.0, n=0)
    data = np.asarray(values, dtype=float)
    mean = float(np.mean(data))
    variance = float(np.var(data, ddof=1)) if n > 1 else 0.0
    return Descriptives(mean=mean, variance=variance, n=n)


def _pooled_variance(first: Descriptives, second: Descriptives) -> float:
    return ((first.n - 1) * first.variance + (second.n - 1) * second.variance) / (first.n + second.n - 2)


def unpaired_t_test(group_a: Sequence[float], group_b: Sequence[float]) -> TTestResult:
    """
    Two-sample t-test assuming equal variances.

    Args:
        group_a: Values of the first group (at least 2)
        group_b: Values of the second group (at least 2)

    Returns:
        TTestResult with t = (mean_a - mean_b) / SE and df = n_a + n_b - 2

    Raises:
        ValidationError: If either group has fewer than 2 values, both groups
            have zero variance, or the values are too large for a finite t
    """
    if len(group_a) < 2 or len(group_b) < 2:
        raise ValidationError("insufficient data: both groups must have at least 2 valid numbers")

    stats_a = describe(group_a)
    stats_b = describe(group_b)

    pooled = _pooled_variance(stats_a, stats_b)
    se = math.sqrt(pooled * (1.0 / stats_a.n + 1.0 / stats_b.n)) if math.isfinite(pooled) else math.nan
    if not math.isfinite(se):
        raise ValidationError("t-statistic is undefined: values are too large to compute a finite variance")
    if se == 0:
        raise ValidationError("t-statistic is undefined: both groups have zero variance")

    diff = stats_a.mean - stats_b.mean
    statistic = diff / se
    if not (math.isfinite(diff) and math.isfinite(statistic)):
        raise ValidationError("t-statistic is undefined: values are too large to compute a finite result")
    return TTestResult(
        statistic=statistic,
        degrees_of_freedom=stats_a.n + stats_b.n - 2,
        mean_difference=diff,
    )


def cohens_d(group_a: Sequence[float], group_b: Sequence[float]) -> float:
    """
    Cohen's d effect size using the pooled standard deviation.

    Returns 0.0 when the pooled SD is zero.
    """
    if len(group_a) < 2 or len(group_b) < 2:
        raise ValidationError("insufficient data: both groups must have at least 2 valid numbers")
    stats_a = describe(group_a)
    stats_b = describe(group_b)
    pooled_sd = math.sqrt(_pooled_variance(stats_a, stats_b))
    effect = (stats_a.mean - stats_b.mean) / pooled_sd if pooled_sd > 0 else 0.0
    if not math.isfinite(pooled_sd) or not math.isfinite(effect):
        raise ValidationError("effect size is undefined: values are too large to compute a finite result")
    return effect


def is_chi_square_significant(statistic: float) -> bool:
    """Strict comparison against the 1-df critical value: exactly 3.84 is not significant."""
    return statistic > CHI_SQUARE_CRITICAL_1DF


def _as_table(table) -> TwoByTwoTable:
    if isinstance(table, TwoByTwoTable):
        counts = table.counts
    elif isinstance(table, dict):
        if set(table) != {"a", "b", "c", "d"}:
            raise ValidationError(f"a 2x2 table needs exactly the keys a, b, c, d, got {sorted(map(str, table))}")
        counts = (table["a"], table["b"], table["c"], table["d"])
    else:
        try:
            counts = tuple(table)
        except TypeError:
            raise ValidationError(f"a 2x2 table needs 4 counts, got {type(table).__name__}")
        if len(counts) != 4:
            raise ValidationError(f"a 2x2 table needs exactly 4 counts, got {len(counts)}")

    for count in counts:
        # bool is an Integral subclass but never a count
        if isinstance(count, bool) or not isinstance(count, numbers.Integral):
            raise ValidationError(f"contingency table counts must be integers, got {count!r}")
    return TwoByTwoTable(*(int(count) for count in counts))


def chi_square_two_by_two(table) -> Optional[ChiSquareResult]:
    """
    Pearson chi-square test of independence for a 2x2 table.

    Args:
        table: TwoByTwoTable, a mapping with keys a/b/c/d, or a 4-sequence

    Returns:
        ChiSquareResult, or None when the statistic is undefined (zero total
        or any expected cell equal to zero)

    Raises:
        ValidationError: If the table does not hold exactly four non-negative
            integer counts
    """
    table = _as_table(table)
    if any(count < 0 for count in table.counts):
        raise ValidationError(f"contingency table counts must be non-negative, got {table.counts}")

    if table.total == 0:
        logger.debug("Chi-square undefined: table total is zero")
        return None

    expected = table.expected()
    if any(e == 0 for e in expected):
        logger.debug(f"Chi-square undefined: zero expected cell in {expected}")
        return None

    observed = np.asarray(table.counts, dtype=float)
    exp = np.asarray(expected, dtype=float)
    statistic = float(np.sum((observed - exp) ** 2 / exp))

    return ChiSquareResult(
        statistic=statistic,
        significant=is_chi_square_significant(statistic),
        expected=expected,
    )


def format_t_test(result: TTestResult) -> str:
    return "\n".join([
        f"T-statistic: {result.statistic:.4f}",
        f"Degrees of Freedom (df): {result.degrees_of_freedom}",
        result.note,
    ])


def format_chi_square(result: Optional[ChiSquareResult]) -> str:
    if result is None:
        return "Chi-Square cannot be computed: a row or column of the table is empty."
    return "\n".join([
        f"Chi-Square Value: {result.statistic:.4f}",
        result.interpretation,
    ])


def parse_counts(values: Iterable[str]) -> TwoByTwoTable:
    """Parse four integer counts typed by the user (a, b, c, d)."""
    parsed = []
    for raw in values:
        try:
            parsed.append(int(str(raw).strip()))
        except ValueError:
            raise ValidationError(f"contingency table counts must be integers, got {raw!r}")
    if len(parsed) != 4:
        raise ValidationError(f"a 2x2 table needs exactly 4 counts, got {len(parsed)}")
    return TwoByTwoTable(*parsed)
