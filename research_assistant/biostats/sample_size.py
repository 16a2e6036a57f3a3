"""
Sample size for a diagnostic-accuracy study.

Estimates how many subjects are needed to measure a test's sensitivity with a
given precision, scaled up by disease prevalence so that enough diseased
subjects are enrolled:

    n = Z^2 * Sn * (1 - Sn) / (d^2 * P)

with Z = 1.96 (95% confidence). All inputs are percentages.
"""

import logging
import math
from dataclasses import dataclass

from research_assistant.errors import ValidationError

logger = logging.getLogger(__name__)

Z_95 = 1.96


@dataclass(frozen=True)
class SampleSizeInputs:
    sensitivity: float
    margin_of_error: float
    prevalence: float

    def validate(self) -> None:
        """
        Check every input is in range.

        Raises:
            ValidationError: On any out-of-range or non-finite value
        """
        for name in ("sensitivity", "margin_of_error", "prevalence"):
            value = getattr(self, name)
            if value is None or not math.isfinite(value):
                raise ValidationError(f"{name} must be a finite number, got {value!r}")

        if not 0 < self.prevalence < 100:
            raise ValidationError(f"Prevalence must be between 0 and 100 (exclusive), got {self.prevalence}")
        if not 0 < self.margin_of_error <= 100:
            raise ValidationError(f"Margin of error must be greater than 0 and at most 100, got {self.margin_of_error}")
        if not 0 <= self.sensitivity <= 100:
            raise ValidationError(f"Sensitivity must be between 0 and 100, got {self.sensitivity}")


def estimate_sample_size(inputs: SampleSizeInputs) -> int:
    """
    Required sample size, rounded up to a whole subject.

    Args:
        inputs: Expected sensitivity, margin of error and prevalence, in percent

    Returns:
        Required number of subjects. A sensitivity of exactly 0% or 100% makes
        the variance term vanish and yields 0.

    Raises:
        ValidationError: If an input is out of range
    """
    inputs.validate()

    sens = inputs.sensitivity / 100
    d = inputs.margin_of_error / 100
    prev = inputs.prevalence / 100

    variance_term = sens * (1 - sens)
    if variance_term == 0:
        logger.warning(
            f"Sensitivity of {inputs.sensitivity}% has no sampling variance; required sample size is 0"
        )
        return 0

    denominator = d * d * prev
    if denominator <= 0:
        raise ValidationError(
            f"Margin of error {inputs.margin_of_error}% and prevalence {inputs.prevalence}% are too small to estimate a sample size"
        )
    size = (Z_95 * Z_95 * variance_term) / denominator
    if not math.isfinite(size):
        raise ValidationError(f"Inputs are out of range: required sample size is not finite ({size})")
    return math.ceil(size)
