"""Biostatistics toolkit: t-test, chi-square and diagnostic-accuracy sample size."""

from research_assistant.biostats.metrics import (
    ChiSquareResult,
    Descriptives,
    TTestResult,
    TwoByTwoTable,
    chi_square_two_by_two,
    cohens_d,
    describe,
    is_chi_square_significant,
    parse_sample_vector,
    unpaired_t_test,
)
from research_assistant.biostats.sample_size import SampleSizeInputs, estimate_sample_size

__all__ = [
    "ChiSquareResult",
    "Descriptives",
    "TTestResult",
    "TwoByTwoTable",
    "chi_square_two_by_two",
    "cohens_d",
    "describe",
    "is_chi_square_significant",
    "parse_sample_vector",
    "unpaired_t_test",
    "SampleSizeInputs",
    "estimate_sample_size",
]
