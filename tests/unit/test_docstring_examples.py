"""
Docstring examples of the calculators run as written

Every ``>>>`` example in these modules must be self-contained: it may only
use names the module itself defines or imports, or that the example imports.
"""

import doctest

import pytest

from src.benchmark import analyzer
from src.core.math import decimal_helpers, decimal_math
from src.portfolio import cost_basis, performance


@pytest.mark.parametrize(
    "module",
    [decimal_helpers, decimal_math, cost_basis, performance, analyzer],
    ids=lambda m: m.__name__,
)
def test_examples_pass(module):
    results = doctest.testmod(module, verbose=False, report=False)

    assert results.attempted > 0
    assert results.failed == 0
