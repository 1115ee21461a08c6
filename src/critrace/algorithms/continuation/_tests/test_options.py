import pytest

from critrace.algorithms.continuation import ContinuationOptions
from critrace.algorithms.types.exceptions import InvalidInputError


def test_defaults():
    opts = ContinuationOptions()
    assert opts.abs_err == 1e-6
    assert opts.rel_err == 1e-6
    assert opts.init_dt == 10.0
    assert opts.max_dt == 1e10
    assert opts.T_tol == 1e-6
    assert opts.init_c == 1.0
    assert opts.small_T_count == 5
    assert opts.integration_order == 5
    assert opts.max_step_count == 1000
    assert opts.skip_dircheck_count == 1
    assert opts.polish is False
    assert opts.min_dt == 1e-12
    assert opts.verbose is False


@pytest.mark.parametrize(
    "kwargs",
    [
        {"abs_err": 0.0},
        {"rel_err": -1.0},
        {"init_dt": 0.0},
        {"max_dt": -1.0},
        {"min_dt": 0.0},
        {"min_dt": 100.0},
        {"T_tol": -1e-3},
        {"init_c": 0.5},
        {"small_T_count": -1},
        {"max_step_count": -1},
        {"skip_dircheck_count": -2},
    ],
)
def test_invalid_values(kwargs):
    with pytest.raises(ValueError):
        ContinuationOptions(**kwargs)


def test_invalid_integration_order():
    with pytest.raises(InvalidInputError, match="integration order is invalid"):
        ContinuationOptions(integration_order=3)


def test_options_are_frozen():
    opts = ContinuationOptions()
    with pytest.raises(Exception):
        opts.init_dt = 1.0
