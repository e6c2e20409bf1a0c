import math

import numpy as np

from fxrisk.stats import annualize, log_returns, sample_mean, sample_stdev, simple_returns, trailing


def test_sample_mean_and_empty_sentinel():
    assert sample_mean([1.0, 2.0, 3.0]) == 2.0
    assert sample_mean([]) == 0.0


def test_sample_stdev_uses_bessel_correction():
    xs = [2.0, 4.0, 4.0, 4.0, 5.0, 5.0, 7.0, 9.0]
    assert abs(sample_stdev(xs) - float(np.std(xs, ddof=1))) < 1e-12
    assert sample_stdev([1.0]) is None
    assert sample_stdev([]) is None


def test_log_returns_skip_non_positive_pairs():
    rets = log_returns([1.0, 2.0, 0.0, 4.0, 8.0])
    # (2,0) and (0,4) are skipped
    assert len(rets) == 2
    assert abs(rets[0] - math.log(2.0)) < 1e-12
    assert abs(rets[1] - math.log(2.0)) < 1e-12


def test_simple_returns_skip_zero_base():
    rets = simple_returns([1.0, 1.1, 0.0, 2.0])
    assert len(rets) == 2
    assert abs(rets[0] - 0.1) < 1e-12
    assert rets[1] == -1.0


def test_annualize_and_trailing():
    assert abs(annualize(0.01) - 0.01 * math.sqrt(252)) < 1e-15
    assert abs(annualize(0.01, 365) - 0.01 * math.sqrt(365)) < 1e-15
    assert list(trailing([1, 2, 3, 4], 2)) == [3, 4]
    assert list(trailing([1, 2], 10)) == [1, 2]
