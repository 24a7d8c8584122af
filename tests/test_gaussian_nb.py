"""Tests for the shared Gaussian machinery and the Gaussian naive Bayes model."""

import math
import warnings

import numpy as np
import pytest
from scipy.stats import multivariate_normal

from mlzoo.exceptions import (
    InvalidCovariance,
    InvalidProbabilities,
    SingularCovarianceWarning
)
from mlzoo.models import GaussianNB, GaussianParams, log_gaussian_pdf, make_rng
from mlzoo.models.base import DET_FLOOR, log_normal_pdf, points_to_arrays
from mlzoo.models.gaussian_nb import (
    DEFAULT_CLASS_PARAMS,
    cholesky_2x2,
    generate_points
)

# Tolerances
ATOL = 1e-9

IDENTITY = ((1.0, 0.0), (0.0, 1.0))


@pytest.fixture
def model() -> GaussianNB:
    return GaussianNB()


class TestLogDensity:
    """Test the closed-form 2D and 1D log densities."""

    @pytest.mark.parametrize("params", DEFAULT_CLASS_PARAMS)
    @pytest.mark.parametrize("point", [(0.0, 0.0), (3.0, 6.5), (7.2, 1.1), (9.9, 9.9)])
    def test_matches_scipy(self, params: GaussianParams, point) -> None:
        expected = multivariate_normal(params.mean, params.covariance).logpdf(point)
        assert log_gaussian_pdf(*point, params) == pytest.approx(expected, abs=ATOL)

    def test_normal_matches_scipy(self) -> None:
        from scipy.stats import norm
        assert log_normal_pdf(1.3, 3.0, 1.2) == pytest.approx(norm(3.0, 1.2).logpdf(1.3))

    def test_singular_warns_and_stays_finite(self) -> None:
        with pytest.warns(SingularCovarianceWarning):
            params = GaussianParams(mean=(0.0, 0.0), covariance=((1.0, 1.0), (1.0, 1.0)))
        value = log_gaussian_pdf(0.0, 0.0, params)
        assert math.isfinite(value)
        assert value == pytest.approx(-math.log(2 * math.pi) - 0.5 * math.log(DET_FLOOR))

    def test_regular_does_not_warn(self) -> None:
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            GaussianParams(mean=(1.0, 2.0), covariance=((1.0, 0.0), (0.0, 1.0)))

    def test_params_validation(self) -> None:
        with pytest.raises(InvalidCovariance):
            GaussianParams(mean=(0.0, 0.0), covariance=((1.0, 0.5), (0.4, 1.0)))
        with pytest.raises(InvalidCovariance):
            GaussianParams(mean=(0.0, 0.0, 0.0), covariance=((1.0, 0.0), (0.0, 1.0)))

    def test_params_immutable(self) -> None:
        params = DEFAULT_CLASS_PARAMS[0]
        with pytest.raises(AttributeError):
            params.mean = (0.0, 0.0)
        assert isinstance(params.covariance, tuple)


class TestGaussianNB:
    """Test the classifier on its default parameters."""

    def test_means_classified_to_own_class(self, model: GaussianNB) -> None:
        assert model.classify(3.0, 6.5) == 0
        assert model.classify(7.0, 3.5) == 1
        assert model(7.0, 3.5) == 1

    def test_fixture_accuracy(self, model: GaussianNB) -> None:
        X, y = points_to_arrays(generate_points(make_rng(42)))
        assert model.score(X, y) >= 0.9

    def test_tie_goes_to_class_zero(self) -> None:
        params = DEFAULT_CLASS_PARAMS[0]
        model = GaussianNB(class_params=(params, params), prior=(0.5, 0.5))
        for point in [(0.0, 0.0), (3.0, 6.5), (9.0, 1.0)]:
            assert model.classify(*point) == 0

    def test_prior_shifts_boundary(self) -> None:
        params = DEFAULT_CLASS_PARAMS[0]
        model = GaussianNB(class_params=(params, params), prior=(0.4, 0.6))
        assert model.classify(3.0, 6.5) == 1

    def test_predict_proba(self, model: GaussianNB) -> None:
        proba = model.predict_proba(5.0, 5.0)
        assert proba.sum() == pytest.approx(1.0)
        assert model.predict_proba(3.0, 6.5)[0] > 0.99

    def test_distribution_params(self, model: GaussianNB) -> None:
        assert model.get_distribution_params() == list(DEFAULT_CLASS_PARAMS)

    def test_plain_tuples_accepted(self, model: GaussianNB) -> None:
        raw = [(p.mean, p.covariance) for p in DEFAULT_CLASS_PARAMS]
        plain = GaussianNB(class_params=raw)
        assert plain.get_distribution_params() == list(DEFAULT_CLASS_PARAMS)
        for point in [(3.0, 6.5), (7.0, 3.5), (5.0, 5.0)]:
            assert plain.classify(*point) == model.classify(*point)

    @pytest.mark.parametrize("entry", [3.0, ((0.0, 0.0), IDENTITY, 1.0)])
    def test_malformed_class_params(self, entry) -> None:
        with pytest.raises(InvalidCovariance):
            GaussianNB(class_params=(DEFAULT_CLASS_PARAMS[0], entry))

    @pytest.mark.parametrize("prior", [(0.5, 0.6), (0.0, 1.0), (1.0,)])
    def test_invalid_prior(self, prior) -> None:
        with pytest.raises(InvalidProbabilities):
            GaussianNB(prior=prior)

    def test_prior_read_only(self, model: GaussianNB) -> None:
        with pytest.raises(ValueError):
            model.prior[0] = 0.9


class TestSyntheticData:
    """Test the seeded point generator."""

    def test_reproducible(self) -> None:
        assert generate_points(make_rng(42)) == generate_points(make_rng(42))
        assert generate_points(make_rng(42)) != generate_points(make_rng(43))

    def test_layout_and_bounds(self) -> None:
        points = generate_points(make_rng(0), n_per_class=50)
        assert len(points) == 100
        assert [p.class_label for p in points] == [0] * 50 + [1] * 50
        for p in points:
            assert 0.1 <= p.x <= 9.9 and 0.1 <= p.y <= 9.9
            assert round(p.x, 2) == p.x

    @pytest.mark.parametrize("params", DEFAULT_CLASS_PARAMS)
    def test_cholesky(self, params: GaussianParams) -> None:
        l00, l10, l11 = cholesky_2x2(params.covariance)
        L = np.array([[l00, 0.0], [l10, l11]])
        assert np.allclose(L @ L.T, np.array(params.covariance))
