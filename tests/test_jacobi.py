"""Tests for the Jacobi eigensolver."""

import numpy as np
import pytest
from scipy import sparse

from eigenspace.jacobi import EigenResult, JacobiConfig, JacobiEigensolver, eigen_decompose
from eigenspace.matrix import AsymmetricInputError, InvalidShapeError, trace


def random_symmetric(n: int, seed: int = 42) -> np.ndarray:
    """Random dense symmetric matrix."""
    rng = np.random.default_rng(seed)
    A = rng.standard_normal((n, n))
    return (A + A.T) / 2


class TestScenarios:
    """Hand-checkable decompositions."""

    def test_two_by_two(self):
        """Test [[2, 1], [1, 2]] has eigenvalues 1 and 3."""
        result = eigen_decompose([[2.0, 1.0], [1.0, 2.0]])

        assert np.allclose(result.values, [1.0, 3.0], atol=1e-10)

        v1 = np.array([1.0, -1.0]) / np.sqrt(2)
        v3 = np.array([1.0, 1.0]) / np.sqrt(2)
        assert np.isclose(abs(result.vectors[0] @ v1), 1.0, atol=1e-10)
        assert np.isclose(abs(result.vectors[1] @ v3), 1.0, atol=1e-10)

    def test_identity(self):
        """Test identity has all-one eigenvalues and an orthonormal basis."""
        result = eigen_decompose(np.eye(4))

        assert np.allclose(result.values, np.ones(4))
        V = result.eigenvector_matrix
        assert np.allclose(V.T @ V, np.eye(4), atol=1e-6)
        assert result.converged
        assert result.n_rotations == 0

    def test_single_element(self):
        """Test 1x1 matrix."""
        result = eigen_decompose([[5.0]])

        assert np.allclose(result.values, [5.0])
        assert np.allclose(result.vectors, [[1.0]])
        assert result.converged

    def test_empty_matrix(self):
        """Test 0x0 matrix yields an empty decomposition."""
        result = eigen_decompose(np.zeros((0, 0)))

        assert len(result) == 0
        assert result.vectors.shape == (0, 0)
        assert result.converged

    def test_unsorted_diagonal(self):
        """Test diagonal input is sorted with matching unit eigenvectors."""
        result = eigen_decompose(np.diag([3.0, 1.0, 2.0]))

        assert np.allclose(result.values, [1.0, 2.0, 3.0])
        assert np.allclose(np.abs(result.vectors), np.eye(3)[[1, 2, 0]])

    def test_matches_lapack(self):
        """Test eigenvalues agree with numpy.linalg.eigvalsh."""
        A = random_symmetric(10)
        result = eigen_decompose(A)

        assert np.allclose(result.values, np.linalg.eigvalsh(A), atol=1e-8)


class TestInvariants:
    """Properties that hold for every symmetric input."""

    @pytest.fixture(params=[2, 3, 5, 8, 12, 24])
    def matrix(self, request):
        """Random symmetric matrices of several sizes."""
        return random_symmetric(request.param, seed=request.param)

    def test_orthonormality(self, matrix):
        """Test V^T V = I."""
        result = eigen_decompose(matrix)
        V = result.eigenvector_matrix

        assert np.allclose(V.T @ V, np.eye(len(matrix)), atol=1e-6)

    def test_reconstruction(self, matrix):
        """Test V diag(values) V^T reproduces the input."""
        result = eigen_decompose(matrix)

        assert np.allclose(result.reconstruct(), matrix, atol=1e-6)

    def test_trace_conservation(self, matrix):
        """Test sum of eigenvalues equals the trace."""
        result = eigen_decompose(matrix)

        assert np.isclose(np.sum(result.values), trace(matrix), atol=1e-6)

    def test_sorted_ascending(self, matrix):
        """Test eigenvalues are non-decreasing."""
        result = eigen_decompose(matrix)

        assert np.all(np.diff(result.values) >= 0)

    def test_eigen_equation(self, matrix):
        """Test M v = lambda v for every pair."""
        result = eigen_decompose(matrix)

        for lam, v in result.pairs():
            assert np.allclose(matrix @ v, lam * v, atol=1e-6)

    def test_converges(self, matrix):
        """Test default budget reaches the tolerance."""
        result = eigen_decompose(matrix)

        assert result.converged
        assert result.residual < 1e-10

    def test_deterministic(self, matrix):
        """Test identical input yields identical output."""
        first = eigen_decompose(matrix)
        second = eigen_decompose(matrix)

        assert np.array_equal(first.values, second.values)
        assert np.array_equal(first.vectors, second.vectors)
        assert first.n_rotations == second.n_rotations

    def test_input_not_mutated(self, matrix):
        """Test the caller's matrix is left untouched."""
        original = matrix.copy()
        eigen_decompose(matrix)

        assert np.array_equal(matrix, original)


class TestInputHandling:
    """Tests for validation and symmetry policies."""

    def test_non_square_raises(self):
        """Test non-square input is rejected."""
        with pytest.raises(InvalidShapeError, match="square"):
            eigen_decompose(np.ones((2, 3)))

    def test_one_dimensional_raises(self):
        """Test vector input is rejected."""
        with pytest.raises(InvalidShapeError, match="2-D"):
            eigen_decompose([1.0, 2.0, 3.0])

    def test_ragged_raises(self):
        """Test ragged nested lists are rejected."""
        with pytest.raises(InvalidShapeError):
            eigen_decompose([[1.0, 2.0], [3.0]])

    def test_non_numeric_raises(self):
        """Test string entries are a value error, not a shape error."""
        with pytest.raises(ValueError, match="must be numeric") as excinfo:
            eigen_decompose([["a", "b"], ["b", "a"]])

        assert not isinstance(excinfo.value, InvalidShapeError)

    def test_nan_raises(self):
        """Test non-finite entries are rejected."""
        with pytest.raises(ValueError, match="NaN"):
            eigen_decompose([[1.0, np.nan], [np.nan, 1.0]])

    def test_asymmetric_raises(self):
        """Test default policy rejects asymmetric input."""
        with pytest.raises(AsymmetricInputError, match="not symmetric"):
            eigen_decompose([[1.0, 2.0], [0.0, 1.0]])

    def test_symmetrize_policy(self):
        """Test symmetrize policy decomposes (M + M^T) / 2."""
        M = np.array([[1.0, 2.0], [0.0, 1.0]])
        config = JacobiConfig(symmetry="symmetrize")

        result = eigen_decompose(M, config)
        expected = eigen_decompose((M + M.T) / 2)

        assert np.allclose(result.values, expected.values)
        assert np.allclose(result.values, [0.0, 2.0])

    def test_tiny_asymmetry_tolerated(self):
        """Test rounding-level asymmetry passes the default policy."""
        M = np.array([[2.0, 1.0], [1.0 + 1e-12, 2.0]])
        result = eigen_decompose(M)

        assert np.allclose(result.values, [1.0, 3.0], atol=1e-9)

    def test_sparse_input(self):
        """Test scipy sparse matrices are accepted."""
        M = sparse.csr_matrix(np.array([[2.0, 1.0], [1.0, 2.0]]))
        result = eigen_decompose(M)

        assert np.allclose(result.values, [1.0, 3.0])

    def test_unknown_symmetry_policy(self):
        """Test config rejects unknown policies."""
        with pytest.raises(ValueError, match="Unknown symmetry policy"):
            JacobiConfig(symmetry="ignore")

    def test_negative_sweeps(self):
        """Test config rejects a negative budget."""
        with pytest.raises(ValueError, match="max_sweeps"):
            JacobiConfig(max_sweeps=-1)

    def test_string_numbers_coerced(self):
        """Test YAML-style string numbers are converted."""
        config = JacobiConfig(max_sweeps="10", tolerance="1e-10", symmetry_atol="1e-9")

        assert config.max_sweeps == 10
        assert config.tolerance == 1e-10
        assert isinstance(config.symmetry_atol, float)

    def test_non_numeric_tolerance(self):
        """Test unparseable numbers raise a descriptive error."""
        with pytest.raises(ValueError, match="tolerance must be float-like"):
            JacobiConfig(tolerance="tiny")


class TestPivot:
    """Tests for pivot selection."""

    def test_tie_resolves_row_major(self):
        """Test equal magnitudes with mixed signs pick the first (p, q)."""
        A = np.array([[0.0, 1.0, -1.0], [1.0, 0.0, 1.0], [-1.0, 1.0, 0.0]])

        assert JacobiEigensolver._find_pivot(A) == (0, 1, 1.0)

    def test_tie_skips_smaller_entries(self):
        """Test the first maximal entry wins, not the first entry."""
        A = np.array(
            [
                [0.0, 0.5, 0.0, 0.0],
                [0.5, 0.0, -2.0, 0.0],
                [0.0, -2.0, 0.0, 2.0],
                [0.0, 0.0, 2.0, 0.0],
            ]
        )

        assert JacobiEigensolver._find_pivot(A) == (1, 2, 2.0)

    def test_single_element(self):
        """Test N < 2 has no pivot."""
        assert JacobiEigensolver._find_pivot(np.array([[3.0]])) == (0, 0, 0.0)

    def test_diagonal_has_zero_magnitude(self):
        """Test a diagonal matrix has nothing left to rotate."""
        _, _, magnitude = JacobiEigensolver._find_pivot(np.diag([1.0, 2.0, 3.0]))

        assert magnitude == 0.0


class TestConvergenceReporting:
    """Tests for the convergence signal on EigenResult."""

    def test_zero_budget_not_converged(self):
        """Test exhausted budget returns the current estimate unconverged."""
        A = random_symmetric(4)
        result = eigen_decompose(A, JacobiConfig(max_sweeps=0))

        assert not result.converged
        assert result.n_rotations == 0
        assert result.residual > 1e-10
        assert np.allclose(np.sort(np.diag(A)), result.values)

    def test_capped_result_still_orthonormal(self):
        """Test a capped decomposition keeps an orthonormal basis."""
        A = random_symmetric(6)
        result = eigen_decompose(A, JacobiConfig(max_sweeps=1))
        V = result.eigenvector_matrix

        assert np.allclose(V.T @ V, np.eye(6), atol=1e-10)
        assert np.isclose(np.sum(result.values), trace(A))

    def test_max_rotations(self):
        """Test rotation budget scales with the number of pivot pairs."""
        config = JacobiConfig(max_sweeps=100)

        assert config.max_rotations(2) == 100
        assert config.max_rotations(4) == 600
        assert config.max_rotations(1) == 100


class TestEigenResult:
    """Tests for the EigenResult value object."""

    @pytest.fixture
    def result(self):
        """Decomposition of a small Laplacian."""
        return JacobiEigensolver().decompose(
            [[1.0, -1.0, 0.0], [-1.0, 2.0, -1.0], [0.0, -1.0, 1.0]]
        )

    def test_is_eigen_result(self, result):
        """Test solver returns EigenResult."""
        assert isinstance(result, EigenResult)
        assert len(result) == 3

    def test_read_only(self, result):
        """Test arrays cannot be modified in place."""
        with pytest.raises(ValueError):
            result.values[0] = 10.0
        with pytest.raises(ValueError):
            result.vectors[0, 0] = 10.0

    def test_eigenvector_matrix_columns(self, result):
        """Test eigenvector_matrix columns are the vectors."""
        V = result.eigenvector_matrix
        for k in range(3):
            assert np.array_equal(V[:, k], result.vectors[k])

    def test_path_spectrum(self, result):
        """Test path graph P3 Laplacian eigenvalues are 0, 1, 3."""
        assert np.allclose(result.values, [0.0, 1.0, 3.0], atol=1e-10)
