"""
Unit tests for the Matrix class.
"""

import pytest
import numpy as np

from sketchnet.core.matrix import Matrix, DimensionMismatchError, OutOfBoundsError


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def square():
    """[[1, 2], [3, 4]]"""
    return Matrix.from_array([1, 2, 3, 4], columns=2)


@pytest.fixture
def wide():
    """[[1, 2, 3], [4, 5, 6]]"""
    return Matrix.from_array([1, 2, 3, 4, 5, 6], columns=3)


# ============================================================================
# Construction
# ============================================================================

class TestMatrixInit:

    def test_zero_filled(self):
        matrix = Matrix(2, 3)
        assert matrix.rows == 2
        assert matrix.columns == 3
        assert matrix.size == 6
        assert matrix.data == [0.0] * 6

    def test_default_dtype_is_float64(self):
        assert Matrix(1, 1).dtype == np.float64

    def test_custom_dtype(self):
        assert Matrix(2, 2, np.float32).dtype == np.float32
        assert Matrix(2, 2, np.int32).dtype == np.int32

    @pytest.mark.parametrize("rows, columns", [(0, 1), (1, 0), (-1, 2)])
    def test_non_positive_dimensions_raise(self, rows, columns):
        with pytest.raises(ValueError):
            Matrix(rows, columns)

    def test_from_array_is_a_column_by_default(self):
        matrix = Matrix.from_array([1.0, 2.0, 3.0])
        assert (matrix.rows, matrix.columns) == (3, 1)
        assert matrix.get(2, 0) == 3.0

    def test_from_array_row_major_with_columns(self, square):
        assert (square.rows, square.columns) == (2, 2)
        assert square.get(0, 1) == 2
        assert square.get(1, 0) == 3

    def test_from_array_accepts_numpy(self):
        matrix = Matrix.from_array(np.arange(6), columns=2)
        assert (matrix.rows, matrix.columns) == (3, 2)
        assert matrix.get(2, 1) == 5

    def test_from_array_with_bad_column_count_raises(self):
        with pytest.raises(DimensionMismatchError):
            Matrix.from_array([1, 2, 3], columns=2)

    def test_data_is_a_copy(self, square):
        data = square.data
        data[0] = 100
        assert square.get(0, 0) == 1

    def test_to_numpy_shape(self, wide):
        array = wide.to_numpy()
        assert array.shape == (2, 3)
        array[0, 0] = 100
        assert wide.get(0, 0) == 1


# ============================================================================
# Offset helpers
# ============================================================================

class TestOffsetHelpers:

    def test_offset_row_column_roundtrip(self, wide):
        assert Matrix.get_offset(wide, 1, 2) == 5
        assert Matrix.get_row(wide, 5) == 1
        assert Matrix.get_column(wide, 5) == 2

    def test_first_and_last_offsets(self, wide):
        assert Matrix.get_offset(wide, 0, 0) == 0
        assert Matrix.get_row(wide, 3) == 1
        assert Matrix.get_column(wide, 3) == 0


# ============================================================================
# Element access
# ============================================================================

class TestElementAccess:

    def test_set_returns_previous_value(self, square):
        previous = square.set(1, 1, 10.0)
        assert previous == 4
        assert square.get(1, 1) == 10.0

    def test_get_out_of_bounds_raises(self, square):
        with pytest.raises(OutOfBoundsError):
            square.get(2, 0)

    def test_set_out_of_bounds_raises(self, square):
        with pytest.raises(OutOfBoundsError):
            square.set(5, 5, 1.0)

    def test_negative_offset_raises(self, square):
        with pytest.raises(OutOfBoundsError):
            square.get(-1, 0)

    def test_out_of_bounds_is_an_index_error(self, square):
        with pytest.raises(IndexError):
            square.get(10, 0)

    def test_bounds_are_checked_on_the_flat_offset(self, square):
        # (0, 3) maps to offset 3, which is inside the buffer: element (1, 1)
        assert square.get(0, 3) == 4

    def test_at_returns_value(self, square):
        assert square.at(1, 0) == 3

    def test_at_returns_none_when_out_of_bounds(self, square):
        assert square.at(2, 0) is None
        assert square.at(-1, 0) is None

    def test_get_returns_python_float(self):
        assert type(Matrix(1, 1).get(0, 0)) is float


# ============================================================================
# Traversal
# ============================================================================

class TestTraversal:

    def test_fill_with_constant(self):
        matrix = Matrix(2, 2)
        matrix.fill(7.0)
        assert matrix.data == [7.0] * 4

    def test_fill_with_generator(self):
        matrix = Matrix(2, 3)
        matrix.fill(lambda row, column: row * 10 + column)
        assert matrix.data == [0, 1, 2, 10, 11, 12]

    def test_fill_with_generator_receiving_current_value(self, square):
        square.fill(lambda row, column, current: current * 2)
        assert square.data == [2, 4, 6, 8]

    def test_each_is_row_major(self, wide):
        visited = []
        wide.each(lambda value, row, column: visited.append((value, row, column)))
        assert visited == [(1, 0, 0), (2, 0, 1), (3, 0, 2), (4, 1, 0), (5, 1, 1), (6, 1, 2)]

    def test_map_returns_new_matrix(self, square):
        result = square.map(lambda value, row, column: value + row + column)
        assert result.data == [1, 3, 4, 6]
        assert square.data == [1, 2, 3, 4]
        assert result is not square

    def test_apply_vectorized(self, square):
        result = square.apply(lambda values: values ** 2)
        assert result.data == [1, 4, 9, 16]
        assert square.data == [1, 2, 3, 4]

    def test_apply_scalar_result_is_broadcast(self, square):
        result = square.apply(lambda values: 0.5)
        assert result.data == [0.5] * 4


# ============================================================================
# Arithmetic
# ============================================================================

class TestArithmetic:

    def test_add(self, square):
        assert square.add(square).data == [2, 4, 6, 8]

    def test_subtract(self, square):
        other = Matrix.from_array([1, 1, 1, 1], columns=2)
        assert square.subtract(other).data == [0, 1, 2, 3]

    def test_add_does_not_mutate(self, square):
        square.add(square)
        assert square.data == [1, 2, 3, 4]

    def test_add_shape_mismatch_raises(self, square, wide):
        with pytest.raises(DimensionMismatchError):
            square.add(wide)

    def test_subtract_shape_mismatch_raises(self):
        with pytest.raises(DimensionMismatchError):
            Matrix(2, 1).subtract(Matrix(1, 2))

    def test_hadamard(self, square):
        assert square.hadamard(square).data == [1, 4, 9, 16]

    def test_hadamard_shape_mismatch_raises(self, square):
        with pytest.raises(DimensionMismatchError):
            square.hadamard(Matrix(4, 1))

    def test_scale(self, square):
        assert square.scale(0.5).data == [0.5, 1.0, 1.5, 2.0]

    def test_multiply_values(self, square):
        column = Matrix.from_array([5, 6])
        result = square.multiply(column)
        assert (result.rows, result.columns) == (2, 1)
        assert result.data == [17, 39]

    def test_multiply_shape(self):
        result = Matrix(2, 3).multiply(Matrix(3, 4))
        assert (result.rows, result.columns) == (2, 4)

    def test_multiply_outer_product(self):
        column = Matrix.from_array([1, 2])
        row    = Matrix.from_array([3, 4, 5], columns=3)
        result = column.multiply(row)
        assert (result.rows, result.columns) == (2, 3)
        assert result.data == [3, 4, 5, 6, 8, 10]

    def test_multiply_mismatched_inner_dimensions_raises(self, wide):
        with pytest.raises(DimensionMismatchError):
            wide.multiply(Matrix(2, 2))

    def test_multiply_by_identity(self, square):
        identity = Matrix.from_array([1, 0, 0, 1], columns=2)
        assert square.multiply(identity) == square

    def test_transpose(self, wide):
        result = wide.transpose()
        assert (result.rows, result.columns) == (3, 2)
        assert result.data == [1, 4, 2, 5, 3, 6]
        for row in range(2):
            for column in range(3):
                assert result.get(column, row) == wide.get(row, column)

    def test_transpose_involution(self):
        matrix = Matrix.from_array(np.random.uniform(-1, 1, 12), columns=4)
        assert matrix.transpose().transpose() == matrix

    def test_copy_is_independent(self, square):
        duplicate = square.copy()
        duplicate.set(0, 0, 100)
        assert square.get(0, 0) == 1
        assert duplicate == Matrix.from_array([100, 2, 3, 4], columns=2)


# ============================================================================
# Equality and representation
# ============================================================================

class TestEquality:

    def test_equal_matrices(self, square):
        assert square == Matrix.from_array([1, 2, 3, 4], columns=2)

    def test_same_values_different_shape(self):
        assert Matrix.from_array([1, 2, 3, 4], columns=2) != Matrix.from_array([1, 2, 3, 4], columns=4)

    def test_not_equal_to_other_types(self, square):
        assert square != [1, 2, 3, 4]

    def test_unhashable(self, square):
        with pytest.raises(TypeError):
            hash(square)

    def test_repr(self, square):
        assert "rows=2" in repr(square)
        assert "columns=2" in repr(square)
