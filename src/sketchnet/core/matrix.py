"""
Sketchnet Matrix Module

This module implements the dense 2-D matrix used by every part of the numeric
engine. Values are kept in a flat numpy buffer in row-major order, so that the
element at (row, column) lives at offset 'row * columns + column'.

Classes:
    DimensionMismatchError: Raised when two matrices have incompatible shapes
    OutOfBoundsError:       Raised when an element offset overflows the buffer
    Matrix:                 Dense 2-D numeric container
"""

import inspect
import numpy as np
from typing import Any, Callable, Iterable

class DimensionMismatchError(ValueError):
    """Two matrices (or a matrix and an input vector) have incompatible shapes."""

class OutOfBoundsError(IndexError):
    """A row/column pair maps to an offset outside the matrix buffer."""

class Matrix:
    """
    Dense 2-D numeric container.

    Each matrix exclusively owns its buffer. Arithmetic operations (add, subtract,
    hadamard, scale, multiply, transpose, map, apply) always return a new matrix;
    the receiver is only mutated through 'set' and 'fill'.

    Public Properties:
        rows:    Number of rows
        columns: Number of columns
        size:    Number of elements (rows * columns)
        dtype:   Numpy element type of the buffer
        data:    Copy of the buffer as a flat python list

    Public Methods:
        get(row, column), set(row, column, value), at(row, column)
        fill(value), each(visitor), map(transform), apply(function)
        add(other), subtract(other), hadamard(other), scale(value)
        multiply(other), transpose(), copy(), to_numpy()
    """

    def __init__(self, rows: int, columns: int, dtype: Any = np.float64):
        """
        Create a zero-filled matrix.

        Parameters:
            rows:    Number of rows (positive)
            columns: Number of columns (positive)
            dtype:   Numpy element type
        """
        rows, columns = int(rows), int(columns)
        if rows <= 0 or columns <= 0:
            raise ValueError(f"Matrix dimensions must be positive, got ({rows} x {columns})")

        self._rows   : int        = rows
        self._columns: int        = columns
        self._data   : np.ndarray = np.zeros(rows * columns, dtype=dtype)

    @classmethod
    def _from_buffer(cls, rows: int, columns: int, buffer: np.ndarray) -> 'Matrix':
        result = cls(rows, columns, buffer.dtype)
        result._data[:] = buffer.ravel()
        return result

    @classmethod
    def from_array(cls, values: Iterable[float], columns: int = 1, dtype: Any = np.float64) -> 'Matrix':
        """
        Build a matrix from a flat sequence of values.

        Parameters:
            values:  Flat sequence, read in row-major order
            columns: Number of columns (the default builds a column vector)
            dtype:   Numpy element type

        Returns:
            A new matrix with 'len(values) / columns' rows
        """
        flat = np.asarray(list(values) if not isinstance(values, np.ndarray) else values, dtype=dtype).ravel()
        if columns <= 0 or flat.size % columns != 0:
            raise DimensionMismatchError(f"Cannot shape {flat.size} values into {columns} columns")
        return cls._from_buffer(flat.size // columns, columns, flat)

    # Offset helpers, exposed for walking the flattened index space

    @staticmethod
    def get_offset(matrix: 'Matrix', row: int, column: int) -> int:
        return row * matrix._columns + column

    @staticmethod
    def get_row(matrix: 'Matrix', offset: int) -> int:
        return offset // matrix._columns

    @staticmethod
    def get_column(matrix: 'Matrix', offset: int) -> int:
        return offset % matrix._columns

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def columns(self) -> int:
        return self._columns

    @property
    def size(self) -> int:
        return self._rows * self._columns

    @property
    def dtype(self) -> np.dtype:
        return self._data.dtype

    @property
    def data(self) -> list:
        """Copy of the buffer as a flat list of python numbers."""
        return self._data.tolist()

    def to_numpy(self) -> np.ndarray:
        """Copy of the buffer shaped as a (rows, columns) array."""
        return self._data.reshape(self._rows, self._columns).copy()

    def _checked_offset(self, row: int, column: int) -> int:
        offset = Matrix.get_offset(self, row, column)
        if offset < 0 or offset >= self._data.size:
            raise OutOfBoundsError(f"Matrix offset overflow ({offset}) for ({row}, {column}) "
                                   f"in a ({self._rows} x {self._columns}) matrix")
        return offset

    def at(self, row: int, column: int) -> float | None:
        """
        Get the value at the given row and column.

        Returns:
            The value, or None when the offset overflows the buffer
        """
        offset = Matrix.get_offset(self, row, column)
        if offset < 0 or offset >= self._data.size:
            return None
        return self._data[offset].item()

    def get(self, row: int, column: int) -> float:
        """
        Get the value at the given row and column.

        Raises:
            OutOfBoundsError: if the offset overflows the buffer
        """
        return self._data[self._checked_offset(row, column)].item()

    def set(self, row: int, column: int, value: float) -> float:
        """
        Set the value at the given row and column.

        Returns:
            The previous value

        Raises:
            OutOfBoundsError: if the offset overflows the buffer
        """
        offset   = self._checked_offset(row, column)
        previous = self._data[offset].item()
        self._data[offset] = value
        return previous

    def fill(self, value: float | Callable[..., float]) -> None:
        """
        Overwrite every element.

        Parameters:
            value: A constant, or a generator called as 'generator(row, column)'
                   or 'generator(row, column, current)' for every element
        """
        if not callable(value):
            self._data.fill(value)
            return

        pass_current = _accepts_three_arguments(value)
        for row in range(self._rows):
            for column in range(self._columns):
                offset = row * self._columns + column
                if pass_current:
                    self._data[offset] = value(row, column, self._data[offset].item())
                else:
                    self._data[offset] = value(row, column)

    def each(self, visitor: Callable[[float, int, int], Any]) -> None:
        """Call 'visitor(value, row, column)' for every element, in row-major order."""
        for row in range(self._rows):
            for column in range(self._columns):
                visitor(self._data[row * self._columns + column].item(), row, column)

    def map(self, transform: Callable[[float, int, int], float]) -> 'Matrix':
        """
        Return a new matrix of the same shape holding 'transform(value, row, column)'
        for every element.
        """
        result = Matrix(self._rows, self._columns, self.dtype)
        result.fill(lambda row, column: transform(self._data[row * self._columns + column].item(), row, column))
        return result

    def apply(self, function: Callable[[np.ndarray], np.ndarray]) -> 'Matrix':
        """
        Return a new matrix holding 'function' applied elementwise.
        'function' must accept and return numpy arrays (it is called once on the whole buffer).
        """
        values = np.asarray(function(self._data.copy()), dtype=self.dtype)
        return Matrix._from_buffer(self._rows, self._columns, np.broadcast_to(values, self._data.shape))

    def _check_same_shape(self, other: 'Matrix', operation: str) -> None:
        if self._rows != other._rows or self._columns != other._columns:
            raise DimensionMismatchError(f"Unable to {operation} a ({self._rows} x {self._columns}) matrix "
                                         f"and a ({other._rows} x {other._columns}) matrix")

    def add(self, other: 'Matrix') -> 'Matrix':
        self._check_same_shape(other, "add")
        return Matrix._from_buffer(self._rows, self._columns, self._data + other._data)

    def subtract(self, other: 'Matrix') -> 'Matrix':
        self._check_same_shape(other, "subtract")
        return Matrix._from_buffer(self._rows, self._columns, self._data - other._data)

    def hadamard(self, other: 'Matrix') -> 'Matrix':
        """Elementwise product of two equally-shaped matrices."""
        self._check_same_shape(other, "hadamard-multiply")
        return Matrix._from_buffer(self._rows, self._columns, self._data * other._data)

    def scale(self, value: float) -> 'Matrix':
        return Matrix._from_buffer(self._rows, self._columns, self._data * value)

    def multiply(self, other: 'Matrix') -> 'Matrix':
        """
        Standard matrix product.

        Returns:
            A new (self.rows x other.columns) matrix

        Raises:
            DimensionMismatchError: if 'self.columns != other.rows'
        """
        if self._columns != other._rows:
            raise DimensionMismatchError(f"Unable to multiply a ({self._rows} x {self._columns}) matrix "
                                         f"by a ({other._rows} x {other._columns}) matrix")
        product = self._data.reshape(self._rows, self._columns) @ other._data.reshape(other._rows, other._columns)
        return Matrix._from_buffer(self._rows, other._columns, product.astype(self.dtype, copy=False))

    def transpose(self) -> 'Matrix':
        transposed = self._data.reshape(self._rows, self._columns).T
        return Matrix._from_buffer(self._columns, self._rows, transposed.copy())

    def copy(self) -> 'Matrix':
        return Matrix._from_buffer(self._rows, self._columns, self._data)

    def __eq__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return (self._rows == other._rows and
                self._columns == other._columns and
                bool(np.array_equal(self._data, other._data)))

    __hash__ = None

    def __repr__(self):
        return f"Matrix(rows={self._rows}, columns={self._columns}, dtype={self.dtype.name}, data={self.data})"

def _accepts_three_arguments(function: Callable) -> bool:
    """Whether a fill generator wants the current value as a third argument."""
    try:
        parameters = inspect.signature(function).parameters.values()
    except (TypeError, ValueError):
        return False

    positional = 0
    for parameter in parameters:
        if parameter.kind == inspect.Parameter.VAR_POSITIONAL:
            return True
        if parameter.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
            positional += 1
    return positional >= 3
