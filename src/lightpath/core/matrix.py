"""Dense real matrices for building and inverting affine transforms.

Only 4x4 matrices take part in transform composition and in products with
points and vectors, but the class supports any height x width so that
submatrices and cofactors can be expressed with the same type.

The determinant is computed by recursive cofactor expansion (1x1 and 2x2 are
the base cases) and the inverse is the transposed cofactor matrix divided by
the determinant. Scenes hold a handful of objects, so this runs once per
object at load time and never per ray.

Example:
    >>> from lightpath.core.matrix import Matrix
    >>> m = Matrix.from_rows([[1.0, 2.0], [3.0, 4.0]])
    >>> m.determinant()
    -2.0
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
import numpy.typing as npt

from lightpath.core.tuples import EPSILON, Tuple

# Determinants smaller than this are treated as zero when inverting
DETERMINANT_EPSILON = 1e-12


class Matrix:
    """A height x width grid of reals backed by a float64 NumPy array.

    Equality is approximate (element-wise within EPSILON), matching the
    behaviour of points, vectors and colors.
    """

    __slots__ = ("_data",)

    def __init__(self, height: int, width: int) -> None:
        """Create a zero matrix of the given shape."""
        self._data = np.zeros((height, width), dtype=np.float64)

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def _wrap(cls, data: npt.NDArray[np.float64]) -> Matrix:
        m = cls.__new__(cls)
        m._data = data
        return m

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[float]]) -> Matrix:
        """Build a matrix from a list of rows.

        Raises:
            ValueError: If the rows do not all have the same length.
        """
        lengths = {len(row) for row in rows}
        if len(lengths) > 1:
            raise ValueError(f"All rows must have the same length, got lengths {sorted(lengths)}")
        width = len(rows[0]) if rows else 0
        return cls._wrap(np.array(rows, dtype=np.float64).reshape(len(rows), width))

    @classmethod
    def from_cols(cls, cols: Sequence[Sequence[float]]) -> Matrix:
        """Build a matrix from a list of columns.

        Raises:
            ValueError: If the columns do not all have the same length.
        """
        lengths = {len(col) for col in cols}
        if len(lengths) > 1:
            raise ValueError(
                f"All columns must have the same length, got lengths {sorted(lengths)}"
            )
        return cls.from_rows(cols).transpose()

    @classmethod
    def identity(cls, size: int) -> Matrix:
        return cls._wrap(np.identity(size, dtype=np.float64))

    # -------------------------------------------------------------------------
    # Element access
    # -------------------------------------------------------------------------

    @property
    def height(self) -> int:
        return self._data.shape[0]

    @property
    def width(self) -> int:
        return self._data.shape[1]

    @property
    def shape(self) -> tuple[int, int]:
        return (self.height, self.width)

    def __getitem__(self, index: tuple[int, int]) -> float:
        return float(self._data[index])

    def __setitem__(self, index: tuple[int, int], value: float) -> None:
        self._data[index] = value

    def rows(self) -> list[list[float]]:
        return self._data.tolist()

    def to_numpy(self, dtype: npt.DTypeLike = np.float64) -> npt.NDArray:
        """Return a copy of the elements as a NumPy array."""
        return self._data.astype(dtype, copy=True)

    def copy(self) -> Matrix:
        return Matrix._wrap(self._data.copy())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        if self.shape != other.shape:
            return False
        return bool(np.all(np.abs(self._data - other._data) < EPSILON))

    __hash__ = None

    def __repr__(self) -> str:
        return f"Matrix.from_rows({self.rows()!r})"

    # -------------------------------------------------------------------------
    # Products
    # -------------------------------------------------------------------------

    def transpose(self) -> Matrix:
        return Matrix._wrap(self._data.T.copy())

    def matmul(self, other: Matrix) -> Matrix:
        """Matrix product ``self · other``.

        Raises:
            ValueError: If the inner dimensions disagree.
        """
        if self.width != other.height:
            raise ValueError(
                f"Matrix dimensions must agree: {self.height}x{self.width} "
                f"times {other.height}x{other.width}"
            )
        return Matrix._wrap(self._data @ other._data)

    def matmul_tuple(self, t: Tuple) -> Tuple:
        """Apply a 4x4 matrix to a point or vector.

        Points use w = 1 and vectors w = 0, so translation only moves points.
        The result has the same kind as the input; its w is discarded.

        Raises:
            ValueError: If the matrix is not 4x4.
        """
        if self.shape != (4, 4):
            raise ValueError(f"Matrix must be 4x4 to transform a tuple, got {self.height}x{self.width}")
        x, y, z, _ = self._data @ np.array(t.as_array(), dtype=np.float64)
        return type(t)(x, y, z)

    def __matmul__(self, other):
        if isinstance(other, Matrix):
            return self.matmul(other)
        if isinstance(other, Tuple):
            return self.matmul_tuple(other)
        return NotImplemented

    # -------------------------------------------------------------------------
    # Inversion
    # -------------------------------------------------------------------------

    def submatrix(self, row: int, col: int) -> Matrix:
        """Copy of the matrix with ``row`` and ``col`` removed.

        Raises:
            IndexError: If ``row`` or ``col`` is out of bounds.
        """
        if not (0 <= row < self.height and 0 <= col < self.width):
            raise IndexError(
                f"Submatrix indices ({row}, {col}) out of bounds for "
                f"{self.height}x{self.width} matrix"
            )
        data = np.delete(np.delete(self._data, row, axis=0), col, axis=1)
        return Matrix._wrap(data)

    def minor(self, row: int, col: int) -> float:
        return self.submatrix(row, col).determinant()

    def cofactor(self, row: int, col: int) -> float:
        minor = self.minor(row, col)
        return -minor if (row + col) % 2 else minor

    def determinant(self) -> float:
        """Determinant by cofactor expansion along the first row.

        Raises:
            ValueError: If the matrix is not square.
        """
        if self.height != self.width:
            raise ValueError(
                f"Matrix must be square to take a determinant, got {self.height}x{self.width}"
            )
        d = self._data
        if self.height == 1:
            return float(d[0, 0])
        if self.height == 2:
            return float(d[0, 0] * d[1, 1] - d[0, 1] * d[1, 0])
        return sum(float(d[0, col]) * self.cofactor(0, col) for col in range(self.width))

    def invertible(self) -> bool:
        """True if the matrix is square with a non-zero determinant."""
        if self.height != self.width:
            return False
        return abs(self.determinant()) >= DETERMINANT_EPSILON

    def inverse(self) -> Matrix:
        """Inverse via the adjugate.

        Raises:
            ValueError: If the matrix is not square or not invertible.
        """
        det = self.determinant()
        if abs(det) < DETERMINANT_EPSILON:
            raise ValueError("Matrix is not invertible (determinant is zero)")
        size = self.height
        result = np.empty((size, size), dtype=np.float64)
        for row in range(size):
            for col in range(size):
                # Writing at [col, row] transposes the cofactor matrix
                result[col, row] = self.cofactor(row, col) / det
        return Matrix._wrap(result)

    # -------------------------------------------------------------------------
    # Fluent composition
    # -------------------------------------------------------------------------
    # Each call left-multiplies, so in identity.rotate(...).scale(...) the
    # rotation is applied to points first and the last call is applied last.

    def rotate(self, axis, radians: float) -> Matrix:
        from lightpath.core.transformations import rotation

        return rotation(axis, radians).matmul(self)

    def scale(self, x: float, y: float, z: float) -> Matrix:
        from lightpath.core.transformations import scaling

        return scaling(x, y, z).matmul(self)

    def translate(self, x: float, y: float, z: float) -> Matrix:
        from lightpath.core.transformations import translation

        return translation(x, y, z).matmul(self)

    def shear(self, xy: float, xz: float, yx: float, yz: float, zx: float, zy: float) -> Matrix:
        from lightpath.core.transformations import shearing

        return shearing(xy, xz, yx, yz, zx, zy).matmul(self)
