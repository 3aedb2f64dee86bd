"""2D affine transform helpers.

Matrices use the geom2d form ``((a, c, e), (b, d, f))``, which maps a
point (x, y) to (a*x + c*y + e, b*x + d*y + f). The SVG ``matrix()``
argument order (a, b, c, d, e, f) is the column-major flattening.
"""

from __future__ import annotations

import math
import re
from typing import TYPE_CHECKING

import geom2d
from geom2d import transform2d

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from geom2d import TPoint
    from geom2d.transform2d import TMatrix
    from typing_extensions import TypeAlias

    TBounds: TypeAlias = Sequence[TPoint]

IDENTITY_MATRIX: TMatrix = ((1.0, 0.0, 0.0), (0.0, 1.0, 0.0))

_RE_TRANSFORM = re.compile(
    r'(matrix|translate|scale|rotate|skewX|skewY)\s*\(([^)]*)\)\s*,?',
    re.IGNORECASE,
)


def matrix_scale_angle_translate(
    scale: TPoint, angle: float, translation: TPoint
) -> TMatrix:
    """Scale, then rotate by `angle` radians, then translate.

    The rotation terms are computed before scaling, so a zero angle
    leaves `c` as negative zero.
    """
    sx, sy = scale
    sin_a, cos_a = math.sin(angle), math.cos(angle)
    return (
        (cos_a * sx, -sin_a * sy, translation[0]),
        (sin_a * sx, cos_a * sy, translation[1]),
    )


def bounds_transform(bounds: TBounds) -> TMatrix:
    """Transform that maps the unit square onto a bounding box.

    Args:
        bounds: The bounding box as a (min, max) pair of points.

    Returns:
        A matrix scaled by the box size and translated to the box minimum.
    """
    (x0, y0), (x1, y1) = bounds
    return matrix_scale_angle_translate((x1 - x0, y1 - y0), 0.0, (x0, y0))


def compose(*matrices: TMatrix) -> TMatrix:
    """Multiply matrices left to right.

    The rightmost matrix is applied to points first.
    """
    result = matrices[0]
    for matrix in matrices[1:]:
        result = transform2d.compose_transform(result, matrix)
    return result


def invert(matrix: TMatrix) -> TMatrix:
    """Inverse of an affine transform.

    A singular matrix does not raise. The reciprocal of a zero
    determinant is infinite and the non-finite values propagate
    into the result.
    """
    (a, c, e), (b, d, f) = matrix
    det = a * d - b * c
    inv_det = math.copysign(math.inf, det) if det == 0 else 1.0 / det
    ia = d * inv_det
    ib = b * -inv_det
    ic = c * -inv_det
    id_ = a * inv_det
    return (
        (ia, ic, -(ia * e + ic * f)),
        (ib, id_, -(ib * e + id_ * f)),
    )


def apply_to_point(matrix: TMatrix, p: TPoint) -> geom2d.P:
    """Map a point through a transform."""
    return geom2d.P(p[0], p[1]).transform(matrix)


def to_cols_array(matrix: TMatrix) -> tuple[float, ...]:
    """Flatten to column-major (a, b, c, d, e, f)."""
    (a, c, e), (b, d, f) = matrix
    return (a, b, c, d, e, f)


def from_cols_array(values: Iterable[float]) -> TMatrix:
    """Build a matrix from column-major (a, b, c, d, e, f)."""
    a, b, c, d, e, f = (float(v) for v in values)
    return ((a, c, e), (b, d, f))


def parse_transform(stransform: str | None) -> TMatrix | None:
    """Parse an SVG transform list.

    Args:
        stransform: A string containing the SVG transform list,
            ie 'translate(10, 20) scale(2)'.

    Returns:
        A single affine transform matrix or None.

    Raises:
        ValueError: if a transform argument is not a number.
    """
    if not stransform:
        return None
    transforms = _RE_TRANSFORM.findall(stransform.strip())
    matrices = []
    for transform, args in transforms:
        matrix = None
        values = [float(n) for n in args.replace(',', ' ').split()]
        num_values = len(values)
        if not num_values:
            continue
        name = transform.lower()
        if name == 'translate':
            x = values[0]
            y = values[1] if num_values > 1 else 0.0
            matrix = transform2d.matrix_translate(x, y)
        elif name == 'scale':
            x = values[0]
            y = values[1] if num_values > 1 else x
            matrix = transform2d.matrix_scale(x, y)
        elif name == 'rotate':
            a = math.radians(values[0])
            cx = values[1] if num_values > 1 else 0.0
            cy = values[2] if num_values > 2 else 0.0
            matrix = transform2d.matrix_rotate(a, (cx, cy))
        elif name == 'skewx':
            matrix = transform2d.matrix_skew_x(math.radians(values[0]))
        elif name == 'skewy':
            matrix = transform2d.matrix_skew_y(math.radians(values[0]))
        elif name == 'matrix' and num_values == 6:
            matrix = from_cols_array(values)
        if matrix is not None:
            matrices.append(matrix)

    if matrices:
        return compose(*matrices)
    return None
