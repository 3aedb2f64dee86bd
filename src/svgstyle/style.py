"""Paint styles (fill, stroke, gradient) and their SVG attribute rendering.

Rendering produces attribute fragments that are concatenated directly
into an element's opening tag, ie ``' fill="#ff0000" fill-opacity="0.500"'``.
Gradients additionally write a definition element to a separate text
buffer, which the caller places inside a ``<defs>`` container.
"""

from __future__ import annotations

import abc
import dataclasses
import decimal
import enum
import logging
import math
import re
import struct
from typing import TYPE_CHECKING, Any, TextIO

from . import affine
from .color import Color
from .consts import (
    OPACITY_PRECISION,
    OUTLINE_STROKE_COLOR,
    OUTLINE_STROKE_WEIGHT,
)

if TYPE_CHECKING:
    from geom2d import TPoint
    from geom2d.transform2d import TMatrix
    from typing_extensions import Self, TypeAlias

    from .affine import TBounds

    TStop: TypeAlias = tuple[float, Color | None]

logger = logging.getLogger(__name__)

# A dash length token: a decimal number with an optional exponent.
_RE_FLOAT = re.compile(
    r'(([-+]?[0-9]+(\.[0-9]*)?|[-+]?\.[0-9]+)([eE][-+]?[0-9]+)?)'
)


class StyleError(Exception):
    """Malformed serialized style data."""


def format_float(value: float) -> str:
    """Shortest round-trip decimal form of a number.

    No exponent and no trailing '.0', ie 4.0 -> '4', 1e-7 -> '0.0000001'.
    """
    value = float(value)
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return 'inf' if value > 0 else '-inf'
    text = format(decimal.Decimal(repr(value)), 'f')
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    return text


_F32_MAX = 3.4028234663852886e38


def _f32(value: float) -> float:
    """Round to single precision. Out of range values become infinite."""
    if abs(value) > _F32_MAX:
        return math.copysign(math.inf, value)
    return struct.unpack('f', struct.pack('f', value))[0]


def format_opacity(name: str, opacity: float) -> str:
    """Opacity attribute for `name`, or an empty string if fully opaque.

    Args:
        name: Attribute prefix, ie 'fill' or 'stroke'.
        opacity: Alpha value 0.0 - 1.0.

    Returns:
        A fragment of the form ' fill-opacity="0.500"'. Values within
        10^-OPACITY_PRECISION of 1.0 produce no attribute. The
        comparison is done in single precision, so 0.999 is opaque.
    """
    opacity = _f32(opacity)
    threshold = _f32(10.0**-OPACITY_PRECISION)
    if _f32(abs(opacity - 1.0)) > threshold:
        return f' {name}-opacity="{opacity:.{OPACITY_PRECISION}f}"'
    return ''


def _enum_from_name(cls: type[enum.Enum], name: Any) -> Any:  # noqa: ANN401
    try:
        return cls[name]
    except (KeyError, TypeError) as e:
        raise StyleError(f'Invalid {cls.__name__}: {name!r}') from e


def _color_from_dict(data: Any) -> Color | None:  # noqa: ANN401
    if data is None:
        return None
    try:
        return Color.from_dict(data)
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise StyleError(f'Invalid color: {data!r}') from e


def _color_to_dict(color: Color | None) -> dict | None:
    return None if color is None else color.to_dict()


def _point_from_list(data: Any) -> tuple[float, float]:  # noqa: ANN401
    try:
        x, y = data
        return (float(x), float(y))
    except (TypeError, ValueError) as e:
        raise StyleError(f'Invalid point: {data!r}') from e


class ViewMode(enum.Enum):
    """Document-wide rendering mode."""

    #: Normal coloration at the current viewport resolution
    NORMAL = 'normal'
    #: Only the outlines of shapes
    OUTLINE = 'outline'
    #: Normal coloration at the document resolution.
    #: Renders the same as NORMAL here.
    PIXELS = 'pixels'


class GradientKind(enum.Enum):
    LINEAR = 'linear'
    RADIAL = 'radial'


@dataclasses.dataclass(frozen=True)
class Gradient:
    """A gradient fill.

    Holds the start and end anchor points in unit bounding box space
    and the colors at offsets along the ramp. Stops are rendered in
    stored order and a stop without a color is skipped.

    `identity` is assigned by the caller and becomes the def element id,
    so it must stay stable for the same logical gradient and be unique
    within a document.
    """

    start: TPoint = (0.0, 0.0)
    end: TPoint = (0.0, 0.0)
    transform: TMatrix = affine.IDENTITY_MATRIX
    stops: tuple[TStop, ...] = ()
    identity: int = 0
    kind: GradientKind = GradientKind.LINEAR

    @classmethod
    def from_colors(  # noqa: PLR0913
        cls,
        start: TPoint,
        start_color: Color,
        end: TPoint,
        end_color: Color,
        transform: TMatrix,
        identity: int,
        kind: GradientKind = GradientKind.LINEAR,
    ) -> Self:
        """Create a two color gradient with stops at offsets 0 and 1."""
        return cls(
            start=start,
            end=end,
            transform=transform,
            stops=((0.0, start_color), (1.0, end_color)),
            identity=identity,
            kind=kind,
        )

    def render_defs(
        self,
        svg_defs: TextIO,
        multiplied_transform: TMatrix,
        bounds: TBounds,
        transformed_bounds: TBounds,
    ) -> None:
        """Write the gradient def element to `svg_defs`.

        Args:
            svg_defs: Text buffer for def elements.
            multiplied_transform: Shape to document transform.
            bounds: Shape bounding box in local space as (min, max).
            transformed_bounds: Shape bounding box in document space.
        """
        bound_transform = affine.bounds_transform(bounds)
        transformed_bound_transform = affine.bounds_transform(
            transformed_bounds
        )
        updated_transform = affine.compose(
            multiplied_transform, bound_transform
        )

        stops = ''.join(
            f'<stop offset="{format_float(offset)}"'
            f' stop-color="#{color.rgb_hex()}" />'
            for offset, color in self.stops
            if color is not None
        )

        mod_gradient = affine.invert(transformed_bound_transform)
        mod_points = affine.compose(
            affine.invert(mod_gradient),
            affine.invert(transformed_bound_transform),
            updated_transform,
        )

        start = affine.apply_to_point(mod_points, self.start)
        end = affine.apply_to_point(mod_points, self.end)

        matrix = ','.join(
            format_float(v) for v in affine.to_cols_array(mod_gradient)
        )

        if self.kind == GradientKind.LINEAR:
            svg_def = (
                f'<linearGradient id="{self.identity}"'
                f' x1="{format_float(start[0])}" x2="{format_float(end[0])}"'
                f' y1="{format_float(start[1])}" y2="{format_float(end[1])}"'
                f' gradientTransform="matrix({matrix})">'
                f'{stops}</linearGradient>'
            )
        elif self.kind == GradientKind.RADIAL:
            dx = start[0] - end[0]
            dy = start[1] - end[1]
            radius = math.sqrt(dx * dx + dy * dy)
            svg_def = (
                f'<radialGradient id="{self.identity}"'
                f' cx="{format_float(start[0])}" cy="{format_float(start[1])}"'
                f' r="{format_float(radius)}"'
                f' gradientTransform="matrix({matrix})">'
                f'{stops}</radialGradient>'
            )
        else:
            raise AssertionError(f'Unhandled gradient kind: {self.kind}')

        logger.debug('gradient def: %s', svg_def)
        svg_defs.write(svg_def)

    def to_dict(self) -> dict[str, Any]:
        return {
            'start': list(self.start),
            'end': list(self.end),
            'transform': list(affine.to_cols_array(self.transform)),
            'stops': [
                [offset, _color_to_dict(color)] for offset, color in self.stops
            ],
            'identity': self.identity,
            'kind': self.kind.name,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create a gradient from serialized data.

        Raises:
            StyleError: if the data is malformed.
        """
        try:
            matrix = affine.from_cols_array(data['transform'])
            stops = tuple(
                (float(offset), _color_from_dict(color))
                for offset, color in data['stops']
            )
            return cls(
                start=_point_from_list(data['start']),
                end=_point_from_list(data['end']),
                transform=matrix,
                stops=stops,
                identity=int(data['identity']),
                kind=_enum_from_name(GradientKind, data.get('kind', 'LINEAR')),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise StyleError(f'Invalid gradient: {data!r}') from e


class Fill(abc.ABC):
    """The paint applied to a shape's interior.

    One of NoFill, SolidFill, or GradientFill.
    """

    @staticmethod
    def solid(color: Color) -> SolidFill:
        return SolidFill(color)

    @abc.abstractmethod
    def color(self) -> Color:
        """Evaluate the color of the fill.

        Gradients are not sampled, the first stop color is used instead.
        """

    @abc.abstractmethod
    def render(
        self,
        svg_defs: TextIO,
        multiplied_transform: TMatrix,
        bounds: TBounds,
        transformed_bounds: TBounds,
    ) -> str:
        """Fill attribute fragment, adding any necessary defs."""

    def is_some(self) -> bool:
        """True unless this is NoFill."""
        return not isinstance(self, NoFill)

    @abc.abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON compatible dict."""

    @staticmethod
    def from_dict(data: dict[str, Any]) -> Fill:
        """Create a fill from serialized data.

        Raises:
            StyleError: if the data is malformed.
        """
        try:
            fill_type = data['type']
            if fill_type == 'none':
                return NoFill()
            if fill_type == 'solid':
                color = _color_from_dict(data['color'])
                if color is None:
                    raise StyleError('Solid fill without a color')
                return SolidFill(color)
            if fill_type == 'gradient':
                return GradientFill(Gradient.from_dict(data['gradient']))
        except (KeyError, TypeError) as e:
            raise StyleError(f'Invalid fill: {data!r}') from e
        raise StyleError(f'Invalid fill type: {fill_type!r}')


@dataclasses.dataclass(frozen=True)
class NoFill(Fill):
    def color(self) -> Color:
        return Color.BLACK

    def render(
        self,
        svg_defs: TextIO,  # noqa: ARG002
        multiplied_transform: TMatrix,  # noqa: ARG002
        bounds: TBounds,  # noqa: ARG002
        transformed_bounds: TBounds,  # noqa: ARG002
    ) -> str:
        return ' fill="none"'

    def to_dict(self) -> dict[str, Any]:
        return {'type': 'none'}


@dataclasses.dataclass(frozen=True)
class SolidFill(Fill):
    solid_color: Color

    def color(self) -> Color:
        return self.solid_color

    def render(
        self,
        svg_defs: TextIO,  # noqa: ARG002
        multiplied_transform: TMatrix,  # noqa: ARG002
        bounds: TBounds,  # noqa: ARG002
        transformed_bounds: TBounds,  # noqa: ARG002
    ) -> str:
        color = self.solid_color
        return f' fill="#{color.rgb_hex()}"' + format_opacity('fill', color.a())

    def to_dict(self) -> dict[str, Any]:
        return {'type': 'solid', 'color': self.solid_color.to_dict()}


@dataclasses.dataclass(frozen=True)
class GradientFill(Fill):
    gradient: Gradient

    def color(self) -> Color:
        # TODO: sample the gradient instead of using the first stop
        stops = self.gradient.stops
        if stops and stops[0][1] is not None:
            return stops[0][1]
        return Color.BLACK

    def render(
        self,
        svg_defs: TextIO,
        multiplied_transform: TMatrix,
        bounds: TBounds,
        transformed_bounds: TBounds,
    ) -> str:
        self.gradient.render_defs(
            svg_defs, multiplied_transform, bounds, transformed_bounds
        )
        return f''' fill="url('#{self.gradient.identity}')"'''

    def to_dict(self) -> dict[str, Any]:
        return {'type': 'gradient', 'gradient': self.gradient.to_dict()}


class LineCap(enum.Enum):
    """Shape at the ends of open stroked subpaths."""

    BUTT = 'butt'
    ROUND = 'round'
    SQUARE = 'square'

    def __str__(self) -> str:
        return self.value


class LineJoin(enum.Enum):
    """Shape at the corners of stroked paths."""

    MITER = 'miter'
    BEVEL = 'bevel'
    ROUND = 'round'

    def __str__(self) -> str:
        return self.value


# Opaque black, alpha 255.
_DEFAULT_STROKE_COLOR = Color.from_rgba8(0, 0, 0, 255)


@dataclasses.dataclass(frozen=True)
class Stroke:
    """The stroke (outline) style of an SVG element.

    A stroke without a color renders no attributes at all, which is
    not the same as a stroke with zero weight.

    The `with_*` methods return an updated copy. The ones that parse
    text return None when the text is invalid, leaving the original
    stroke untouched.
    """

    color: Color | None = _DEFAULT_STROKE_COLOR
    weight: float = 0.0
    dash_lengths: tuple[float, ...] = (0.0,)
    dash_offset: float = 0.0
    line_cap: LineCap = LineCap.BUTT
    line_join: LineJoin = LineJoin.MITER
    line_join_miter_limit: float = 4.0

    def format_dash_lengths(self) -> str:
        return ', '.join(format_float(v) for v in self.dash_lengths)

    def line_cap_index(self) -> int:
        return list(LineCap).index(self.line_cap)

    def line_join_index(self) -> int:
        return list(LineJoin).index(self.line_join)

    def render(self) -> str:
        """Provide the SVG attributes for the stroke."""
        if self.color is None:
            return ''
        return (
            f' stroke="#{self.color.rgb_hex()}"'
            f'{format_opacity("stroke", self.color.a())}'
            f' stroke-width="{format_float(self.weight)}"'
            f' stroke-dasharray="{self.format_dash_lengths()}"'
            f' stroke-dashoffset="{format_float(self.dash_offset)}"'
            f' stroke-linecap="{self.line_cap}"'
            f' stroke-linejoin="{self.line_join}"'
            f' stroke-miterlimit="{format_float(self.line_join_miter_limit)}" '
        )

    def with_color(self, color: str | None) -> Self | None:
        """Set the color from hex text (RGBA or RGB form).

        Args:
            color: Hex color text, or None to remove the color.

        Returns:
            An updated stroke or None if the color can't be parsed.
        """
        if color is None:
            return dataclasses.replace(self, color=None)
        new_color = Color.from_rgba_str(color) or Color.from_rgb_str(color)
        if new_color is None:
            logger.debug('Invalid stroke color: %r', color)
            return None
        return dataclasses.replace(self, color=new_color)

    def with_weight(self, weight: float) -> Self:
        return dataclasses.replace(self, weight=weight)

    def with_dash_lengths(self, dash_lengths: str) -> Self | None:
        """Set the dash pattern from comma and/or space separated numbers.

        Returns:
            An updated stroke or None if any length can't be parsed.
        """
        lengths = []
        for token in re.split('[, ]', dash_lengths):
            if not token:
                continue
            if not _RE_FLOAT.fullmatch(token):
                logger.debug('Invalid dash lengths: %r', dash_lengths)
                return None
            lengths.append(float(token))
        return dataclasses.replace(self, dash_lengths=tuple(lengths))

    def with_dash_offset(self, dash_offset: float) -> Self:
        return dataclasses.replace(self, dash_offset=dash_offset)

    def with_line_cap(self, line_cap: LineCap) -> Self:
        return dataclasses.replace(self, line_cap=line_cap)

    def with_line_join(self, line_join: LineJoin) -> Self:
        return dataclasses.replace(self, line_join=line_join)

    def with_line_join_miter_limit(self, limit: float) -> Self:
        return dataclasses.replace(self, line_join_miter_limit=limit)

    def to_dict(self) -> dict[str, Any]:
        return {
            'color': _color_to_dict(self.color),
            'weight': self.weight,
            'dash_lengths': list(self.dash_lengths),
            'dash_offset': self.dash_offset,
            'line_cap': self.line_cap.name,
            'line_join': self.line_join.name,
            'line_join_miter_limit': self.line_join_miter_limit,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create a stroke from serialized data.

        Missing fields take their default values.

        Raises:
            StyleError: if the data is malformed.
        """
        try:
            stroke = cls()
            if 'color' in data:
                stroke = dataclasses.replace(
                    stroke, color=_color_from_dict(data['color'])
                )
            return dataclasses.replace(
                stroke,
                weight=float(data.get('weight', stroke.weight)),
                dash_lengths=tuple(
                    float(v)
                    for v in data.get('dash_lengths', stroke.dash_lengths)
                ),
                dash_offset=float(data.get('dash_offset', stroke.dash_offset)),
                line_cap=_enum_from_name(
                    LineCap, data.get('line_cap', stroke.line_cap.name)
                ),
                line_join=_enum_from_name(
                    LineJoin, data.get('line_join', stroke.line_join.name)
                ),
                line_join_miter_limit=float(
                    data.get(
                        'line_join_miter_limit', stroke.line_join_miter_limit
                    )
                ),
            )
        except (AttributeError, TypeError, ValueError) as e:
            raise StyleError(f'Invalid stroke: {data!r}') from e


class PathStyle:
    """Fill and optional stroke of a path."""

    def __init__(
        self, stroke: Stroke | None = None, fill: Fill | None = None
    ) -> None:
        self._stroke = stroke
        self._fill = fill if fill is not None else NoFill()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PathStyle):
            return NotImplemented
        return self._stroke == other._stroke and self._fill == other._fill

    def __repr__(self) -> str:
        return f'PathStyle(stroke={self._stroke!r}, fill={self._fill!r})'

    def fill(self) -> Fill:
        return self._fill

    def stroke(self) -> Stroke | None:
        """A copy of the current stroke, or None."""
        if self._stroke is None:
            return None
        return dataclasses.replace(self._stroke)

    def set_fill(self, fill: Fill) -> None:
        self._fill = fill

    def set_stroke(self, stroke: Stroke) -> None:
        self._stroke = stroke

    def clear_fill(self) -> None:
        self._fill = NoFill()

    def clear_stroke(self) -> None:
        self._stroke = None

    def render(
        self,
        view_mode: ViewMode,
        svg_defs: TextIO,
        multiplied_transform: TMatrix,
        bounds: TBounds,
        transformed_bounds: TBounds,
    ) -> str:
        """Render the fill and stroke attributes.

        Outline mode ignores the actual paint and renders no fill
        with a fixed outline stroke.

        Args:
            view_mode: The document view mode.
            svg_defs: Text buffer for gradient def elements.
            multiplied_transform: Shape to document transform.
            bounds: Shape bounding box in local space as (min, max).
            transformed_bounds: Shape bounding box in document space.

        Returns:
            The concatenated fill and stroke attribute fragments.
        """
        if view_mode == ViewMode.OUTLINE:
            fill: Fill = NoFill()
            stroke: Stroke | None = Stroke(
                OUTLINE_STROKE_COLOR, OUTLINE_STROKE_WEIGHT
            )
        else:
            fill = self._fill
            stroke = self._stroke

        fill_attribute = fill.render(
            svg_defs, multiplied_transform, bounds, transformed_bounds
        )
        stroke_attribute = stroke.render() if stroke is not None else ''
        return fill_attribute + stroke_attribute

    def to_dict(self) -> dict[str, Any]:
        return {
            'stroke': None if self._stroke is None else self._stroke.to_dict(),
            'fill': self._fill.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create a path style from serialized data.

        Raises:
            StyleError: if the data is malformed.
        """
        try:
            stroke_data = data.get('stroke')
            fill_data = data.get('fill')
        except AttributeError as e:
            raise StyleError(f'Invalid path style: {data!r}') from e
        stroke = None if stroke_data is None else Stroke.from_dict(stroke_data)
        fill = NoFill() if fill_data is None else Fill.from_dict(fill_data)
        return cls(stroke, fill)

