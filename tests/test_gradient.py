"""Test gradient def rendering."""

from __future__ import annotations

import io
import math

import pytest
from lxml import etree
from svgstyle import affine
from svgstyle.color import Color
from svgstyle.style import Gradient, GradientKind, StyleError

BOUNDS = ((0.0, 0.0), (4.0, 2.0))
TRANSLATE = affine.from_cols_array((1, 0, 0, 1, 10, 20))
TRANSLATED_BOUNDS = ((10.0, 20.0), (14.0, 22.0))


def _gradient(kind: GradientKind, start: tuple, end: tuple) -> Gradient:
    return Gradient.from_colors(
        start, Color.RED, end, Color.BLUE, affine.IDENTITY_MATRIX, 7, kind
    )


def _render(
    gradient: Gradient,
    multiplied_transform: tuple = affine.IDENTITY_MATRIX,
    bounds: tuple = BOUNDS,
    transformed_bounds: tuple = BOUNDS,
) -> str:
    svg_defs = io.StringIO()
    gradient.render_defs(
        svg_defs, multiplied_transform, bounds, transformed_bounds
    )
    return svg_defs.getvalue()


def _parse(defs: str) -> list[etree._Element]:
    return list(etree.fromstring(f'<defs>{defs}</defs>'))


def _matrix(element: etree._Element) -> list[float]:
    text = element.get('gradientTransform')
    assert text.startswith('matrix(')
    assert text.endswith(')')
    return [float(v) for v in text[7:-1].split(',')]


def test_linear() -> None:
    gradient = _gradient(GradientKind.LINEAR, (0.0, 0.5), (1.0, 0.5))
    defs = _render(gradient)
    assert defs.startswith(
        '<linearGradient id="7" x1="0" x2="4" y1="1" y2="1"'
        ' gradientTransform="matrix(0.25,-0,0,0.5,-0,-0)"'
    )
    assert defs.endswith(
        ')"><stop offset="0" stop-color="#ff0000" />'
        '<stop offset="1" stop-color="#0000ff" /></linearGradient>'
    )

    elements = _parse(defs)
    assert len(elements) == 1
    element = elements[0]
    assert element.tag == 'linearGradient'
    assert element.get('id') == '7'
    assert _matrix(element) == [0.25, 0.0, 0.0, 0.5, 0.0, 0.0]
    stops = list(element)
    assert len(stops) == 2
    assert [s.get('offset') for s in stops] == ['0', '1']
    assert [s.get('stop-color') for s in stops] == ['#ff0000', '#0000ff']


def test_radial() -> None:
    gradient = _gradient(GradientKind.RADIAL, (0.5, 0.5), (1.0, 0.5))
    elements = _parse(_render(gradient))
    assert len(elements) == 1
    element = elements[0]
    assert element.tag == 'radialGradient'
    assert element.get('id') == '7'
    assert float(element.get('cx')) == 2
    assert float(element.get('cy')) == 1
    assert float(element.get('r')) == 2
    assert len(element.findall('stop')) == 2


def test_transformed_bounds() -> None:
    gradient = _gradient(GradientKind.LINEAR, (0.0, 0.5), (1.0, 0.5))
    defs = _render(gradient, TRANSLATE, BOUNDS, TRANSLATED_BOUNDS)
    assert 'gradientTransform="matrix(0.25,-0,0,0.5,-2.5,-10)"' in defs
    element = _parse(defs)[0]
    assert float(element.get('x1')) == 10
    assert float(element.get('y1')) == 21
    assert float(element.get('x2')) == 14
    assert float(element.get('y2')) == 21
    assert _matrix(element) == [0.25, 0.0, 0.0, 0.5, -2.5, -10.0]


def test_stops() -> None:
    # Stops without a color are skipped and order is preserved
    gradient = Gradient(
        start=(0.0, 0.0),
        end=(1.0, 1.0),
        stops=((1.0, Color.RED), (0.5, None), (0.25, Color.GREEN)),
        identity=3,
    )
    element = _parse(_render(gradient))[0]
    stops = element.findall('stop')
    assert [s.get('offset') for s in stops] == ['1', '0.25']
    assert [s.get('stop-color') for s in stops] == ['#ff0000', '#00ff00']

    gradient = Gradient(identity=4)
    element = _parse(_render(gradient))[0]
    assert len(element) == 0


def test_appends_to_buffer() -> None:
    gradient = _gradient(GradientKind.LINEAR, (0.0, 0.5), (1.0, 0.5))
    svg_defs = io.StringIO()
    svg_defs.write('<g/>')
    gradient.render_defs(svg_defs, affine.IDENTITY_MATRIX, BOUNDS, BOUNDS)
    gradient.render_defs(svg_defs, affine.IDENTITY_MATRIX, BOUNDS, BOUNDS)
    elements = _parse(svg_defs.getvalue())
    assert [e.tag for e in elements] == [
        'g',
        'linearGradient',
        'linearGradient',
    ]


def test_degenerate_bounds() -> None:
    gradient = _gradient(GradientKind.LINEAR, (0.0, 0.5), (1.0, 0.5))
    flat = ((0.0, 0.0), (0.0, 2.0))
    defs = _render(gradient, affine.IDENTITY_MATRIX, flat, flat)
    element = _parse(defs)[0]
    assert not all(math.isfinite(v) for v in _matrix(element))


def test_dict() -> None:
    gradient = _gradient(GradientKind.RADIAL, (0.5, 0.5), (1.0, 0.5))
    gradient = Gradient(
        start=gradient.start,
        end=gradient.end,
        transform=affine.from_cols_array((2, 0, 0, 2, 1, 1)),
        stops=(*gradient.stops, (0.5, None)),
        identity=gradient.identity,
        kind=gradient.kind,
    )
    data = gradient.to_dict()
    assert data['kind'] == 'RADIAL'
    assert data['transform'] == [2, 0, 0, 2, 1, 1]
    assert Gradient.from_dict(data) == gradient

    with pytest.raises(StyleError):
        Gradient.from_dict({'start': [0, 0]})
    with pytest.raises(StyleError):
        Gradient.from_dict({**data, 'kind': 'CONIC'})
    with pytest.raises(StyleError):
        Gradient.from_dict({**data, 'stops': [[0, {'red': 'x'}]]})
