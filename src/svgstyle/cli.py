"""Command line tool that renders a serialized path style.

Reads a JSON PathStyle (see PathStyle.to_dict) and writes a JSON object
with the rendered ``attributes`` fragment and the ``defs`` fragment.
"""

from __future__ import annotations

import argparse
import datetime
import gettext
import io
import json
import logging
import pathlib
import sys
from typing import TYPE_CHECKING, Any

from . import affine
from .style import PathStyle, StyleError, ViewMode

if TYPE_CHECKING:
    from geom2d.transform2d import TMatrix

_ = gettext.gettext
logger = logging.getLogger(__name__)

_BOUNDS_LEN = 4


def bounds(value: str) -> tuple[tuple[float, float], tuple[float, float]]:
    """Argparse type: bounding box 'x0,y0,x1,y1' as a (min, max) pair."""
    try:
        values = [float(v) for v in value.replace(',', ' ').split()]
    except ValueError as e:
        raise argparse.ArgumentTypeError(f'Invalid bounds: {value}') from e
    if len(values) != _BOUNDS_LEN:
        raise argparse.ArgumentTypeError(f'Invalid bounds: {value}')
    x0, y0, x1, y1 = values
    return ((x0, y0), (x1, y1))


def view_mode(value: str) -> ViewMode:
    """Argparse type: view mode name."""
    try:
        return ViewMode(value.lower())
    except ValueError as e:
        raise argparse.ArgumentTypeError(
            f'Invalid view mode: {value}'
        ) from e


def svg_transform(value: str) -> TMatrix:
    """Argparse type: SVG transform list."""
    try:
        matrix = affine.parse_transform(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f'Invalid transform: {value}') from e
    if matrix is None:
        raise argparse.ArgumentTypeError(f'Invalid transform: {value}')
    return matrix


def errormsg(
    *args: Any,  # noqa: ANN401
    exit_status: int | None = None,
    **kwargs: Any,  # noqa: ANN401
) -> None:
    """Write an error msg to stderr."""
    print(*args, file=sys.stderr, **kwargs)  # noqa: T201
    if exit_status is not None:
        sys.exit(exit_status)


def _create_log(log_path: str | None, log_level: str | None) -> None:
    """Create a log file for debug output.

    Args:
        log_path: Path to log file. Default is 'svgstyle.log'
            in the user's home directory.
        log_level: Log level:
            'DEBUG', 'INFO', 'WARNING', 'ERROR', or 'CRITICAL'.
    """
    path = (
        pathlib.Path(log_path).expanduser()
        if log_path
        else pathlib.Path('~/svgstyle.log').expanduser()
    )
    logging.basicConfig(
        filename=path,
        filemode='w',
        level=(log_level or 'INFO').upper(),
    )
    logger.info(
        'Log started %s, level=%s',
        datetime.datetime.now(tz=datetime.timezone.utc),
        logging.getLevelName(logger.getEffectiveLevel()),
    )
    logger.info('Python version: %s', sys.version)


def _process_options(argv: list | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='svgstyle', description=_('Render a path style to SVG attributes')
    )
    parser.add_argument(
        '--view-mode',
        type=view_mode,
        default=ViewMode.NORMAL,
        help=_('View mode: normal, outline, or pixels'),
    )
    parser.add_argument(
        '--bounds',
        type=bounds,
        default=((0.0, 0.0), (1.0, 1.0)),
        help=_('Shape bounding box in local space: x0,y0,x1,y1'),
    )
    parser.add_argument(
        '--transformed-bounds',
        type=bounds,
        default=None,
        help=_('Shape bounding box in document space. Default is --bounds'),
    )
    parser.add_argument(
        '--transform',
        type=svg_transform,
        default=affine.IDENTITY_MATRIX,
        help=_('Shape to document transform as an SVG transform list'),
    )
    parser.add_argument(
        '--output-file', '-o', type=pathlib.Path, help=_('Output file.')
    )
    parser.add_argument(
        '--log-create', action='store_true', help=_('Create log file')
    )
    parser.add_argument('--log-level', default='DEBUG', help=_('Log level'))
    parser.add_argument(
        '--log-filename', default=None, help=_('Full pathname of log file')
    )
    parser.add_argument(
        'input_file',
        nargs='?',
        type=pathlib.Path,
        help=_('JSON path style file. Default is stdin'),
    )
    return parser.parse_args(argv)


def main(argv: list | None = None) -> None:
    """Render a serialized path style."""
    options = _process_options(argv)
    if options.log_create:
        _create_log(options.log_filename, options.log_level)

    try:
        if options.input_file:
            with options.input_file.open(encoding='utf-8') as f:
                data = json.load(f)
        else:
            data = json.load(sys.stdin)
        style = PathStyle.from_dict(data)
    except (OSError, json.JSONDecodeError, StyleError) as e:
        logger.debug('Unable to read path style', exc_info=True)
        errormsg(_('Unable to read path style: ') + str(e), exit_status=1)
        return

    transformed_bounds = options.transformed_bounds or options.bounds
    svg_defs = io.StringIO()
    attributes = style.render(
        options.view_mode,
        svg_defs,
        options.transform,
        options.bounds,
        transformed_bounds,
    )
    logger.info('attributes: %s', attributes)

    result = json.dumps({'attributes': attributes, 'defs': svg_defs.getvalue()})
    if options.output_file:
        options.output_file.write_text(result + '\n', encoding='utf-8')
    else:
        print(result)  # noqa: T201


if __name__ == '__main__':
    main()
