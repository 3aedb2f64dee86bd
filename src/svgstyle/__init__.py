"""SVG paint style rendering.

Turns a shape's paint attributes (fill, stroke, gradient) into SVG
attribute fragments, plus any gradient definitions that have to be
placed in a separate ``<defs>`` container.

The document tree that owns the shapes and assembles the final SVG
lives elsewhere. This package only produces the fragments.
"""

import importlib.metadata

__version__ = importlib.metadata.version('utl-svgstyle')
