"""Freehand Painter: interactive calligraphy and grid-paint raster tools.

This package contains the two painting sessions (calligraphy, grid paint),
the raster primitives they share, and the cross-cutting utilities beneath
them.

Architecture layers (strict one-way dependency):
    scripts/ → src/{calligraphy,grid_paint}/ → src/canvas/ → src/utils/

Key invariants:
    - One persistent drawing buffer per session; strokes are rasterised
      immediately and irreversibly
    - Buffers are RGBA float32 in [0,1]; exported frames are RGB uint8
    - All geometry in canvas pixels, image frame (top-left origin, +Y down)
    - YAML-only configs, validated with pydantic
    - One update() call is one frame; no operation spans frames except the
      follower and heading filters
"""

__version__ = "1.0.0"
