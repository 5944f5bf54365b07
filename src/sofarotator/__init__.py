"""
SofaRotator
===========
Animated, interactive projection of a tesseract (4D hypercube) onto a 2D screen.

The `model` package holds the geometry pipeline (rotation, projection, assembly,
animation state). The `app` package is a thin PySide6 shell around it.
"""
__version__ = "1.0.0"
