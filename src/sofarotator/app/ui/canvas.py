from __future__ import annotations

from typing import Sequence

from PySide6.QtCore import Qt, QPointF, Signal
from PySide6.QtGui import (
    QPainter, QPainterPath, QPen, QBrush, QColor, QLinearGradient, QPaintEvent, QResizeEvent,
)
from PySide6.QtWidgets import QWidget, QSizePolicy

from sofarotator.model.geometry_primitives import ScreenPoint, Viewport, calculate_opacity
from sofarotator.model.state import TesseractFrame
from sofarotator.model.tesseract import Tesseract, VisualizationMode

Topology = Sequence[Sequence[int]]

# -------------------------------------------------------------------------------
# Palette
# -------------------------------------------------------------------------------

BACKGROUND = QColor("black")
INNER_COLOR = QColor("cyan")
OUTER_COLOR = QColor("blue")
SECTION_COLOR = QColor("#9C27B0")  # purple
SECTION_ACCENT = QColor("#E91E63")  # pink

EDGE_WIDTH = 2.0
FACE_OUTLINE_WIDTH = 1.5


def _with_alpha(color: QColor, alpha: float) -> QColor:
    c = QColor(color)
    c.setAlphaF(max(0.0, min(1.0, alpha)))
    return c


def _point(p: ScreenPoint) -> QPointF:
    return QPointF(p.x, p.y)


def _mean_depth(points: Sequence[ScreenPoint]) -> float:
    return sum(p.depth for p in points) / len(points)


class TesseractCanvas(QWidget):
    """
    Draws TesseractFrames with depth-based opacity.

    The canvas only paints; it never computes geometry. It reports its size
    through `viewport_changed` so the store can project for it.
    """
    viewport_changed = Signal(object)

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self.setMinimumSize(320, 320)
        self.setAttribute(Qt.WidgetAttribute.WA_OpaquePaintEvent)
        self._frame: TesseractFrame | None = None

    def set_frame(self, frame: TesseractFrame) -> None:
        self._frame = frame
        self.update()

    def viewport(self) -> Viewport:
        return Viewport(max(1, self.width()), max(1, self.height()))

    # ---- Qt events ----

    def resizeEvent(self, event: QResizeEvent) -> None:
        super().resizeEvent(event)
        self.viewport_changed.emit(self.viewport())

    def paintEvent(self, event: QPaintEvent) -> None:
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.fillRect(self.rect(), BACKGROUND)

        frame = self._frame
        if frame is not None:
            match frame.visualization_mode:
                case VisualizationMode.WIREFRAME:
                    self._draw_wireframe(painter, frame.tesseract, frame.topology)
                case VisualizationMode.SOLID:
                    self._draw_solid(painter, frame.tesseract, frame.topology)

            if frame.cross_section is not None:
                self._draw_cross_section(painter, frame.cross_section, frame.scale)

        painter.end()

    # ---- modes ----

    def _draw_wireframe(self, painter: QPainter, tesseract: Tesseract, edges: Topology) -> None:
        # back to front: connections, outer cube, inner cube
        self._draw_connections(painter, tesseract)
        self._draw_edges(painter, tesseract.outer, edges, OUTER_COLOR)
        self._draw_edges(painter, tesseract.inner, edges, INNER_COLOR)

    def _draw_solid(self, painter: QPainter, tesseract: Tesseract, faces: Topology) -> None:
        self._draw_faces(painter, tesseract.outer, faces, OUTER_COLOR)
        self._draw_faces(painter, tesseract.inner, faces, INNER_COLOR)
        self._draw_connections(painter, tesseract, subtle=True)

    # ---- primitives ----

    @staticmethod
    def _gradient_pen(start: QPointF, end: QPointF, c0: QColor, c1: QColor, width: float) -> QPen:
        gradient = QLinearGradient(start, end)
        gradient.setColorAt(0.0, c0)
        gradient.setColorAt(1.0, c1)
        pen = QPen(QBrush(gradient), width)
        pen.setCapStyle(Qt.PenCapStyle.RoundCap)
        return pen

    def _draw_connections(self, painter: QPainter, tesseract: Tesseract, subtle: bool = False) -> None:
        factor = 0.3 if subtle else 0.8
        for inner, outer in tesseract.connections():
            opacity = calculate_opacity((inner.depth + outer.depth) / 2.0) * factor
            start, end = _point(inner), _point(outer)
            painter.setPen(self._gradient_pen(
                start, end,
                _with_alpha(OUTER_COLOR, opacity * 0.8),
                _with_alpha(INNER_COLOR, opacity * 0.6),
                EDGE_WIDTH,
            ))
            painter.drawLine(start, end)

    def _draw_edges(
        self, painter: QPainter, corners: Sequence[ScreenPoint], edges: Topology, color: QColor
    ) -> None:
        for i, j in edges:
            a, b = corners[i], corners[j]
            opacity = calculate_opacity((a.depth + b.depth) / 2.0)
            start, end = _point(a), _point(b)
            painter.setPen(self._gradient_pen(
                start, end,
                _with_alpha(color, opacity),
                _with_alpha(color, opacity * 0.8),
                EDGE_WIDTH,
            ))
            painter.drawLine(start, end)

    def _draw_faces(
        self, painter: QPainter, corners: Sequence[ScreenPoint], faces: Topology, color: QColor
    ) -> None:
        for face in faces:
            points = [corners[i] for i in face]
            opacity = calculate_opacity(_mean_depth(points))

            path = QPainterPath(_point(points[0]))
            for p in points[1:]:
                path.lineTo(_point(p))
            path.closeSubpath()

            gradient = QLinearGradient(_point(points[0]), _point(points[2]))
            gradient.setColorAt(0.0, _with_alpha(color, opacity * 0.3))
            gradient.setColorAt(1.0, _with_alpha(color, opacity * 0.2))
            painter.fillPath(path, QBrush(gradient))
            painter.strokePath(path, QPen(_with_alpha(color, opacity), FACE_OUTLINE_WIDTH))

    def _draw_cross_section(self, painter: QPainter, corners: Sequence[ScreenPoint], scale: float) -> None:
        opacity = calculate_opacity(_mean_depth(corners))

        path = QPainterPath(_point(corners[0]))
        for p in corners[1:]:
            path.lineTo(_point(p))
        path.closeSubpath()

        cx, cy = self.viewport().center
        half = scale / 2.0
        gradient = QLinearGradient(QPointF(cx - half, cy - half), QPointF(cx + half, cy + half))
        gradient.setColorAt(0.0, _with_alpha(SECTION_COLOR, opacity * 0.3))
        gradient.setColorAt(1.0, _with_alpha(SECTION_ACCENT, opacity * 0.2))
        painter.fillPath(path, QBrush(gradient))
        painter.strokePath(path, QPen(_with_alpha(SECTION_COLOR, opacity), EDGE_WIDTH))
