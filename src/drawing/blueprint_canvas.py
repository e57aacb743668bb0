"""
Blueprint Canvas - paints the blueprint and the render plan, forwards input
"""

from PySide6.QtCore import Qt, QPointF, QRectF
from PySide6.QtGui import QPainter, QPen, QBrush, QColor, QImage, QFont, QPainterPath, QPolygonF
from PySide6.QtWidgets import QWidget

from drawing.blueprint_image import decode_data_url, BlueprintImageError
from drawing.canvas_space import fit_rect
from drawing.drawing_tools import PointerDown, PointerMove, PointerUp, Click, DoubleClick, KeyDown
from drawing.render_pass import build_render_plan, COMMITTED, PREVIEW, PIN, HINT
from utils.debug_logger import debug_logger


_KEY_NAMES = {
    Qt.Key_Escape: 'Escape',
    Qt.Key_Return: 'Enter',
    Qt.Key_Enter: 'Enter',
}


class BlueprintCanvas(QWidget):
    """Canvas widget for drawing areas over a blueprint image"""

    def __init__(self, controller, parent=None):
        super().__init__(parent)
        self.controller = controller
        self._image = QImage()
        self._image_source = None

        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.StrongFocus)
        self.setMinimumSize(480, 360)

        self.committed_pen = QPen(QColor(0, 128, 0), 2, Qt.SolidLine)
        self.preview_pen = QPen(QColor(0, 0, 255), 2, Qt.DashLine)
        self.preview_pen.setDashPattern([3, 2])   # 6px on, 4px off at width 2
        self.pin_brush = QBrush(QColor(0, 0, 255))
        self.label_font = QFont("Arial")
        self.label_font.setPixelSize(14)

        controller.add_listener(self._on_controller_changed)

    def _on_controller_changed(self, controller):
        if controller.blueprint != self._image_source:
            self._load_image(controller.blueprint)
        self.update()

    def _load_image(self, data_url):
        self._image_source = data_url
        self._image = QImage()
        if not data_url:
            return
        try:
            _, data = decode_data_url(data_url)
        except BlueprintImageError as e:
            debug_logger.error("Canvas", "Could not decode blueprint", e)
            return
        if not self._image.loadFromData(data):
            debug_logger.warning("Canvas", "Blueprint bytes are not a readable image")

    def has_image(self):
        return not self._image.isNull()

    # ---------------------- Input ----------------------

    def _event_xy(self, event):
        pos = event.position()
        return pos.x(), pos.y()

    def mousePressEvent(self, event):
        if event.button() == Qt.LeftButton:
            self.setFocus()
            self.controller.handle_event(PointerDown(*self._event_xy(event)))

    def mouseMoveEvent(self, event):
        self.controller.handle_event(PointerMove(*self._event_xy(event)))

    def mouseReleaseEvent(self, event):
        if event.button() == Qt.LeftButton:
            x, y = self._event_xy(event)
            self.controller.handle_event(PointerUp(x, y))
            self.controller.handle_event(Click(x, y))

    def mouseDoubleClickEvent(self, event):
        if event.button() == Qt.LeftButton:
            self.controller.handle_event(DoubleClick(*self._event_xy(event)))

    def keyPressEvent(self, event):
        key = _KEY_NAMES.get(event.key())
        if key is None:
            super().keyPressEvent(event)
            return
        self.controller.handle_event(KeyDown(key))

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self.controller.set_canvas_size(self.width(), self.height())

    # ---------------------- Painting ----------------------

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        try:
            painter.fillRect(self.rect(), QColor(245, 245, 245))
            self.draw_blueprint(painter)
            for item in build_render_plan(self.controller, (self.width(), self.height())):
                self.draw_item(painter, item)
        finally:
            painter.end()

    def draw_blueprint(self, painter):
        if not self.has_image():
            painter.setPen(QColor(120, 120, 120))
            painter.drawText(self.rect(), Qt.AlignCenter, "Open a blueprint image to start measuring")
            return
        fit = fit_rect(self._image.width(), self._image.height(), self.width(), self.height())
        painter.drawImage(QRectF(fit.x, fit.y, fit.width, fit.height), self._image)

    def draw_item(self, painter, item):
        if item.kind == 'text':
            self._draw_text(painter, item)
            return
        if item.kind == 'pin':
            painter.setPen(Qt.NoPen)
            painter.setBrush(self.pin_brush)
            p = item.points[0]
            painter.drawEllipse(QPointF(p.x, p.y), item.radius, item.radius)
            return

        painter.setPen(self.committed_pen if item.style == COMMITTED else self.preview_pen)
        painter.setBrush(Qt.NoBrush)
        points = [QPointF(p.x, p.y) for p in item.points]
        if item.kind == 'rect':
            painter.drawRect(QRectF(points[0], points[1]).normalized())
        elif item.kind == 'circle':
            painter.drawEllipse(points[0], item.radius, item.radius)
        elif item.kind == 'polygon' or (item.kind == 'polyline' and item.closed):
            painter.drawPolygon(QPolygonF(points))
        elif item.kind == 'polyline':
            painter.drawPolyline(QPolygonF(points))

    def _draw_text(self, painter, item):
        color = {
            COMMITTED: QColor(0, 128, 0),
            PREVIEW: QColor(0, 0, 255),
            PIN: QColor(0, 0, 255),
            HINT: QColor(90, 90, 90),
        }.get(item.style, QColor(0, 0, 0))
        p = item.points[0]
        path = QPainterPath()
        path.addText(QPointF(p.x, p.y), self.label_font, item.text)
        # White halo keeps labels readable over line work
        painter.strokePath(path, QPen(QColor(255, 255, 255), 3))
        painter.fillPath(path, color)
