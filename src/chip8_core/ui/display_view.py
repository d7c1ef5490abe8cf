# src/chip8_core/ui/display_view.py
"""
フレームバッファの描画ウィジェット。

共有ランタイム状態を読み出すだけで、フレームバッファを変更することはありません。
"""
from PySide6.QtWidgets import QWidget
from PySide6.QtCore import QSize, QTimer
from PySide6.QtGui import QPainter, QColor, QPaintEvent

from chip8_core.runtime.shared import SharedRuntimeState

COLOR_OFF = QColor("#000000")
COLOR_ON = QColor("#FFFFFF")

# @intent:responsibility 一定周期でフレームバッファを読み出し、拡大して描画します。
class DisplayView(QWidget):
    def __init__(self, runtime: SharedRuntimeState, scale: int = 10, refresh_hz: float = 60.0, parent=None):
        super().__init__(parent)
        self._runtime = runtime
        self._scale = max(1, scale)
        self.setMinimumSize(runtime.width, runtime.height)

        self._refresh_timer = QTimer(self)
        self._refresh_timer.setInterval(max(1, int(1000 / refresh_hz)))
        self._refresh_timer.timeout.connect(self.update)
        self._refresh_timer.start()

    def sizeHint(self) -> QSize:
        return QSize(self._runtime.width * self._scale, self._runtime.height * self._scale)

    # @intent:rationale ウィンドウサイズに合わせてセルの大きさを計算し、点灯セルだけを塗ります。
    def paintEvent(self, event: QPaintEvent) -> None:
        framebuffer = self._runtime.get_framebuffer()
        cell_w = self.width() / self._runtime.width
        cell_h = self.height() / self._runtime.height

        painter = QPainter(self)
        painter.fillRect(self.rect(), COLOR_OFF)
        for y, row in enumerate(framebuffer):
            for x, lit in enumerate(row):
                if lit:
                    painter.fillRect(int(x * cell_w), int(y * cell_h),
                                     max(1, int(cell_w + 0.5)), max(1, int(cell_h + 0.5)), COLOR_ON)
        painter.end()
