# src/chip8_core/ui/main_window.py
"""
メインウィンドウの実装。
描画ウィジェットを保持し、キー入力を共有キーパッド状態に反映し、エンジンをバックグラウンドで実行します。
"""
from typing import Optional, Set

from PySide6.QtWidgets import QMainWindow
from PySide6.QtCore import QThread, QTimer, Signal
from PySide6.QtGui import QCloseEvent, QKeyEvent

from chip8_core.arch.chip8.cpu import Chip8Cpu
from chip8_core.common.types import HaltDiagnostic
from chip8_core.config.models import DisplayConfig, KeypadConfig
from chip8_core.peripherals.keypad import KeypadPoller
from chip8_core.runtime.shared import SharedRuntimeState
from .display_view import DisplayView

# @intent:responsibility エンジンのrunメソッドをバックグラウンドで実行します。
class EngineThread(QThread):
    """
    Chip8Cpu.run() をノンブロッキングで実行するためのスレッド。
    """
    halted = Signal(object)

    def __init__(self, cpu: Chip8Cpu):
        super().__init__()
        self.cpu = cpu

    def run(self):
        diagnostic = self.cpu.run()
        self.halted.emit(diagnostic)

# @intent:responsibility 描画と入力を担う外部コラボレータをまとめたウィンドウ。
class Chip8Window(QMainWindow):
    def __init__(self, title: str, cpu: Chip8Cpu, runtime: SharedRuntimeState,
                 display: Optional[DisplayConfig] = None, keypad: Optional[KeypadConfig] = None, parent=None):
        super(Chip8Window, self).__init__(parent)
        display = display or DisplayConfig()
        keypad = keypad or KeypadConfig()
        self.setWindowTitle(title)

        self.cpu = cpu
        self.display_view = DisplayView(runtime, display.scale, display.refresh_hz, self)
        self.setCentralWidget(self.display_view)
        self.resize(self.display_view.sizeHint())

        self._held_keys: Set[str] = set()
        self._poller = KeypadPoller(runtime, keypad.layout)
        self._poll_timer = QTimer(self)
        self._poll_timer.setInterval(max(1, int(keypad.poll_interval * 1000)))
        self._poll_timer.timeout.connect(self.poll_keys)
        self._poll_timer.start()

        self.engine_thread = EngineThread(cpu)
        self.engine_thread.halted.connect(self._on_halted)

    def start(self) -> None:
        self.engine_thread.start()

    # @intent:responsibility 1ポーリング周期分、押されているキーを共有キーパッドに書き込みます。
    def poll_keys(self) -> None:
        self._poller.poll(self._held_keys)

    @staticmethod
    def _key_name(event: QKeyEvent) -> Optional[str]:
        key = event.key()
        if 0x20 < key < 0x7F:
            return chr(key).upper()
        return None

    def keyPressEvent(self, event: QKeyEvent) -> None:
        name = self._key_name(event)
        if name is not None:
            self._held_keys.add(name)
        super().keyPressEvent(event)

    def keyReleaseEvent(self, event: QKeyEvent) -> None:
        name = self._key_name(event)
        if name is not None and not event.isAutoRepeat():
            self._held_keys.discard(name)
        super().keyReleaseEvent(event)

    def _on_halted(self, diagnostic: Optional[HaltDiagnostic]) -> None:
        if diagnostic is not None:
            self.statusBar().showMessage(str(diagnostic))

    def closeEvent(self, event: QCloseEvent) -> None:
        self._poll_timer.stop()
        self.cpu.stop()
        self.engine_thread.wait(2000)
        super().closeEvent(event)
