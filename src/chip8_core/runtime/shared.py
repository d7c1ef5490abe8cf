# src/chip8_core/runtime/shared.py
"""
共有ランタイム状態。

フレームバッファ（ピクセルグリッド）とキーパッド（16キー）を保持し、
実行エンジン、外部レンダラ、外部入力源の3者で共有されます。
全ての操作は短い排他区間を1回だけ取得し、ロックを保持したまま待機することはありません。
"""
import threading
from typing import List, Optional

from chip8_core.common.types import KeyState
from chip8_core.common.errors import OutOfBounds

DEFAULT_WIDTH = 80
DEFAULT_HEIGHT = 64
KEY_COUNT = 16

# @intent:responsibility フレームバッファとキーパッドへのスレッドセーフな細粒度アクセスを提供します。
# @intent:rationale 内部のグリッドは直接公開せず、get/setとコピーのみを返します。
class SharedRuntimeState:
    def __init__(self, width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT):
        if width <= 0 or height <= 0:
            raise ValueError(f"Invalid framebuffer geometry {width}x{height}.")
        self._width = width
        self._height = height
        self._lock = threading.Lock()
        self._pixels: List[List[bool]] = [[False] * width for _ in range(height)]
        self._keys: List[KeyState] = [KeyState.RELEASED] * KEY_COUNT

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    # --- フレームバッファ ---
    # 座標は幅/高さで折り返します（範囲エラーにはしません）。
    def set_pixel(self, x: int, y: int, state: bool) -> None:
        with self._lock:
            self._pixels[y % self._height][x % self._width] = state

    def get_pixel(self, x: int, y: int) -> bool:
        with self._lock:
            return self._pixels[y % self._height][x % self._width]

    # @intent:responsibility ピクセルを反転し、点灯していたピクセルが消えた（衝突）場合にTrueを返します。
    def xor_pixel(self, x: int, y: int) -> bool:
        with self._lock:
            row = self._pixels[y % self._height]
            previous = row[x % self._width]
            row[x % self._width] = not previous
            return previous

    def clear_display(self) -> None:
        with self._lock:
            self._pixels = [[False] * self._width for _ in range(self._height)]

    # @intent:responsibility レンダラ向けに行優先のコピーを返します。
    def get_framebuffer(self) -> List[List[bool]]:
        with self._lock:
            return [list(row) for row in self._pixels]

    # --- キーパッド ---
    @staticmethod
    def _check_key(key_id: int) -> None:
        if not 0 <= key_id < KEY_COUNT:
            raise OutOfBounds(f"Key id {key_id} out of range 0x0-0xF.")

    def set_key_state(self, key_id: int, state: KeyState) -> None:
        self._check_key(key_id)
        with self._lock:
            self._keys[key_id] = state

    def get_key_state(self, key_id: int) -> KeyState:
        self._check_key(key_id)
        with self._lock:
            return self._keys[key_id]

    # @intent:return 押されているキーのうち最小のID。押されていなければNone。
    def pressed_key(self) -> Optional[int]:
        with self._lock:
            for key_id, state in enumerate(self._keys):
                if state is KeyState.PRESSED:
                    return key_id
        return None
