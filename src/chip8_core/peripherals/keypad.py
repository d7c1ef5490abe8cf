# src/chip8_core/peripherals/keypad.py
"""
入力コラボレータ用のキーパッドマッピング。

論理キー（キーボードのキー名）からキーIDへの対応を保持し、
ポーリングの度に16キー全ての状態を書き込みます（押されていないキーは毎回Releasedに戻す）。
"""
from typing import Dict, Iterable, Sequence

from chip8_core.common.types import KeyState
from chip8_core.runtime.shared import SharedRuntimeState, KEY_COUNT

# @intent:constant ID 0〜15 に対応する論理キー。
DEFAULT_KEY_LAYOUT = (
    "X", "1", "2", "3",
    "Q", "W", "E", "A",
    "S", "D", "Z", "C",
    "4", "R", "F", "V",
)

# @intent:responsibility 観測された押下キーの集合を、共有キーパッド状態に反映します。
class KeypadPoller:
    def __init__(self, runtime: SharedRuntimeState, layout: Sequence[str] = DEFAULT_KEY_LAYOUT):
        if len(layout) != KEY_COUNT:
            raise ValueError(f"Key layout must have {KEY_COUNT} entries, got {len(layout)}.")
        self._runtime = runtime
        self._key_ids: Dict[str, int] = {name.upper(): key_id for key_id, name in enumerate(layout)}

    def key_id(self, name: str) -> int:
        """未割り当てのキーには -1 を返します。"""
        return self._key_ids.get(name.upper(), -1)

    # @intent:responsibility 1ポーリング周期分の書き込みを行います。
    # @intent:post-condition 16キー全てが Pressed か Released のどちらかで書き込まれます。
    def poll(self, pressed_names: Iterable[str]) -> None:
        pressed = {self.key_id(name) for name in pressed_names}
        for key_id in range(KEY_COUNT):
            state = KeyState.PRESSED if key_id in pressed else KeyState.RELEASED
            self._runtime.set_key_state(key_id, state)
