# src/chip8_core/arch/chip8/instructions/io.py
"""
表示、キーパッド、タイマーに関わる命令の実装。
これらの命令は共有ランタイム状態またはタイマーサブシステムにアクセスします。
"""
import logging

from chip8_core.common.types import KeyState
from chip8_core.arch.chip8.state import FLAG_REGISTER
from .base import (
    ExecutionContext, ClearDisplay, DrawSprite, SkipIfPressed, SkipIfNotPressed,
    SetRegToDelayTimer, BlockOnKeypress, SetDelayTimer, SetSoundTimer,
)

logger = logging.getLogger(__name__)

def execute_clear_display(ctx: ExecutionContext, ins: ClearDisplay) -> None:
    ctx.runtime.clear_display()

# @intent:responsibility Iから高さ分のスプライトを読み出し、(Vx, Vy) を起点にXORで描画します。
# @intent:post-condition 点灯していたピクセルが1つでも消えた場合 VF=1、それ以外は VF=0。
def execute_draw_sprite(ctx: ExecutionContext, ins: DrawSprite) -> None:
    store = ctx.store
    x0 = store.get_register(ins.vx)
    y0 = store.get_register(ins.vy)
    # 描画前にスプライト全体を読み出す（範囲外ならフレームバッファは変更されない）
    sprite = store.read_block(store.index, ins.height)

    collision = False
    for row, bits in enumerate(sprite):
        for column in range(8):
            if bits & (0x80 >> column):
                if ctx.runtime.xor_pixel(x0 + column, y0 + row):
                    collision = True
    store.set_register(FLAG_REGISTER, 1 if collision else 0)

# --- SKP / SKNP ---
def execute_skip_if_pressed(ctx: ExecutionContext, ins: SkipIfPressed) -> None:
    key_id = ctx.store.get_register(ins.vx) & 0x0F
    if ctx.runtime.get_key_state(key_id) is KeyState.PRESSED:
        ctx.store.advance_pc()

def execute_skip_if_not_pressed(ctx: ExecutionContext, ins: SkipIfNotPressed) -> None:
    key_id = ctx.store.get_register(ins.vx) & 0x0F
    if ctx.runtime.get_key_state(key_id) is KeyState.RELEASED:
        ctx.store.advance_pc()

# --- LD Vx, K ---
# @intent:responsibility いずれかのキーが押されるまでエンジンを停止させ、そのキーIDをVxに格納します。
# @intent:rationale 待機中に停止要求があった場合はPCをこの命令に戻し、再開時に再実行されるようにします。
def execute_block_on_keypress(ctx: ExecutionContext, ins: BlockOnKeypress) -> None:
    logger.debug("Waiting for a key press into V%X", ins.vx)
    key_id = ctx.wait_for_key()
    if key_id is None:
        ctx.store.rewind_pc()
        return
    logger.debug("Key %X pressed, stored into V%X", key_id, ins.vx)
    ctx.store.set_register(ins.vx, key_id)

# --- タイマー ---
def execute_set_reg_to_delay_timer(ctx: ExecutionContext, ins: SetRegToDelayTimer) -> None:
    ctx.store.set_register(ins.vx, ctx.timers.get_delay())

def execute_set_delay_timer(ctx: ExecutionContext, ins: SetDelayTimer) -> None:
    ctx.timers.set_delay(ctx.store.get_register(ins.vx))

def execute_set_sound_timer(ctx: ExecutionContext, ins: SetSoundTimer) -> None:
    ctx.timers.set_sound(ctx.store.get_register(ins.vx))
