# src/chip8_core/arch/chip8/instructions/load.py
"""
転送命令（レジスタ、アドレスレジスタ、メモリ間）の実装。
"""
from chip8_core.arch.chip8.state import FONT_START, FONT_GLYPH_SIZE
from .base import (
    ExecutionContext, SetReg, SetRegFromReg, SetIndex, AddToIndex, LoadFontSprite,
    ToDecimal, CopyRegsIntoMemory, CopyRegsFromMemory,
)

def execute_set_reg(ctx: ExecutionContext, ins: SetReg) -> None:
    ctx.store.set_register(ins.vx, ins.byte)

def execute_set_reg_from_reg(ctx: ExecutionContext, ins: SetRegFromReg) -> None:
    ctx.store.set_register(ins.vx, ctx.store.get_register(ins.vy))

def execute_set_index(ctx: ExecutionContext, ins: SetIndex) -> None:
    ctx.store.index = ins.addr

# 16ビットで折り返し、フラグは変化しません。
def execute_add_to_index(ctx: ExecutionContext, ins: AddToIndex) -> None:
    ctx.store.index = ctx.store.index + ctx.store.get_register(ins.vx)

# @intent:responsibility Vxの下位ニブルに対応する組み込みフォントのアドレスをIに設定します。
def execute_load_font_sprite(ctx: ExecutionContext, ins: LoadFontSprite) -> None:
    digit = ctx.store.get_register(ins.vx) & 0x0F
    ctx.store.index = FONT_START + digit * FONT_GLYPH_SIZE

# @intent:responsibility Vxを百の位、十の位、一の位に分解し、I, I+1, I+2 に書き込みます。
def execute_to_decimal(ctx: ExecutionContext, ins: ToDecimal) -> None:
    value = ctx.store.get_register(ins.vx)
    ctx.store.write_block(ctx.store.index, [value // 100, (value // 10) % 10, value % 10])

# V0〜Vx を RAM[I..I+x] へ。Iは変更しません。
def execute_copy_regs_into_memory(ctx: ExecutionContext, ins: CopyRegsIntoMemory) -> None:
    store = ctx.store
    store.write_block(store.index, [store.get_register(r) for r in range(ins.vx + 1)])

def execute_copy_regs_from_memory(ctx: ExecutionContext, ins: CopyRegsFromMemory) -> None:
    store = ctx.store
    for register, value in enumerate(store.read_block(store.index, ins.vx + 1)):
        store.set_register(register, value)
