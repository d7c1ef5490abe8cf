# src/chip8_core/arch/chip8/instructions/alu.py
"""
算術論理演算命令の実装。

フラグレジスタ(VF)を更新する命令は、オペランドを読み出してからフラグ、結果の順に書き込みます。
そのため宛先がVFの場合は結果の値が残ります。
"""
from chip8_core.arch.chip8.state import FLAG_REGISTER
from .base import (
    ExecutionContext, AddReg, BitwiseOr, BitwiseAnd, BitwiseXor, AddWithCarry,
    Subtract, SubtractReversed, ShiftRight, ShiftLeft, Random,
)

# @intent:utility_function フラグを設定してから8ビットに丸めた結果を格納します。
def _store_with_flag(ctx: ExecutionContext, vx: int, result: int, flag: bool) -> None:
    ctx.store.set_register(FLAG_REGISTER, 1 if flag else 0)
    ctx.store.set_register(vx, result & 0xFF)

# --- ADD Vx, byte --- (フラグ変化なし)
def execute_add_reg(ctx: ExecutionContext, ins: AddReg) -> None:
    store = ctx.store
    store.set_register(ins.vx, (store.get_register(ins.vx) + ins.byte) & 0xFF)

# --- OR / AND / XOR ---
def execute_or(ctx: ExecutionContext, ins: BitwiseOr) -> None:
    store = ctx.store
    store.set_register(ins.vx, store.get_register(ins.vx) | store.get_register(ins.vy))

def execute_and(ctx: ExecutionContext, ins: BitwiseAnd) -> None:
    store = ctx.store
    store.set_register(ins.vx, store.get_register(ins.vx) & store.get_register(ins.vy))

def execute_xor(ctx: ExecutionContext, ins: BitwiseXor) -> None:
    store = ctx.store
    store.set_register(ins.vx, store.get_register(ins.vx) ^ store.get_register(ins.vy))

# --- ADD Vx, Vy ---
# VF = 1 (和が255を超えた場合)
def execute_add_with_carry(ctx: ExecutionContext, ins: AddWithCarry) -> None:
    v1 = ctx.store.get_register(ins.vx)
    v2 = ctx.store.get_register(ins.vy)
    res = v1 + v2
    _store_with_flag(ctx, ins.vx, res, res > 0xFF)

# --- SUB / SUBN ---
# VF = 1 (借りが発生しない場合: 被減数 >= 減数)
def execute_subtract(ctx: ExecutionContext, ins: Subtract) -> None:
    v1 = ctx.store.get_register(ins.vx)
    v2 = ctx.store.get_register(ins.vy)
    _store_with_flag(ctx, ins.vx, v1 - v2, v1 >= v2)

def execute_subtract_reversed(ctx: ExecutionContext, ins: SubtractReversed) -> None:
    v1 = ctx.store.get_register(ins.vx)
    v2 = ctx.store.get_register(ins.vy)
    _store_with_flag(ctx, ins.vx, v2 - v1, v2 >= v1)

# --- SHR / SHL --- (Vyは使用しない)
def execute_shift_right(ctx: ExecutionContext, ins: ShiftRight) -> None:
    v1 = ctx.store.get_register(ins.vx)
    _store_with_flag(ctx, ins.vx, v1 >> 1, (v1 & 0x01) != 0)

def execute_shift_left(ctx: ExecutionContext, ins: ShiftLeft) -> None:
    v1 = ctx.store.get_register(ins.vx)
    _store_with_flag(ctx, ins.vx, v1 << 1, (v1 & 0x80) != 0)

# --- RND ---
def execute_random(ctx: ExecutionContext, ins: Random) -> None:
    ctx.store.set_register(ins.vx, ctx.rng.randrange(0x100) & ins.byte)
