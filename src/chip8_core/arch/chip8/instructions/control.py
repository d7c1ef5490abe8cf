# src/chip8_core/arch/chip8/instructions/control.py
"""
制御命令（ジャンプ、サブルーチン、条件スキップ）の実装。

実行時点でPCは既に次の命令を指しています（CPU.stepでPC更新済み）。
"""
from chip8_core.common.errors import DecodeMiss
from .base import (
    ExecutionContext, Jump, CallSubroutine, ReturnFromSubroutine, JumpWithOffset,
    SkipEq, SkipNeq, SkipRegsEq, SkipRegsNeq, InvalidInstruction,
)

# --- JP / CALL / RET ---
def execute_jump(ctx: ExecutionContext, ins: Jump) -> None:
    ctx.store.set_pc(ins.addr)

# @intent:responsibility 戻りアドレス（次の命令）をプッシュしてからジャンプします。
# @intent:post-condition スタックが満杯、またはジャンプ先が不正な場合、状態は変更されません。
def execute_call(ctx: ExecutionContext, ins: CallSubroutine) -> None:
    store = ctx.store
    store.check_pc(ins.addr)
    store.push_return(store.pc)
    store.set_pc(ins.addr)

# @intent:post-condition 戻り先が不正な場合はスタックから取り除かずに失敗します。
def execute_return(ctx: ExecutionContext, ins: ReturnFromSubroutine) -> None:
    store = ctx.store
    address = store.peek_return()
    store.check_pc(address)
    store.pop_return()
    store.set_pc(address)

# Bnnn: nnn + V0
def execute_jump_with_offset(ctx: ExecutionContext, ins: JumpWithOffset) -> None:
    ctx.store.set_pc(ins.addr + ctx.store.get_register(0x0))

# --- 条件スキップ ---
# 条件成立時は2命令分（既に1命令分進んでいるので、さらに1命令分）進めます。
def _skip_if(ctx: ExecutionContext, condition: bool) -> None:
    if condition:
        ctx.store.advance_pc()

def execute_skip_eq(ctx: ExecutionContext, ins: SkipEq) -> None:
    _skip_if(ctx, ctx.store.get_register(ins.vx) == ins.byte)

def execute_skip_neq(ctx: ExecutionContext, ins: SkipNeq) -> None:
    _skip_if(ctx, ctx.store.get_register(ins.vx) != ins.byte)

def execute_skip_regs_eq(ctx: ExecutionContext, ins: SkipRegsEq) -> None:
    store = ctx.store
    _skip_if(ctx, store.get_register(ins.vx) == store.get_register(ins.vy))

def execute_skip_regs_neq(ctx: ExecutionContext, ins: SkipRegsNeq) -> None:
    store = ctx.store
    _skip_if(ctx, store.get_register(ins.vx) != store.get_register(ins.vy))

# @intent:responsibility 未定義オペコードをDecodeMissとして報告します。停止するかどうかはエンジンが決めます。
def execute_invalid(ctx: ExecutionContext, ins: InvalidInstruction) -> None:
    raise DecodeMiss(f"Unrecognized opcode {ins.opcode:#06x}", opcode=ins.opcode)
