# src/chip8_core/arch/chip8/instructions/maps.py
"""
オペコードと命令実装のマッピング定義。

デコードは上位4ビットで振り分け、0x0/0x8/0xE/0xF 系列では
2次キー（オペコード全体、下位ニブル、下位バイト）で具体的なバリアントを選びます。
"""
from typing import Callable, Dict, Type

from . import alu, control, io, load
from .base import (
    Instruction, addr_of, x_of, y_of, byte_of, nibble_of,
    ClearDisplay, ReturnFromSubroutine, Jump, CallSubroutine, SkipEq, SkipNeq,
    SkipRegsEq, SetReg, AddReg, SetRegFromReg, BitwiseOr, BitwiseAnd, BitwiseXor,
    AddWithCarry, Subtract, ShiftRight, SubtractReversed, ShiftLeft, SkipRegsNeq,
    SetIndex, JumpWithOffset, Random, DrawSprite, SkipIfPressed, SkipIfNotPressed,
    SetRegToDelayTimer, BlockOnKeypress, SetDelayTimer, SetSoundTimer, AddToIndex,
    LoadFontSprite, ToDecimal, CopyRegsIntoMemory, CopyRegsFromMemory, InvalidInstruction,
)

# @intent:map 0x0系列: オペコード全体で識別します。
SYSTEM_MAP: Dict[int, Type[Instruction]] = {
    0x00E0: ClearDisplay,
    0x00EE: ReturnFromSubroutine,
}

# @intent:map 0x8系列: 下位ニブルで識別します。
ALU_MAP: Dict[int, Type[Instruction]] = {
    0x0: SetRegFromReg,
    0x1: BitwiseOr,
    0x2: BitwiseAnd,
    0x3: BitwiseXor,
    0x4: AddWithCarry,
    0x5: Subtract,
    0x6: ShiftRight,
    0x7: SubtractReversed,
    0xE: ShiftLeft,
}

# @intent:map 0xE系列: 下位バイトで識別します。
KEY_MAP: Dict[int, Type[Instruction]] = {
    0x9E: SkipIfPressed,
    0xA1: SkipIfNotPressed,
}

# @intent:map 0xF系列: 下位バイトで識別します。
MISC_MAP: Dict[int, Type[Instruction]] = {
    0x07: SetRegToDelayTimer,
    0x0A: BlockOnKeypress,
    0x15: SetDelayTimer,
    0x18: SetSoundTimer,
    0x1E: AddToIndex,
    0x29: LoadFontSprite,
    0x33: ToDecimal,
    0x55: CopyRegsIntoMemory,
    0x65: CopyRegsFromMemory,
}

def _decode_system(opcode: int) -> Instruction:
    variant = SYSTEM_MAP.get(opcode)
    return variant() if variant else InvalidInstruction(opcode)

def _decode_alu(opcode: int) -> Instruction:
    variant = ALU_MAP.get(nibble_of(opcode))
    return variant(x_of(opcode), y_of(opcode)) if variant else InvalidInstruction(opcode)

def _decode_key(opcode: int) -> Instruction:
    variant = KEY_MAP.get(byte_of(opcode))
    return variant(x_of(opcode)) if variant else InvalidInstruction(opcode)

def _decode_misc(opcode: int) -> Instruction:
    variant = MISC_MAP.get(byte_of(opcode))
    return variant(x_of(opcode)) if variant else InvalidInstruction(opcode)

# @intent:map 上位4ビットからデコード関数へのマッピングテーブル。16エントリ全てを網羅します。
DECODE_MAP: Dict[int, Callable[[int], Instruction]] = {
    0x0: _decode_system,
    0x1: lambda op: Jump(addr_of(op)),
    0x2: lambda op: CallSubroutine(addr_of(op)),
    0x3: lambda op: SkipEq(x_of(op), byte_of(op)),
    0x4: lambda op: SkipNeq(x_of(op), byte_of(op)),
    0x5: lambda op: SkipRegsEq(x_of(op), y_of(op)),
    0x6: lambda op: SetReg(x_of(op), byte_of(op)),
    0x7: lambda op: AddReg(x_of(op), byte_of(op)),
    0x8: _decode_alu,
    0x9: lambda op: SkipRegsNeq(x_of(op), y_of(op)),
    0xA: lambda op: SetIndex(addr_of(op)),
    0xB: lambda op: JumpWithOffset(addr_of(op)),
    0xC: lambda op: Random(x_of(op), byte_of(op)),
    0xD: lambda op: DrawSprite(x_of(op), y_of(op), nibble_of(op)),
    0xE: _decode_key,
    0xF: _decode_misc,
}

# @intent:map 命令の型から実行関数へのマッピングテーブル。
EXECUTE_MAP: Dict[Type[Instruction], Callable] = {
    # Control
    Jump: control.execute_jump,
    CallSubroutine: control.execute_call,
    ReturnFromSubroutine: control.execute_return,
    JumpWithOffset: control.execute_jump_with_offset,
    SkipEq: control.execute_skip_eq,
    SkipNeq: control.execute_skip_neq,
    SkipRegsEq: control.execute_skip_regs_eq,
    SkipRegsNeq: control.execute_skip_regs_neq,
    InvalidInstruction: control.execute_invalid,

    # ALU
    AddReg: alu.execute_add_reg,
    BitwiseOr: alu.execute_or,
    BitwiseAnd: alu.execute_and,
    BitwiseXor: alu.execute_xor,
    AddWithCarry: alu.execute_add_with_carry,
    Subtract: alu.execute_subtract,
    SubtractReversed: alu.execute_subtract_reversed,
    ShiftRight: alu.execute_shift_right,
    ShiftLeft: alu.execute_shift_left,
    Random: alu.execute_random,

    # Load
    SetReg: load.execute_set_reg,
    SetRegFromReg: load.execute_set_reg_from_reg,
    SetIndex: load.execute_set_index,
    AddToIndex: load.execute_add_to_index,
    LoadFontSprite: load.execute_load_font_sprite,
    ToDecimal: load.execute_to_decimal,
    CopyRegsIntoMemory: load.execute_copy_regs_into_memory,
    CopyRegsFromMemory: load.execute_copy_regs_from_memory,

    # Display / Keypad / Timers
    ClearDisplay: io.execute_clear_display,
    DrawSprite: io.execute_draw_sprite,
    SkipIfPressed: io.execute_skip_if_pressed,
    SkipIfNotPressed: io.execute_skip_if_not_pressed,
    SetRegToDelayTimer: io.execute_set_reg_to_delay_timer,
    BlockOnKeypress: io.execute_block_on_keypress,
    SetDelayTimer: io.execute_set_delay_timer,
    SetSoundTimer: io.execute_set_sound_timer,
}
