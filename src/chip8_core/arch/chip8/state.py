# src/chip8_core/arch/chip8/state.py
"""
CHIP-8 固有の状態定義とメモリマップ定数。
"""
from dataclasses import dataclass, field
from typing import List

from chip8_core.core.state import CpuState

# @intent:constant メモリマップとレジスタ構成。
RAM_SIZE = 0xFFF        # アドレス空間は [0x000, 0xFFF)
PROGRAM_START = 0x200
PROGRAM_END = 0xFFF      # PCの有効範囲は [PROGRAM_START, PROGRAM_END)
INSTRUCTION_WIDTH = 2
REGISTER_COUNT = 16
FLAG_REGISTER = 0xF
STACK_DEPTH = 16

FONT_START = 0x050
FONT_GLYPH_SIZE = 5
# @intent:constant 0〜Fの16進数字スプライト（各4x5ピクセル、5バイト）。
FONT_SPRITES = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])

# @intent:responsibility CHIP-8 の全てのレジスタ（V0〜VF, I, PC）とコールスタックを保持します。
@dataclass
class Chip8CpuState(CpuState):
    """
    CHIP-8 のレジスタ状態を保持するデータクラス。
    spはコールスタックの深さを表します。
    """
    pc: int = PROGRAM_START
    v: List[int] = field(default_factory=lambda: [0x00] * REGISTER_COUNT)
    i: int = 0x0000    # Address Register
    stack: List[int] = field(default_factory=list)
