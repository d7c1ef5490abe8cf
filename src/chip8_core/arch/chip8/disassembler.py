# src/chip8_core/arch/chip8/disassembler.py
"""
CHIP-8 Disassembler

メモリ上のバイナリデータを解析し、ニーモニックに変換します。
バスアクセスログを汚さないよう、読み込みにはpeekを使用します。
"""
from typing import List, Tuple

from chip8_core.transport.bus import Bus
from chip8_core.arch.chip8.state import INSTRUCTION_WIDTH, RAM_SIZE
from chip8_core.arch.chip8.instructions import decode_opcode

# @intent:responsibility 指定されたメモリ範囲を逆アセンブルし、表示用データを生成します。
def disassemble(bus: Bus, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
    """
    指定された範囲のメモリを逆アセンブルします。

    Returns:
        List of (address, hex_bytes, mnemonic) tuples.
    """
    result = []
    current_addr = start_addr
    end_addr = min(start_addr + length, RAM_SIZE - 1)

    while current_addr < end_addr:
        opcode = (bus.peek(current_addr) << 8) | bus.peek(current_addr + 1)
        instruction = decode_opcode(opcode)
        result.append((current_addr, f"{opcode >> 8:02X} {opcode & 0xFF:02X}", instruction.text()))
        current_addr += INSTRUCTION_WIDTH

    return result
