# src/chip8_core/arch/chip8/instructions/__init__.py
"""
CHIP-8 命令セット実装パッケージ。
"""
from .base import ExecutionContext, Instruction, InvalidInstruction
from .maps import DECODE_MAP, EXECUTE_MAP

# @intent:responsibility 16ビットのオペコードを命令に変換します。
# @intent:post-condition 常に値を返します（全域・純粋関数）。表にないパターンは InvalidInstruction になります。
def decode_opcode(opcode: int) -> Instruction:
    if not 0 <= opcode <= 0xFFFF:
        return InvalidInstruction(opcode)
    return DECODE_MAP[opcode >> 12](opcode)

# @intent:responsibility デコードされた命令を実行し、VMの状態を変更します。
def execute_instruction(instruction: Instruction, ctx: ExecutionContext) -> None:
    EXECUTE_MAP[type(instruction)](ctx, instruction)
