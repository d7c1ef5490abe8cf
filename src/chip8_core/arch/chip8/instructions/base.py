# src/chip8_core/arch/chip8/instructions/base.py
"""
CHIP-8 命令の型定義と、命令実装用の共通ユーティリティ。

命令は閉じたタグ付きユニオンとして表現します。各バリアントは必要なオペランドのみを持つ
不変のデータクラスで、オペランドの形（アドレス、レジスタ+即値など）ごとの中間クラスを継承します。
"""
import random
import threading
from dataclasses import dataclass, field
from typing import ClassVar, List, Optional

from chip8_core.core.snapshot import Operation
from chip8_core.arch.chip8.state import INSTRUCTION_WIDTH
from chip8_core.arch.chip8.store import RegisterStore
from chip8_core.peripherals.timer import TimerUnit
from chip8_core.runtime.shared import SharedRuntimeState

# @intent:utility_function オペコードのフィールド抽出。
def addr_of(opcode: int) -> int:
    return opcode & 0x0FFF

def x_of(opcode: int) -> int:
    return (opcode & 0x0F00) >> 8

def y_of(opcode: int) -> int:
    return (opcode & 0x00F0) >> 4

def byte_of(opcode: int) -> int:
    return opcode & 0x00FF

def nibble_of(opcode: int) -> int:
    return opcode & 0x000F

# @intent:responsibility 命令実行に必要なVMの構成要素をまとめて executor に渡します。
@dataclass
class ExecutionContext:
    store: RegisterStore
    timers: TimerUnit
    runtime: SharedRuntimeState
    rng: random.Random = field(default_factory=random.Random)
    shutdown: threading.Event = field(default_factory=threading.Event)
    key_poll_interval: float = 0.005

    # @intent:responsibility いずれかのキーが押されるまで待機し、そのIDを返します。
    # @intent:rationale ポーリングの間は共有状態のロックを保持しません。停止要求時はNoneを返します。
    def wait_for_key(self) -> Optional[int]:
        while not self.shutdown.is_set():
            key_id = self.runtime.pressed_key()
            if key_id is not None:
                return key_id
            self.shutdown.wait(self.key_poll_interval)
        return None

# --- 命令の基底とオペランド形 ---
@dataclass(frozen=True)
class Instruction(Operation):
    length: ClassVar[int] = INSTRUCTION_WIDTH

@dataclass(frozen=True)
class _Address(Instruction):
    addr: int

    def operands(self) -> List[str]:
        return [f"{self.addr:#05x}"]

@dataclass(frozen=True)
class _Reg(Instruction):
    vx: int

    def operands(self) -> List[str]:
        return [f"V{self.vx:X}"]

@dataclass(frozen=True)
class _RegByte(Instruction):
    vx: int
    byte: int

    def operands(self) -> List[str]:
        return [f"V{self.vx:X}", f"#{self.byte:02X}"]

@dataclass(frozen=True)
class _RegReg(Instruction):
    vx: int
    vy: int

    def operands(self) -> List[str]:
        return [f"V{self.vx:X}", f"V{self.vy:X}"]

# --- 0x0 ---
@dataclass(frozen=True)
class ClearDisplay(Instruction):
    mnemonic: ClassVar[str] = "CLS"

@dataclass(frozen=True)
class ReturnFromSubroutine(Instruction):
    mnemonic: ClassVar[str] = "RET"

# --- 0x1 - 0x7 ---
@dataclass(frozen=True)
class Jump(_Address):
    mnemonic: ClassVar[str] = "JP"

@dataclass(frozen=True)
class CallSubroutine(_Address):
    mnemonic: ClassVar[str] = "CALL"

@dataclass(frozen=True)
class SkipEq(_RegByte):
    mnemonic: ClassVar[str] = "SE"

@dataclass(frozen=True)
class SkipNeq(_RegByte):
    mnemonic: ClassVar[str] = "SNE"

@dataclass(frozen=True)
class SkipRegsEq(_RegReg):
    mnemonic: ClassVar[str] = "SE"

@dataclass(frozen=True)
class SetReg(_RegByte):
    mnemonic: ClassVar[str] = "LD"

@dataclass(frozen=True)
class AddReg(_RegByte):
    mnemonic: ClassVar[str] = "ADD"

# --- 0x8 ---
@dataclass(frozen=True)
class SetRegFromReg(_RegReg):
    mnemonic: ClassVar[str] = "LD"

@dataclass(frozen=True)
class BitwiseOr(_RegReg):
    mnemonic: ClassVar[str] = "OR"

@dataclass(frozen=True)
class BitwiseAnd(_RegReg):
    mnemonic: ClassVar[str] = "AND"

@dataclass(frozen=True)
class BitwiseXor(_RegReg):
    mnemonic: ClassVar[str] = "XOR"

@dataclass(frozen=True)
class AddWithCarry(_RegReg):
    mnemonic: ClassVar[str] = "ADD"

@dataclass(frozen=True)
class Subtract(_RegReg):
    mnemonic: ClassVar[str] = "SUB"

@dataclass(frozen=True)
class ShiftRight(_RegReg):
    mnemonic: ClassVar[str] = "SHR"

@dataclass(frozen=True)
class SubtractReversed(_RegReg):
    mnemonic: ClassVar[str] = "SUBN"

@dataclass(frozen=True)
class ShiftLeft(_RegReg):
    mnemonic: ClassVar[str] = "SHL"

# --- 0x9 - 0xD ---
@dataclass(frozen=True)
class SkipRegsNeq(_RegReg):
    mnemonic: ClassVar[str] = "SNE"

@dataclass(frozen=True)
class SetIndex(_Address):
    mnemonic: ClassVar[str] = "LD I,"

@dataclass(frozen=True)
class JumpWithOffset(_Address):
    mnemonic: ClassVar[str] = "JP V0,"

@dataclass(frozen=True)
class Random(_RegByte):
    mnemonic: ClassVar[str] = "RND"

@dataclass(frozen=True)
class DrawSprite(Instruction):
    mnemonic: ClassVar[str] = "DRW"
    vx: int
    vy: int
    height: int

    def operands(self) -> List[str]:
        return [f"V{self.vx:X}", f"V{self.vy:X}", f"{self.height}"]

# --- 0xE ---
@dataclass(frozen=True)
class SkipIfPressed(_Reg):
    mnemonic: ClassVar[str] = "SKP"

@dataclass(frozen=True)
class SkipIfNotPressed(_Reg):
    mnemonic: ClassVar[str] = "SKNP"

# --- 0xF ---
@dataclass(frozen=True)
class SetRegToDelayTimer(_Reg):
    mnemonic: ClassVar[str] = "LD"

    def operands(self) -> List[str]:
        return [f"V{self.vx:X}", "DT"]

@dataclass(frozen=True)
class BlockOnKeypress(_Reg):
    mnemonic: ClassVar[str] = "LD"

    def operands(self) -> List[str]:
        return [f"V{self.vx:X}", "K"]

@dataclass(frozen=True)
class SetDelayTimer(_Reg):
    mnemonic: ClassVar[str] = "LD DT,"

@dataclass(frozen=True)
class SetSoundTimer(_Reg):
    mnemonic: ClassVar[str] = "LD ST,"

@dataclass(frozen=True)
class AddToIndex(_Reg):
    mnemonic: ClassVar[str] = "ADD I,"

@dataclass(frozen=True)
class LoadFontSprite(_Reg):
    mnemonic: ClassVar[str] = "LD F,"

@dataclass(frozen=True)
class ToDecimal(_Reg):
    mnemonic: ClassVar[str] = "LD B,"

@dataclass(frozen=True)
class CopyRegsIntoMemory(_Reg):
    mnemonic: ClassVar[str] = "LD [I],"

@dataclass(frozen=True)
class CopyRegsFromMemory(_Reg):
    mnemonic: ClassVar[str] = "LD"

    def operands(self) -> List[str]:
        return [f"V{self.vx:X}", "[I]"]

# --- 未定義 ---
@dataclass(frozen=True)
class InvalidInstruction(Instruction):
    mnemonic: ClassVar[str] = "UNKNOWN"
    opcode: int

    def operands(self) -> List[str]:
        return [f"${self.opcode:04X}"]
