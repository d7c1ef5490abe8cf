"""
共通の型定義を提供するモジュール。
エンジン、周辺機器、UIなど複数のレイヤーで共通して使用される列挙型を定義します。
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

# @intent:data_structure キーパッドの各キーの状態。
class KeyState(Enum):
    PRESSED = "Pressed"
    RELEASED = "Released"

# @intent:data_structure 未定義オペコードに遭遇した時のエンジンの方針。
class InvalidOpcodePolicy(Enum):
    HALT = "halt"  # 致命的エラーとして停止する
    SKIP = "skip"  # ログに記録し、次の命令へ進む

# @intent:data_structure 実行エンジンの状態機械。RUNNINGが初期状態、HALTEDが終端状態。
class EngineStatus(Enum):
    RUNNING = "RUNNING"
    HALTED = "HALTED"

# @intent:data_structure エンジン停止の理由。
class HaltReason(Enum):
    STACK_UNDERFLOW = "StackUnderflow"
    STACK_OVERFLOW = "StackOverflow"
    DECODE_MISS = "DecodeMiss"
    OUT_OF_BOUNDS = "OutOfBounds"
    STOP_REQUESTED = "StopRequested"

# @intent:data_structure 停止時の診断情報（理由、オペコード、PC）。
@dataclass(frozen=True)
class HaltDiagnostic:
    reason: HaltReason
    pc: int
    opcode: Optional[int] = None
    message: str = ""

    def __str__(self) -> str:
        opcode = f"{self.opcode:04X}" if self.opcode is not None else "----"
        return f"{self.reason.value} at PC={self.pc:#05x} (opcode {opcode}): {self.message}"
