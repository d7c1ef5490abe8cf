# chip8_core/core/state.py
"""
Core Layer (レジスタ状態の基底)
"""
from dataclasses import dataclass

# @intent:responsibility 全アーキテクチャに共通するPCとスタックポインタ。固有のレジスタは派生クラスで追加します。
@dataclass
class CpuState:
    pc: int = 0
    sp: int = 0
