# chip8_core/core/snapshot.py
"""
実行状態の不変スナップショット

このモジュールは、1命令サイクル実行後のCPUとバスの状態を記録した不変のデータ構造を定義します。
UIへの情報提供と、トレースログへの記録に用いる責務を負います。
"""
from dataclasses import dataclass, field
from typing import ClassVar, List, Optional

from chip8_core.core.state import CpuState
from chip8_core.transport.bus import BusAccess

# @intent:responsibility デコード済み命令の基底クラス。具体的な命令はアーキテクチャ層で定義します。
@dataclass(frozen=True)
class Operation:
    """
    デコード済み命令。ニーモニックと命令長はクラス属性、オペランドはインスタンスのフィールドとして持ちます。
    """
    mnemonic: ClassVar[str] = "NOP"
    length: ClassVar[int] = 1 # 命令のバイト長
    cycle_count: ClassVar[int] = 1

    def operands(self) -> List[str]:
        return []

    # @intent:responsibility 逆アセンブル表示用の文字列を生成します。
    def text(self) -> str:
        operands = self.operands()
        if operands:
            return f"{self.mnemonic} " + ", ".join(operands)
        return self.mnemonic

# @intent:responsibility 実行に関するメタデータを記録します。
@dataclass(frozen=True)
class Metadata:
    cycle_count: int
    symbol_info: Optional[str] = None # 例: "0x0200: JP 0x208"

# @intent:responsibility ある一時点におけるCPUとバスの状態を不変に記録します。
@dataclass(frozen=True)
class Snapshot:
    """
    1ステップ実行後の状態。stateは生成時点のコピーであり、以後のCPUの変化の影響を受けません。
    operationはフェッチ前に失敗した場合や停止中のステップではNoneになります。
    """
    state: CpuState
    operation: Optional[Operation]
    metadata: Metadata
    bus_activity: List[BusAccess] = field(default_factory=list)
