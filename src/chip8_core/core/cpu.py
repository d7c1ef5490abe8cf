# chip8_core/core/cpu.py
"""
Core Layer (命令サイクルの骨格)

1ステップ = フェッチ → デコード → PC前進 → 実行 → Snapshot という流れだけを定め、
オペコードの意味や停止条件は派生クラス（arch/chip8/cpu.py）に任せます。
"""
import copy
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple

from chip8_core.transport.bus import Bus
from chip8_core.core.snapshot import Snapshot, Operation, Metadata
from chip8_core.core.state import CpuState

# @intent:responsibility 命令サイクルのテンプレートと、UIが参照する共通インターフェースを定義します。
class AbstractCpu(ABC):
    def __init__(self, bus: Bus):
        self._bus = bus
        self._state: CpuState = self._create_initial_state()
        self._cycle_count: int = 0

    @abstractmethod
    def _create_initial_state(self) -> CpuState:
        pass

    # @intent:post-condition レジスタと累積サイクル数が初期化されます。バス上のメモリはそのままです。
    def reset(self) -> None:
        self._state = self._create_initial_state()
        self._cycle_count = 0

    def get_state(self) -> CpuState:
        return self._state

    # PCは変更せずにオペコードを読み出す
    @abstractmethod
    def _fetch(self) -> int:
        pass

    @abstractmethod
    def _decode(self, opcode: int) -> Operation:
        pass

    @abstractmethod
    def _execute(self, operation: Operation) -> None:
        pass

    # @intent:responsibility 1命令を処理し、その結果をSnapshotとして返します。
    # @intent:rationale 実行時点でPCは既に次の命令を指しているため、ジャンプやスキップはPCを上書き/加算するだけで済みます。
    def step(self) -> Snapshot:
        self._bus.get_and_clear_activity_log()
        pc = self._state.pc

        halted = self._handle_halt(pc)
        if halted is not None:
            return halted

        operation = self._decode(self._fetch())
        self._update_pc(operation)
        self._execute(operation)

        self._cycle_count += operation.cycle_count
        return self._create_snapshot(pc, operation)

    # 派生クラスが停止状態を報告するためのフック
    def _handle_halt(self, current_pc: int) -> Optional[Snapshot]:
        return None

    def _update_pc(self, operation: Operation) -> None:
        self._state.pc = (self._state.pc + operation.length) & 0xFFFF

    # @intent:post-condition stateはコピーされ、以後のステップで書き換わりません。
    def _create_snapshot(self, initial_pc: int, operation: Optional[Operation]) -> Snapshot:
        text = operation.text() if operation is not None else "-"
        return Snapshot(
            state=copy.deepcopy(self._state),
            operation=operation,
            metadata=Metadata(cycle_count=self._cycle_count, symbol_info=f"{initial_pc:#06x}: {text}"),
            bus_activity=self._bus.get_and_clear_activity_log(),
        )

    @abstractmethod
    def get_register_map(self) -> Dict[str, int]:
        """
        レジスタ名から値への辞書。表示側はCPUの内部構造を知らずに済みます。
        """
        pass

    @abstractmethod
    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        """
        (address, hex_bytes, mnemonic) の一覧を返します。
        """
        pass
