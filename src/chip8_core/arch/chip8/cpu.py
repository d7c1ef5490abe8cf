# src/chip8_core/arch/chip8/cpu.py
"""
CHIP-8 実行エンジン。

フェッチ→デコード→実行のサイクルを駆動し、レジスタ/メモリストアとタイマーサブシステムを所有します。
共有ランタイム状態（フレームバッファ、キーパッド）は外部のレンダラ/入力源と共有します。

状態機械: RUNNING（初期）→ HALTED（終端）。停止条件は以下のとおりです。
  - 空のスタックでのリターン、スタックの上限超過、範囲外アクセス（致命的）
  - 未定義オペコード（InvalidOpcodePolicy.HALT の場合。SKIP の場合は記録して次へ進む）
  - 外部からの停止要求
"""
import logging
import random
import threading
import time
from typing import Dict, List, Optional, Tuple

from chip8_core.common.errors import VmError, DecodeMiss, StackUnderflow, StackOverflow, OutOfBounds
from chip8_core.common.types import EngineStatus, HaltReason, HaltDiagnostic, InvalidOpcodePolicy
from chip8_core.core.cpu import AbstractCpu
from chip8_core.core.snapshot import Snapshot
from chip8_core.arch.chip8.state import Chip8CpuState
from chip8_core.arch.chip8.store import RegisterStore
from chip8_core.arch.chip8.instructions import ExecutionContext, Instruction, decode_opcode, execute_instruction
from chip8_core.arch.chip8 import disassembler
from chip8_core.peripherals.timer import TimerUnit
from chip8_core.runtime.shared import SharedRuntimeState

logger = logging.getLogger(__name__)

DEFAULT_CYCLE_HZ = 700

_HALT_REASONS = {
    StackUnderflow: HaltReason.STACK_UNDERFLOW,
    StackOverflow: HaltReason.STACK_OVERFLOW,
    DecodeMiss: HaltReason.DECODE_MISS,
    OutOfBounds: HaltReason.OUT_OF_BOUNDS,
}

# @intent:responsibility CHIP-8 の具体的なエミュレーションロジック（フェッチ、デコード、実行、停止判定）を提供します。
class Chip8Cpu(AbstractCpu):
    """
    CHIP-8 をエミュレートするクラス。

    stepは1命令を実行してSnapshotを返し、runは停止するまでstepを繰り返します。
    shutdownイベントはエンジンのループ、キー待ち、タイマーで共有される停止シグナルです。
    """
    def __init__(self, runtime: SharedRuntimeState,
                 store: Optional[RegisterStore] = None,
                 timers: Optional[TimerUnit] = None,
                 invalid_opcode_policy: InvalidOpcodePolicy = InvalidOpcodePolicy.HALT,
                 cycle_hz: float = DEFAULT_CYCLE_HZ,
                 key_poll_interval: float = 0.005,
                 rng: Optional[random.Random] = None,
                 shutdown: Optional[threading.Event] = None):
        self._store = store if store is not None else RegisterStore()
        self._timers = timers if timers is not None else TimerUnit()
        self._runtime = runtime
        self._shutdown = shutdown if shutdown is not None else threading.Event()
        self._ctx = ExecutionContext(
            store=self._store,
            timers=self._timers,
            runtime=runtime,
            rng=rng if rng is not None else random.Random(),
            shutdown=self._shutdown,
            key_poll_interval=key_poll_interval,
        )
        self.invalid_opcode_policy = invalid_opcode_policy
        self._cycle_period = 1.0 / cycle_hz if cycle_hz else 0.0
        self._status = EngineStatus.RUNNING
        self._diagnostic: Optional[HaltDiagnostic] = None
        self.decode_misses: List[HaltDiagnostic] = []
        self._current_opcode: Optional[int] = None
        self._current_instruction: Optional[Instruction] = None
        super().__init__(self._store.bus)

    # @intent:rationale 状態はストアが所有するため、ストアのレジスタを初期化してその状態を共有します。
    def _create_initial_state(self) -> Chip8CpuState:
        return self._store.reset_registers()

    # @intent:responsibility レジスタ、スタック、タイマーを初期化し、エンジンをRUNNINGに戻します。RAMは保持されます。
    def reset(self) -> None:
        super().reset()
        self._timers.set_delay(0)
        self._timers.set_sound(0)
        self._status = EngineStatus.RUNNING
        self._diagnostic = None
        self.decode_misses = []
        self._shutdown.clear()

    # --- 公開プロパティ ---
    @property
    def store(self) -> RegisterStore:
        return self._store

    @property
    def timers(self) -> TimerUnit:
        return self._timers

    @property
    def runtime(self) -> SharedRuntimeState:
        return self._runtime

    @property
    def status(self) -> EngineStatus:
        return self._status

    @property
    def diagnostic(self) -> Optional[HaltDiagnostic]:
        return self._diagnostic

    @property
    def is_halted(self) -> bool:
        return self._status is EngineStatus.HALTED

    def load_program(self, image: bytes) -> None:
        self._store.load_program(image)

    # --- 命令サイクル ---
    def _fetch(self) -> int:
        pc = self._state.pc
        self._store.check_pc(pc)
        self._current_opcode = self._store.read_word(pc)
        return self._current_opcode

    def _decode(self, opcode: int) -> Instruction:
        self._current_instruction = decode_opcode(opcode)
        return self._current_instruction

    def _execute(self, operation: Instruction) -> None:
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("%#05x: %s", self._state.pc - operation.length, operation.text())
        execute_instruction(operation, self._ctx)

    # @intent:responsibility 停止中または停止要求がある場合、命令を実行せずにSnapshotを返します。
    def _handle_halt(self, current_pc: int) -> Optional[Snapshot]:
        if self._status is EngineStatus.RUNNING and self._shutdown.is_set():
            self._halt(HaltDiagnostic(HaltReason.STOP_REQUESTED, current_pc, message="Stop requested"))
        if self._status is EngineStatus.HALTED:
            return self._create_snapshot(current_pc, None)
        return None

    # @intent:responsibility 1命令を実行します。VMエラーは停止または継続の判断に変換し、例外として送出しません。
    def step(self) -> Snapshot:
        initial_pc = self._state.pc
        self._current_opcode = None
        self._current_instruction = None
        try:
            return super().step()
        except VmError as error:
            return self._handle_error(initial_pc, error)

    def _handle_error(self, initial_pc: int, error: VmError) -> Snapshot:
        opcode = error.opcode if error.opcode is not None else self._current_opcode
        if isinstance(error, DecodeMiss) and self.invalid_opcode_policy is InvalidOpcodePolicy.SKIP:
            # PCは既に次の命令を指している
            miss = HaltDiagnostic(HaltReason.DECODE_MISS, initial_pc, opcode, error.message)
            self.decode_misses.append(miss)
            logger.warning("Skipping invalid instruction: %s", miss)
            self._cycle_count += 1
            return self._create_snapshot(initial_pc, self._current_instruction)

        # 命令の途中状態を見せないよう、PCを失敗した命令に戻す
        self._state.pc = initial_pc
        reason = _HALT_REASONS.get(type(error), HaltReason.OUT_OF_BOUNDS)
        self._halt(HaltDiagnostic(reason, initial_pc, opcode, error.message))
        return self._create_snapshot(initial_pc, self._current_instruction)

    def _halt(self, diagnostic: HaltDiagnostic) -> None:
        self._status = EngineStatus.HALTED
        self._diagnostic = diagnostic
        if diagnostic.reason is HaltReason.STOP_REQUESTED:
            logger.info("Engine stopped: %s", diagnostic)
        else:
            logger.error("Engine halted: %s", diagnostic)

    # @intent:responsibility 停止するまで命令サイクルを繰り返します。
    # @intent:post-condition 戻る時点でタイマーのスレッドは停止しています。
    def run(self, max_steps: Optional[int] = None) -> Optional[HaltDiagnostic]:
        """
        エンジンを実行し、停止時の診断情報を返します。
        max_stepsに達した場合はRUNNINGのままNoneを返します。
        cycle_hzが0の場合は命令の実行間隔を調整しません。
        """
        self._timers.start()
        steps = 0
        try:
            while self._status is EngineStatus.RUNNING:
                if max_steps is not None and steps >= max_steps:
                    break
                started = time.monotonic()
                self.step()
                steps += 1
                if self._cycle_period and self._status is EngineStatus.RUNNING:
                    remaining = self._cycle_period - (time.monotonic() - started)
                    if remaining > 0:
                        self._shutdown.wait(remaining)
        finally:
            self._timers.stop()
        return self._diagnostic

    # @intent:responsibility 外部からの停止要求。キー待ちとタイマーも停止させます。
    def stop(self) -> None:
        self._shutdown.set()
        self._timers.stop()

    # --- UI向けAPI ---
    def get_register_map(self) -> Dict[str, int]:
        s = self._state
        registers = {f"V{index:X}": value for index, value in enumerate(s.v)}
        registers.update({
            "I": s.i, "PC": s.pc, "SP": s.sp,
            "DT": self._timers.get_delay(), "ST": self._timers.sound.value,
        })
        return registers

    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        return disassembler.disassemble(self._bus, start_addr, length)
