import random
import threading
from dataclasses import dataclass
from typing import Optional

from chip8_core.arch.chip8.cpu import Chip8Cpu
from chip8_core.arch.chip8.store import RegisterStore
from chip8_core.peripherals.timer import TimerUnit
from chip8_core.runtime.shared import SharedRuntimeState
from .models import SystemConfig

@dataclass
class System:
    cpu: Chip8Cpu
    runtime: SharedRuntimeState
    shutdown: threading.Event

# @intent:responsibility システム構成（Config）に基づいて、共有状態、タイマー、ストア、エンジンを生成・接続し、ROMをロードします。
class SystemBuilder:
    def build_system(self, config: SystemConfig, rom: Optional[bytes] = None) -> System:
        runtime = SharedRuntimeState(config.display.width, config.display.height)
        shutdown = threading.Event()
        store = RegisterStore()
        if rom is not None:
            store.load_program(rom)

        engine = config.engine
        cpu = Chip8Cpu(
            runtime,
            store=store,
            timers=TimerUnit(config.timers.frequency_hz),
            invalid_opcode_policy=engine.invalid_opcode_policy,
            cycle_hz=engine.cycle_hz,
            key_poll_interval=engine.key_poll_interval,
            rng=random.Random(engine.seed),
            shutdown=shutdown,
        )
        return System(cpu=cpu, runtime=runtime, shutdown=shutdown)
