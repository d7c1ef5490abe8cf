from dataclasses import dataclass, field
from typing import Optional, Tuple

from chip8_core.common.types import InvalidOpcodePolicy
from chip8_core.peripherals.keypad import DEFAULT_KEY_LAYOUT
from chip8_core.runtime.shared import DEFAULT_WIDTH, DEFAULT_HEIGHT

@dataclass
class DisplayConfig:
    # 既定値は80x64（標準の64x32ではない）。どちらを意図したかは未確定のため設定可能にしている
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    title: str = "CHIP-8"
    scale: int = 10
    refresh_hz: float = 60.0

@dataclass
class EngineConfig:
    invalid_opcode_policy: InvalidOpcodePolicy = InvalidOpcodePolicy.HALT
    cycle_hz: float = 700.0
    key_poll_interval: float = 0.005
    seed: Optional[int] = None

@dataclass
class TimerConfig:
    frequency_hz: float = 60.0

@dataclass
class KeypadConfig:
    layout: Tuple[str, ...] = DEFAULT_KEY_LAYOUT
    poll_interval: float = 0.001

@dataclass
class SystemConfig:
    display: DisplayConfig = field(default_factory=DisplayConfig)
    engine: EngineConfig = field(default_factory=EngineConfig)
    timers: TimerConfig = field(default_factory=TimerConfig)
    keypad: KeypadConfig = field(default_factory=KeypadConfig)
