import yaml
from typing import Dict, Any

from chip8_core.common.types import InvalidOpcodePolicy
from chip8_core.runtime.shared import KEY_COUNT
from .models import SystemConfig, DisplayConfig, EngineConfig, TimerConfig, KeypadConfig

class ConfigLoader:
    def load_from_file(self, path: str) -> SystemConfig:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
        return self.parse_config(data or {})

    def parse_config(self, data: Dict[str, Any]) -> SystemConfig:
        if not isinstance(data, dict):
            raise ValueError("Configuration root must be a mapping.")
        return SystemConfig(
            display=self._parse_display(data.get("display") or {}),
            engine=self._parse_engine(data.get("engine") or {}),
            timers=TimerConfig(frequency_hz=self._parse_positive(
                (data.get("timers") or {}).get("frequency_hz", 60), "timers.frequency_hz")),
            keypad=self._parse_keypad(data.get("keypad") or {}),
        )

    def _parse_display(self, data: Dict[str, Any]) -> DisplayConfig:
        defaults = DisplayConfig()
        width = self._parse_int(data.get("width", defaults.width))
        height = self._parse_int(data.get("height", defaults.height))
        if width <= 0 or height <= 0:
            raise ValueError(f"Invalid display geometry: {width}x{height}")
        return DisplayConfig(
            width=width,
            height=height,
            title=str(data.get("title", defaults.title)),
            scale=self._parse_int(data.get("scale", defaults.scale)),
            refresh_hz=self._parse_positive(data.get("refresh_hz", defaults.refresh_hz), "display.refresh_hz"),
        )

    def _parse_engine(self, data: Dict[str, Any]) -> EngineConfig:
        defaults = EngineConfig()
        policy_name = str(data.get("invalid_opcode_policy", defaults.invalid_opcode_policy.value)).lower()
        try:
            policy = InvalidOpcodePolicy(policy_name)
        except ValueError:
            raise ValueError(f"Unknown invalid_opcode_policy: {policy_name}")

        cycle_hz = float(data.get("cycle_hz", defaults.cycle_hz))
        if cycle_hz < 0:
            raise ValueError(f"engine.cycle_hz must not be negative: {cycle_hz}")
        seed = data.get("seed")
        return EngineConfig(
            invalid_opcode_policy=policy,
            cycle_hz=cycle_hz,
            key_poll_interval=self._parse_positive(
                data.get("key_poll_interval", defaults.key_poll_interval), "engine.key_poll_interval"),
            seed=self._parse_int(seed) if seed is not None else None,
        )

    def _parse_keypad(self, data: Dict[str, Any]) -> KeypadConfig:
        defaults = KeypadConfig()
        layout = tuple(str(key).upper() for key in data.get("layout", defaults.layout))
        if len(layout) != KEY_COUNT:
            raise ValueError(f"keypad.layout must list {KEY_COUNT} keys, got {len(layout)}")
        return KeypadConfig(
            layout=layout,
            poll_interval=self._parse_positive(data.get("poll_interval", defaults.poll_interval), "keypad.poll_interval"),
        )

    def _parse_positive(self, value: Any, name: str) -> float:
        number = float(value)
        if number <= 0:
            raise ValueError(f"{name} must be positive: {value}")
        return number

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            if value.startswith("0x"):
                return int(value, 16)
            return int(value)
        raise ValueError(f"Invalid integer format: {value}")
