import yaml
from enum import Enum
from typing import Any, Dict, Optional, Type

from retro_chip8.transport.memory import DEFAULT_STACK_DEPTH
from .models import CpuInitialState, MachineConfig, Quirks, ReturnUnderflowPolicy, ShiftSource

class ConfigLoader:
    def load_from_file(self, path: str) -> MachineConfig:
        with open(path, 'r', encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return self._parse_config(data or {})

    def load_from_string(self, text: str) -> MachineConfig:
        return self._parse_config(yaml.safe_load(text) or {})

    def _parse_config(self, data: Dict[str, Any]) -> MachineConfig:
        if not isinstance(data, dict):
            raise ValueError(f"Configuration root must be a mapping, got {type(data).__name__}")

        quirks_data = data.get("quirks", {}) or {}
        quirks = Quirks(
            shift_source=self._parse_enum(ShiftSource, quirks_data.get("shift_source", "VX")),
            increment_index=self._parse_bool(quirks_data.get("increment_index", False)),
            return_underflow=self._parse_enum(
                ReturnUnderflowPolicy, quirks_data.get("return_underflow", "FAULT")
            ),
            stack_depth=self._parse_int(quirks_data.get("stack_depth", DEFAULT_STACK_DEPTH)),
        )

        # Parse Initial State
        initial_state_data = data.get("initial_state", {}) or {}
        registers = {
            str(name).lower(): self._parse_int(value)
            for name, value in (initial_state_data.get("registers", {}) or {}).items()
        }
        initial_state = CpuInitialState(
            pc=self._parse_int(initial_state_data.get("pc", 0x200)),
            index=self._parse_int(initial_state_data.get("index", 0)),
            delay_timer=self._parse_int(initial_state_data.get("delay_timer", 0)),
            sound_timer=self._parse_int(initial_state_data.get("sound_timer", 0)),
            registers=registers,
        )

        seed = data.get("seed")
        return MachineConfig(
            quirks=quirks,
            initial_state=initial_state,
            seed=None if seed is None else self._parse_int(seed),
            rom_path=data.get("rom"),
        )

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            if value.lower().startswith("0x"):
                return int(value, 16)
            return int(value)
        raise ValueError(f"Invalid integer format: {value}")

    # YAML の true/false のみを受け付けます。引用符付きの "false" などは拒否します。
    def _parse_bool(self, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        raise ValueError(f"Invalid boolean format: {value!r}")

    def _parse_enum(self, enum_type: Type[Enum], value: Optional[str]) -> Enum:
        try:
            return enum_type[str(value).upper()]
        except KeyError:
            choices = ", ".join(member.name for member in enum_type)
            raise ValueError(f"Invalid {enum_type.__name__} '{value}' (expected one of: {choices})")
