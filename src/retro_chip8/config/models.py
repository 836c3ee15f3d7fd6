from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

from retro_chip8.transport.memory import DEFAULT_STACK_DEPTH


class ShiftSource(Enum):
    VX = "VX"  # COSMAC VIP 以降の一般的な解釈: Vx 自身をシフトする
    VY = "VY"  # オリジナル解釈: Vy をシフトして Vx に格納する


class ReturnUnderflowPolicy(Enum):
    FAULT = "FAULT"    # CallStackUnderflow を送出
    IGNORE = "IGNORE"  # 何もせず次の命令へ進む


# @intent:responsibility 歴史的に解釈が分かれる命令の挙動を1か所で切り替えます。
@dataclass(frozen=True)
class Quirks:
    shift_source: ShiftSource = ShiftSource.VX
    increment_index: bool = False  # Fx55/Fx65 の後に I を x+1 進めるか
    return_underflow: ReturnUnderflowPolicy = ReturnUnderflowPolicy.FAULT
    stack_depth: int = DEFAULT_STACK_DEPTH


@dataclass
class CpuInitialState:
    pc: int = 0x200
    index: int = 0x0000
    delay_timer: int = 0
    sound_timer: int = 0
    registers: Dict[str, int] = field(default_factory=dict)  # 例: {"v0": 0x12}


@dataclass
class MachineConfig:
    quirks: Quirks = field(default_factory=Quirks)
    initial_state: CpuInitialState = field(default_factory=CpuInitialState)
    seed: Optional[int] = None
    rom_path: Optional[str] = None
