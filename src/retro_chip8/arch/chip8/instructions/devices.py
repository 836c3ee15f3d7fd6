# src/retro_chip8/arch/chip8/instructions/devices.py
"""
表示とキーパッドを操作する命令の実装。
"""
from dataclasses import dataclass
from typing import List

from retro_chip8.arch.chip8.state import Chip8CpuState
from .base import ADVANCE, SUSPEND, ControlFlow, Instruction, Peripherals, reg, skip_if


# --- CLS ---
@dataclass(frozen=True)
class ClearScreen(Instruction):
    MNEMONIC = "cls"

def execute_cls(state: Chip8CpuState, io: Peripherals, op: ClearScreen) -> ControlFlow:
    io.display.clear()
    return ADVANCE

# --- DRW Vx, Vy, n ---
# @intent:responsibility Dxyn。I から n バイトのスプライトを (Vx, Vy) に XOR 描画し、衝突を VF に設定します。
# @intent:rationale スプライトの読み込みを描画より先に行うため、範囲外アクセス時に表示は変更されません。
@dataclass(frozen=True)
class Draw(Instruction):
    MNEMONIC = "drw"
    x: int
    y: int
    n: int

def execute_drw(state: Chip8CpuState, io: Peripherals, op: Draw) -> ControlFlow:
    sprite = io.memory.load(state.i, op.n)
    collision = io.display.draw(row=state.v[op.y], col=state.v[op.x], sprite=sprite)
    state.vf = 1 if collision else 0
    return ADVANCE

# --- SKP / SKNP ---
@dataclass(frozen=True)
class SkipKey(Instruction):
    MNEMONIC = "skp"
    x: int

def execute_skp(state: Chip8CpuState, io: Peripherals, op: SkipKey) -> ControlFlow:
    return skip_if(io.keypad.is_pressed(state.v[op.x]))

@dataclass(frozen=True)
class SkipNotKey(Instruction):
    MNEMONIC = "sknp"
    x: int

def execute_sknp(state: Chip8CpuState, io: Peripherals, op: SkipNotKey) -> ControlFlow:
    return skip_if(not io.keypad.is_pressed(state.v[op.x]))

# --- LD Vx, K ---
# @intent:responsibility Fx0A。キーが押されていればその番号を Vx に格納し、なければ実行を停止させます。
# @intent:rationale ステップ関数の内部では待機せず、Suspend を返して次のステップで再試行させます。
@dataclass(frozen=True)
class WaitKey(Instruction):
    MNEMONIC = "ld"
    x: int

    def operands(self) -> List[str]:
        return [reg(self.x), "K"]

def execute_wait_key(state: Chip8CpuState, io: Peripherals, op: WaitKey) -> ControlFlow:
    key = io.keypad.get_pressed()
    if key is None:
        return SUSPEND
    state.v[op.x] = key
    return ADVANCE
