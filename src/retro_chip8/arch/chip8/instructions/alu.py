# src/retro_chip8/arch/chip8/instructions/alu.py
"""
算術論理演算命令の実装。

フラグを設定する命令は、結果を Vx に書き込んだ後で VF を書き込みます。
そのため Vx が VF の場合でも、最終的に VF にはフラグが残ります。
"""
from dataclasses import dataclass

from retro_chip8.config.models import ShiftSource
from retro_chip8.arch.chip8.state import Chip8CpuState
from .base import ADVANCE, ControlFlow, Instruction, Peripherals


# @intent:utility_function 加算を行い、結果とキャリー（8bitを超えたか）を設定します。
def _add_with_carry(state: Chip8CpuState, x: int, operand: int) -> None:
    total = state.v[x] + operand
    state.v[x] = total & 0xFF
    state.vf = 1 if total > 0xFF else 0

# @intent:utility_function minuend - subtrahend を dest に格納します。VF は借りが発生しなかった場合に1です。
def _sub_with_borrow(state: Chip8CpuState, dest: int, minuend: int, subtrahend: int) -> None:
    state.v[dest] = (minuend - subtrahend) & 0xFF
    state.vf = 1 if minuend >= subtrahend else 0

# @intent:utility_function Quirks に従ってシフト元の値を選びます。
def _shift_source(state: Chip8CpuState, io: Peripherals, x: int, y: int) -> int:
    if io.quirks.shift_source is ShiftSource.VY:
        return state.v[y]
    return state.v[x]


# --- ADD Vx, byte ---
# @intent:responsibility 7xkk。即値を加算し、VF にキャリーを設定します。
@dataclass(frozen=True)
class AddImm(Instruction):
    MNEMONIC = "add"
    x: int
    kk: int

def execute_add_imm(state: Chip8CpuState, io: Peripherals, op: AddImm) -> ControlFlow:
    _add_with_carry(state, op.x, op.kk)
    return ADVANCE

# --- ADD Vx, Vy ---
@dataclass(frozen=True)
class AddReg(Instruction):
    MNEMONIC = "add"
    x: int
    y: int

def execute_add_reg(state: Chip8CpuState, io: Peripherals, op: AddReg) -> ControlFlow:
    _add_with_carry(state, op.x, state.v[op.y])
    return ADVANCE

# --- SUB Vx, Vy ---
# @intent:responsibility 8xy5。Vx = Vx - Vy。VF の極性は加算のキャリーと逆で、1 は「借りなし」です。
@dataclass(frozen=True)
class SubReg(Instruction):
    MNEMONIC = "sub"
    x: int
    y: int

def execute_sub_reg(state: Chip8CpuState, io: Peripherals, op: SubReg) -> ControlFlow:
    _sub_with_borrow(state, op.x, state.v[op.x], state.v[op.y])
    return ADVANCE

# --- SUBN Vx, Vy ---
# @intent:responsibility 8xy7。Vx = Vy - Vx。
@dataclass(frozen=True)
class SubnReg(Instruction):
    MNEMONIC = "subn"
    x: int
    y: int

def execute_subn_reg(state: Chip8CpuState, io: Peripherals, op: SubnReg) -> ControlFlow:
    _sub_with_borrow(state, op.x, state.v[op.y], state.v[op.x])
    return ADVANCE

# --- OR / AND / XOR ---
@dataclass(frozen=True)
class OrReg(Instruction):
    MNEMONIC = "or"
    x: int
    y: int

def execute_or(state: Chip8CpuState, io: Peripherals, op: OrReg) -> ControlFlow:
    state.v[op.x] |= state.v[op.y]
    return ADVANCE

@dataclass(frozen=True)
class AndReg(Instruction):
    MNEMONIC = "and"
    x: int
    y: int

def execute_and(state: Chip8CpuState, io: Peripherals, op: AndReg) -> ControlFlow:
    state.v[op.x] &= state.v[op.y]
    return ADVANCE

@dataclass(frozen=True)
class XorReg(Instruction):
    MNEMONIC = "xor"
    x: int
    y: int

def execute_xor(state: Chip8CpuState, io: Peripherals, op: XorReg) -> ControlFlow:
    state.v[op.x] ^= state.v[op.y]
    return ADVANCE

# --- SHR / SHL ---
# @intent:responsibility 8xy6。VF にシフト前の最下位ビットを設定し、右シフトします。
@dataclass(frozen=True)
class ShrReg(Instruction):
    MNEMONIC = "shr"
    x: int
    y: int

def execute_shr(state: Chip8CpuState, io: Peripherals, op: ShrReg) -> ControlFlow:
    source = _shift_source(state, io, op.x, op.y)
    state.v[op.x] = source >> 1
    state.vf = source & 0x01
    return ADVANCE

# @intent:responsibility 8xyE。VF にシフト前の最上位ビットを設定し、左シフトします。
@dataclass(frozen=True)
class ShlReg(Instruction):
    MNEMONIC = "shl"
    x: int
    y: int

def execute_shl(state: Chip8CpuState, io: Peripherals, op: ShlReg) -> ControlFlow:
    source = _shift_source(state, io, op.x, op.y)
    state.v[op.x] = (source << 1) & 0xFF
    state.vf = (source >> 7) & 0x01
    return ADVANCE

# --- RND ---
# @intent:responsibility Cxkk。CPUが所有する乱数生成器の1バイトと kk の論理積を Vx に設定します。
@dataclass(frozen=True)
class Rand(Instruction):
    MNEMONIC = "rnd"
    x: int
    kk: int

def execute_rnd(state: Chip8CpuState, io: Peripherals, op: Rand) -> ControlFlow:
    state.v[op.x] = io.rng.getrandbits(8) & op.kk
    return ADVANCE
