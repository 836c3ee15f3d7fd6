# src/retro_chip8/arch/chip8/instructions/load.py
"""
ロード/ストア命令（レジスタ、インデックスレジスタ、タイマー、メモリ転送）の実装。
"""
from dataclasses import dataclass
from typing import List

from retro_chip8.arch.chip8.state import Chip8CpuState, FONT_ADDRESS, FONT_GLYPH_SIZE
from .base import ADVANCE, ControlFlow, Instruction, Peripherals, addr, reg


# --- LD Vx, byte / LD Vx, Vy ---
@dataclass(frozen=True)
class LoadImm(Instruction):
    MNEMONIC = "ld"
    x: int
    kk: int

def execute_ld_imm(state: Chip8CpuState, io: Peripherals, op: LoadImm) -> ControlFlow:
    state.v[op.x] = op.kk
    return ADVANCE

@dataclass(frozen=True)
class LoadReg(Instruction):
    MNEMONIC = "ld"
    x: int
    y: int

def execute_ld_reg(state: Chip8CpuState, io: Peripherals, op: LoadReg) -> ControlFlow:
    state.v[op.x] = state.v[op.y]
    return ADVANCE

# --- LD I, addr / ADD I, Vx ---
@dataclass(frozen=True)
class LoadAddr(Instruction):
    MNEMONIC = "ld"
    nnn: int

    def operands(self) -> List[str]:
        return ["I", addr(self.nnn)]

def execute_ld_addr(state: Chip8CpuState, io: Peripherals, op: LoadAddr) -> ControlFlow:
    state.i = op.nnn
    return ADVANCE

# @intent:responsibility Fx1E。I に Vx を加算します。フラグは変化しません。
@dataclass(frozen=True)
class AddAddr(Instruction):
    MNEMONIC = "add"
    x: int

    def operands(self) -> List[str]:
        return ["I", reg(self.x)]

def execute_add_addr(state: Chip8CpuState, io: Peripherals, op: AddAddr) -> ControlFlow:
    state.i = (state.i + state.v[op.x]) & 0xFFFF
    return ADVANCE

# --- LD F, Vx ---
# @intent:responsibility Fx29。Vx の下位4bitに対応するフォントグリフのアドレスを I に設定します。
@dataclass(frozen=True)
class LoadDigit(Instruction):
    MNEMONIC = "ld"
    x: int

    def operands(self) -> List[str]:
        return ["F", reg(self.x)]

def execute_ld_digit(state: Chip8CpuState, io: Peripherals, op: LoadDigit) -> ControlFlow:
    state.i = FONT_ADDRESS + (state.v[op.x] & 0x0F) * FONT_GLYPH_SIZE
    return ADVANCE

# --- Timers ---
@dataclass(frozen=True)
class GetDelay(Instruction):
    MNEMONIC = "ld"
    x: int

    def operands(self) -> List[str]:
        return [reg(self.x), "DT"]

def execute_get_delay(state: Chip8CpuState, io: Peripherals, op: GetDelay) -> ControlFlow:
    state.v[op.x] = state.delay_timer
    return ADVANCE

@dataclass(frozen=True)
class SetDelay(Instruction):
    MNEMONIC = "ld"
    x: int

    def operands(self) -> List[str]:
        return ["DT", reg(self.x)]

def execute_set_delay(state: Chip8CpuState, io: Peripherals, op: SetDelay) -> ControlFlow:
    state.delay_timer = state.v[op.x]
    return ADVANCE

@dataclass(frozen=True)
class SetSound(Instruction):
    MNEMONIC = "ld"
    x: int

    def operands(self) -> List[str]:
        return ["ST", reg(self.x)]

def execute_set_sound(state: Chip8CpuState, io: Peripherals, op: SetSound) -> ControlFlow:
    state.sound_timer = state.v[op.x]
    return ADVANCE

# --- LD B, Vx ---
# @intent:responsibility Fx33。Vx の10進表現（百の位、十の位、一の位）を I から3バイトに格納します。
@dataclass(frozen=True)
class StoreBcd(Instruction):
    MNEMONIC = "ld"
    x: int

    def operands(self) -> List[str]:
        return ["B", reg(self.x)]

def execute_store_bcd(state: Chip8CpuState, io: Peripherals, op: StoreBcd) -> ControlFlow:
    value = state.v[op.x]
    io.memory.store(state.i, [value // 100, (value // 10) % 10, value % 10])
    return ADVANCE

# --- LD [I], Vx / LD Vx, [I] ---
# @intent:responsibility Fx55。V0..Vx を I から順にメモリへ格納します。
# @intent:rationale I を進めるかどうかは Quirks.increment_index に従います。
@dataclass(frozen=True)
class StoreMem(Instruction):
    MNEMONIC = "ld"
    x: int

    def operands(self) -> List[str]:
        return ["[I]", reg(self.x)]

def execute_store_mem(state: Chip8CpuState, io: Peripherals, op: StoreMem) -> ControlFlow:
    io.memory.store(state.i, state.v[:op.x + 1])
    if io.quirks.increment_index:
        state.i = (state.i + op.x + 1) & 0xFFFF
    return ADVANCE

# @intent:responsibility Fx65。I から x+1 バイトを V0..Vx に読み込みます。
@dataclass(frozen=True)
class LoadMem(Instruction):
    MNEMONIC = "ld"
    x: int

    def operands(self) -> List[str]:
        return [reg(self.x), "[I]"]

def execute_load_mem(state: Chip8CpuState, io: Peripherals, op: LoadMem) -> ControlFlow:
    data = io.memory.load(state.i, op.x + 1)
    state.v[:op.x + 1] = list(data)
    if io.quirks.increment_index:
        state.i = (state.i + op.x + 1) & 0xFFFF
    return ADVANCE
