# src/retro_chip8/arch/chip8/instructions/control.py
"""
制御命令（ジャンプ、サブルーチン、条件スキップ）の実装。
"""
import logging
from dataclasses import dataclass
from typing import List

from retro_chip8.common.errors import CallStackOverflow, CallStackUnderflow
from retro_chip8.config.models import ReturnUnderflowPolicy
from retro_chip8.arch.chip8.state import Chip8CpuState
from .base import (
    ADVANCE, INSTRUCTION_WIDTH, ControlFlow, Instruction, JumpTo, Peripherals,
    addr, reg, skip_if,
)

logger = logging.getLogger(__name__)


# --- SYS ---
# @intent:responsibility 0nnn (マシン語ルーチン呼び出し)。現代のインタプリタと同様に無視し、次の命令へ進みます。
@dataclass(frozen=True)
class SysCall(Instruction):
    MNEMONIC = "sys"
    nnn: int

def execute_sys(state: Chip8CpuState, io: Peripherals, op: SysCall) -> ControlFlow:
    return ADVANCE

# --- RET ---
# @intent:responsibility 00EE。コールスタックから戻りアドレスを取り出します。
@dataclass(frozen=True)
class Return(Instruction):
    MNEMONIC = "ret"

# @intent:responsibility RET命令を実行します。スタックが空の場合の扱いは Quirks.return_underflow に従います。
def execute_ret(state: Chip8CpuState, io: Peripherals, op: Return) -> ControlFlow:
    address = io.memory.pop_return()
    if address is not None:
        return JumpTo(address)
    if io.quirks.return_underflow is ReturnUnderflowPolicy.IGNORE:
        logger.warning("RET with empty call stack at %#05x ignored", state.pc)
        return ADVANCE
    logger.error("RET with empty call stack at %#05x", state.pc)
    raise CallStackUnderflow(f"RET at {state.pc:#06x} with an empty call stack.")

# --- JP ---
# @intent:responsibility 1nnn。絶対アドレスへジャンプします。
@dataclass(frozen=True)
class Jump(Instruction):
    MNEMONIC = "jp"
    nnn: int

def execute_jp(state: Chip8CpuState, io: Peripherals, op: Jump) -> ControlFlow:
    return JumpTo(op.nnn)

# --- JP V0, addr ---
# @intent:responsibility Bnnn。nnn + V0 へジャンプします。
@dataclass(frozen=True)
class JumpOffset(Instruction):
    MNEMONIC = "jp"
    nnn: int

    def operands(self) -> List[str]:
        return [reg(0), addr(self.nnn)]

def execute_jp_offset(state: Chip8CpuState, io: Peripherals, op: JumpOffset) -> ControlFlow:
    return JumpTo((op.nnn + state.v[0]) & 0xFFFF)

# --- CALL ---
# @intent:responsibility 2nnn。次の命令のアドレスをスタックに積んでジャンプします。
@dataclass(frozen=True)
class Call(Instruction):
    MNEMONIC = "call"
    nnn: int

# @intent:responsibility CALL命令を実行します。戻りアドレスは CALL 自身ではなく次の命令です。
# @intent:pre-condition スタックの深さは Quirks.stack_depth とメモリ側の上限の両方を超えられません。
def execute_call(state: Chip8CpuState, io: Peripherals, op: Call) -> ControlFlow:
    if len(io.memory.stack) >= io.quirks.stack_depth:
        raise CallStackOverflow(
            f"Call stack depth {io.quirks.stack_depth} exceeded by CALL at {state.pc:#06x}."
        )
    io.memory.push_return((state.pc + INSTRUCTION_WIDTH) & 0xFFFF)
    return JumpTo(op.nnn)

# --- SE / SNE ---
@dataclass(frozen=True)
class SkipEqImm(Instruction):
    MNEMONIC = "se"
    x: int
    kk: int

def execute_se_imm(state: Chip8CpuState, io: Peripherals, op: SkipEqImm) -> ControlFlow:
    return skip_if(state.v[op.x] == op.kk)

@dataclass(frozen=True)
class SkipNeImm(Instruction):
    MNEMONIC = "sne"
    x: int
    kk: int

def execute_sne_imm(state: Chip8CpuState, io: Peripherals, op: SkipNeImm) -> ControlFlow:
    return skip_if(state.v[op.x] != op.kk)

@dataclass(frozen=True)
class SkipEqReg(Instruction):
    MNEMONIC = "se"
    x: int
    y: int

def execute_se_reg(state: Chip8CpuState, io: Peripherals, op: SkipEqReg) -> ControlFlow:
    return skip_if(state.v[op.x] == state.v[op.y])

@dataclass(frozen=True)
class SkipNeReg(Instruction):
    MNEMONIC = "sne"
    x: int
    y: int

def execute_sne_reg(state: Chip8CpuState, io: Peripherals, op: SkipNeReg) -> ControlFlow:
    return skip_if(state.v[op.x] != state.v[op.y])
