# src/retro_chip8/arch/chip8/instructions/__init__.py
"""
CHIP-8命令セット実装パッケージ。
"""
from retro_chip8.arch.chip8.state import Chip8CpuState
from .base import (
    ADVANCE, ADVANCE_SKIP, SUSPEND, INSTRUCTION_WIDTH,
    Advance, AdvanceSkip, ControlFlow, Instruction, JumpTo, Peripherals, Suspend,
)
from .decoder import decode_opcode, is_super_chip
from .maps import EXECUTE_MAP

# @intent:responsibility デコードされたCHIP-8命令を実行し、PCの扱いを返します。
def execute_instruction(instruction: Instruction, state: Chip8CpuState, io: Peripherals) -> ControlFlow:
    """
    命令を実行し、CPUの状態と周辺装置を変更します。
    各実行関数は状態を変更する前に検証を済ませるため、例外発生時に状態は部分的に変更されません。
    """
    executor = EXECUTE_MAP.get(type(instruction))
    if executor is None:
        raise TypeError(f"No executor registered for {type(instruction).__name__}.")
    return executor(state, io, instruction)
