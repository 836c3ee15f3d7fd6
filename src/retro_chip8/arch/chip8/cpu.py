# src/retro_chip8/arch/chip8/cpu.py
"""
CHIP-8 CPUエミュレーションの中心モジュール。

レジスタ、PC、タイマーを所有し、1ステップの間メモリ・表示・キーパッドへ排他的にアクセスします。
"""
import random
from typing import Dict, List, Optional

from retro_chip8.common.types import DisassemblyLine, RegisterInfo, RegisterLayoutInfo
from retro_chip8.config.models import Quirks
from retro_chip8.core.cpu import AbstractCpu
from retro_chip8.core.snapshot import Operation
from retro_chip8.transport.memory import Memory
from retro_chip8.arch.chip8 import disassembler
from retro_chip8.arch.chip8.display import Display
from retro_chip8.arch.chip8.keypad import Keypad
from retro_chip8.arch.chip8.state import Chip8CpuState, FONT_ADDRESS, FONT_SPRITES, NUM_REGISTERS
from retro_chip8.arch.chip8.instructions import (
    INSTRUCTION_WIDTH, AdvanceSkip, ControlFlow, Instruction, JumpTo, Peripherals, Suspend,
    decode_opcode, execute_instruction,
)

# @intent:responsibility CHIP-8 CPUの具体的なエミュレーションロジック（フェッチ、デコード、実行）を提供します。
class Chip8Cpu(AbstractCpu):
    """
    CHIP-8 CPUをエミュレートするクラス。

    表示とキーパッドを省略した場合は新しいインスタンスを生成します。
    乱数生成器はCPUごとに所有され、seed で再現可能にできます。
    """
    def __init__(self, memory: Memory, display: Optional[Display] = None,
                 keypad: Optional[Keypad] = None, quirks: Optional[Quirks] = None,
                 seed: Optional[int] = None):
        super().__init__(memory)
        self._display = display if display is not None else Display()
        self._keypad = keypad if keypad is not None else Keypad()
        self._quirks = quirks if quirks is not None else Quirks()
        self._rng = random.Random(seed)
        self._peripherals = Peripherals(
            memory=memory,
            display=self._display,
            keypad=self._keypad,
            rng=self._rng,
            quirks=self._quirks,
        )
        self._install_font()

    @property
    def display(self) -> Display:
        return self._display

    @property
    def keypad(self) -> Keypad:
        return self._keypad

    @property
    def quirks(self) -> Quirks:
        return self._quirks

    # @intent:responsibility テストで乱数列を再現するため、CPUが所有する乱数生成器を再シードします。
    def seed(self, value: Optional[int]) -> None:
        self._rng.seed(value)

    # @intent:responsibility インタプリタ領域に組み込みフォントを配置します（アクセスログには残りません）。
    def _install_font(self) -> None:
        self._memory.load_data(FONT_ADDRESS, FONT_SPRITES)

    def _create_initial_state(self) -> Chip8CpuState:
        return Chip8CpuState()

    # @intent:responsibility レジスタ、タイマー、コールスタック、表示、キー入力を初期化し、フォントを再配置します。ROMは保持されます。
    def reset(self) -> None:
        super().reset()
        self._memory.clear_stack()
        self._display.clear()
        self._keypad.release()
        self._install_font()

    # @intent:responsibility PCから2バイトをビッグエンディアンで読み出します。
    def _fetch(self) -> int:
        return self._memory.read_word(self._state.pc)

    def _decode(self, opcode: int) -> Instruction:
        return decode_opcode(opcode)

    def _execute(self, instruction: Instruction) -> ControlFlow:
        return execute_instruction(instruction, self._state, self._peripherals)

    # @intent:responsibility 制御フロー効果をPCに反映します。
    # @intent:post-condition Suspend の場合のみPCは変化せず、True を返します。
    def _update_pc(self, effect: ControlFlow) -> bool:
        if isinstance(effect, Suspend):
            return True
        if isinstance(effect, JumpTo):
            self._state.pc = effect.address & 0xFFFF
        elif isinstance(effect, AdvanceSkip):
            self._state.pc = (self._state.pc + 2 * INSTRUCTION_WIDTH) & 0xFFFF
        else:
            self._state.pc = (self._state.pc + INSTRUCTION_WIDTH) & 0xFFFF
        return False

    def _skip(self) -> None:
        self._state.pc = (self._state.pc + INSTRUCTION_WIDTH) & 0xFFFF

    def _describe(self, opcode: int, instruction: Instruction) -> Operation:
        return Operation(
            opcode_hex=f"{opcode:04X}",
            mnemonic=instruction.MNEMONIC,
            operands=instruction.operands(),
            length=INSTRUCTION_WIDTH,
        )

    # @intent:responsibility 表示用に、現在のレジスタ値を辞書形式で提供します。
    def get_register_map(self) -> Dict[str, int]:
        s = self._state
        registers = {f"V{n:X}": s.v[n] for n in range(NUM_REGISTERS)}
        registers.update({
            "I": s.i, "PC": s.pc, "SP": len(self._memory.stack),
            "DT": s.delay_timer, "ST": s.sound_timer,
        })
        return registers

    # @intent:responsibility レジスタ表示レイアウト（グループ化）を定義します。
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [
            RegisterLayoutInfo("General", [RegisterInfo(f"V{n:X}", 8) for n in range(NUM_REGISTERS)]),
            RegisterLayoutInfo("Index/Pointers", [
                RegisterInfo("I", 16), RegisterInfo("PC", 16), RegisterInfo("SP", 8)
            ]),
            RegisterLayoutInfo("Timers", [
                RegisterInfo("DT", 8), RegisterInfo("ST", 8)
            ]),
        ]

    # @intent:responsibility 指定範囲のメモリを逆アセンブルします。
    def disassemble(self, start_addr: int, length: int) -> List[DisassemblyLine]:
        return disassembler.disassemble(self._memory, start_addr, length)
