import logging
from typing import Tuple

from retro_chip8.transport.memory import Memory
from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.arch.chip8.state import NUM_REGISTERS
from retro_chip8.loader.loader import RomLoader
from .models import MachineConfig, CpuInitialState

logger = logging.getLogger(__name__)

# @intent:responsibility システム構成（Config）に基づいて、Memory、Display、Keypad、CPUを生成・接続し、初期状態を適用します。
class SystemBuilder:
    def build_system(self, config: MachineConfig) -> Tuple[Chip8Cpu, Memory]:
        memory = Memory(stack_depth=config.quirks.stack_depth)
        cpu = Chip8Cpu(memory, quirks=config.quirks, seed=config.seed)

        if config.rom_path:
            RomLoader().load_rom(config.rom_path, memory)

        # 初期状態の適用
        self.apply_initial_state(cpu, config.initial_state)
        return cpu, memory

    # @intent:responsibility Configで定義された初期状態をCPUに適用します。
    # @intent:pre-condition レジスタ名は "v0".."vf"、値は8bitである必要があります。
    def apply_initial_state(self, cpu: Chip8Cpu, config_state: CpuInitialState) -> None:
        """
        CPUをリセットし、Configから指定された初期値を適用します。
        """
        cpu.reset()
        state = cpu.get_state()

        state.pc = config_state.pc
        state.i = config_state.index
        state.delay_timer = config_state.delay_timer
        state.sound_timer = config_state.sound_timer

        for reg_name, value in config_state.registers.items():
            index = self._register_index(reg_name)
            if not 0 <= value <= 0xFF:
                raise ValueError(f"Initial value {value} for {reg_name} is not an 8-bit value.")
            state.v[index] = value
        logger.debug("Applied initial state: pc=%#05x i=%#05x", state.pc, state.i)

    def _register_index(self, name: str) -> int:
        key = name.lower()
        if len(key) == 2 and key[0] == "v" and key[1] in "0123456789abcdef":
            index = int(key[1], 16)
            if index < NUM_REGISTERS:
                return index
        raise ValueError(f"Unknown register in initial state: {name}")
