# src/retro_chip8/arch/chip8/state.py
"""
CHIP-8 CPU固有の状態定義。
"""
from dataclasses import dataclass, field
from typing import List

from retro_chip8.core.state import CpuState

# @intent:constant レジスタ数、ROMのロード先、フラグレジスタの番号。
NUM_REGISTERS = 0x10
PROGRAM_START = 0x200
FLAG_REGISTER = 0xF

# @intent:constant 組み込み16進フォント（0-F、各5バイト）とその配置先。
FONT_ADDRESS = 0x000
FONT_GLYPH_SIZE = 5
FONT_SPRITES = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])

# @intent:responsibility CHIP-8の汎用レジスタ V0-VF、インデックスレジスタ I、2つのタイマーを保持します。
@dataclass
class Chip8CpuState(CpuState):
    """
    CHIP-8 CPUのレジスタ状態を保持するデータクラス。
    VF は算術・シフト・描画命令のフラグ出力として上書きされます。
    """
    pc: int = PROGRAM_START
    v: List[int] = field(default_factory=lambda: [0] * NUM_REGISTERS)
    i: int = 0x0000           # Index Register
    delay_timer: int = 0x00
    sound_timer: int = 0x00

    @property
    def vf(self) -> int:
        return self.v[FLAG_REGISTER]

    @vf.setter
    def vf(self, value: int) -> None:
        self.v[FLAG_REGISTER] = value & 0xFF

    # @intent:responsibility サウンドタイマーが非ゼロの間、音が鳴っている状態とみなします。
    @property
    def sound_active(self) -> bool:
        return self.sound_timer != 0

    # @intent:accessor "v0".."vf"、"i"、タイマー名でレジスタ値を取得します。デバッガの条件評価用。
    def get_register(self, name: str) -> int:
        key = name.lower()
        if len(key) == 2 and key[0] == "v" and key[1] in "0123456789abcdef":
            return self.v[int(key[1], 16)]
        if key in ("i", "pc", "delay_timer", "sound_timer"):
            return getattr(self, key)
        raise KeyError(f"Unknown register: {name}")
