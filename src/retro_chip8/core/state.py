# retro_chip8/core/state.py
"""
Core Layer (CPU状態)

このモジュールは、CPUの基本的な状態（プログラムカウンタ）を保持するデータ構造を定義します。
"""
import copy
from dataclasses import dataclass

# @intent:responsibility CPUのレジスタ状態を保持します。アーキテクチャ固有のレジスタはこれを拡張します。
@dataclass
class CpuState:
    """
    CPUのレジスタ状態を保持するデータクラス。
    アーキテクチャ固有のレジスタは arch/<name>/state.py で追加されます。
    """
    pc: int = 0x0000  # Program Counter

    # @intent:responsibility スナップショット用に、可変フィールドを含めて独立したコピーを返します。
    # @intent:rationale レジスタファイルはリストで保持されるため、浅いコピーでは後続のステップに書き換えられてしまう。
    def copy(self) -> "CpuState":
        return copy.deepcopy(self)
