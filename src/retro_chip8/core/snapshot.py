# retro_chip8/core/snapshot.py
"""
実行状態の不変スナップショット

このモジュールは、1ステップ実行後のCPU状態とメモリアクセスを記録した不変のデータ構造を定義します。
表示側への情報提供と、デバッガでの状態記録に用いる責務を負います。
"""
from dataclasses import dataclass, field
from typing import List, Optional

from retro_chip8.core.state import CpuState
from retro_chip8.transport.memory import MemoryAccess, MemoryAccessType

__all__ = ["Operation", "Metadata", "Snapshot", "MemoryAccess", "MemoryAccessType"]


# @intent:responsibility 実行（またはスキップ）された命令の詳細を記録します。
@dataclass(frozen=True) # 不変データ構造
class Operation:
    """
    実行された命令の詳細（HEX、ニーモニック、オペランド）を記録するデータクラス。
    """
    opcode_hex: str # 例: "2ABC"
    mnemonic: str # 例: "call"
    operands: List[str] = field(default_factory=list) # 例: ["0xABC"]
    length: int = 2 # 命令のバイト長

    # @intent:responsibility "mnemonic op1, op2" 形式の表示文字列を返します。
    @property
    def text(self) -> str:
        if self.operands:
            return f"{self.mnemonic} " + ", ".join(self.operands)
        return self.mnemonic

# @intent:responsibility 実行に関するメタデータを記録します。
@dataclass(frozen=True) # 不変データ構造
class Metadata:
    """
    実行に関するメタデータ（累計ステップ数、シンボル情報、停止状態など）を記録するデータクラス。
    """
    step_count: int
    symbol_info: Optional[str] = None # 例: "main_loop: jp 0x200"
    suspended: bool = False # キー入力待ちで PC が進まなかった
    decode_error: Optional[str] = None # スキップされた命令の理由

# @intent:responsibility ある一時点におけるCPU状態とメモリアクセスを不変に記録します。
@dataclass(frozen=True) # 不変データ構造
class Snapshot:
    """
    1ステップ実行後のCPU状態のコピーと、そのステップで発生したメモリアクセスの記録。
    """
    state: CpuState
    operation: Operation
    metadata: Metadata
    memory_activity: List[MemoryAccess] = field(default_factory=list)
