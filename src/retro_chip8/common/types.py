"""
共通の型定義を提供するモジュール。
CPU、逆アセンブラ、デバッガで共有する型エイリアスと表示用の定義をまとめます。
"""
from typing import Dict, List, NamedTuple

# @intent:data_structure シンボル名とアドレスの対応表。スナップショットのラベル付けに使用します。
SymbolMap = Dict[str, int]

# @intent:data_structure 単一のレジスタの表示定義。
class RegisterInfo(NamedTuple):
    name: str
    width: int  # ビット幅 (8 or 16)

# @intent:data_structure 関連するレジスタ（例: "General", "Timers"）をまとめた表示グループ。
class RegisterLayoutInfo(NamedTuple):
    group_name: str
    registers: List[RegisterInfo]

# @intent:data_structure 逆アセンブル結果の1行分。
class DisassemblyLine(NamedTuple):
    address: int
    hex_bytes: str  # 例: "00E0"
    text: str       # 例: "cls"
