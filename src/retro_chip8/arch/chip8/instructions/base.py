# src/retro_chip8/arch/chip8/instructions/base.py
"""
CHIP-8命令実装用の共通定義。

命令は種類ごとに1つの不変データクラスで表現され、そのオペコードに関係する
オペランドだけを保持します。実行関数は状態を更新し、PCの扱いを ControlFlow として返します。
"""
import random
from dataclasses import dataclass, fields
from typing import ClassVar, List, NamedTuple, Union

from retro_chip8.config.models import Quirks
from retro_chip8.transport.memory import Memory
from retro_chip8.arch.chip8.display import Display
from retro_chip8.arch.chip8.keypad import Keypad

# @intent:constant 1命令のバイト長。
INSTRUCTION_WIDTH = 2


# --- Control-flow effects ---
# @intent:responsibility PCを次の命令へ進めます。
@dataclass(frozen=True)
class Advance:
    pass

# @intent:responsibility 次の命令を飛ばし、PCを2命令分進めます。
@dataclass(frozen=True)
class AdvanceSkip:
    pass

# @intent:responsibility PCを絶対アドレスに設定します。
@dataclass(frozen=True)
class JumpTo:
    address: int

# @intent:responsibility PCを変更しません。次のステップで同じ命令を再実行させます。
@dataclass(frozen=True)
class Suspend:
    pass

ADVANCE = Advance()
ADVANCE_SKIP = AdvanceSkip()
SUSPEND = Suspend()

ControlFlow = Union[Advance, AdvanceSkip, JumpTo, Suspend]


# @intent:utility_function 条件が成立すれば次の命令を飛ばします。
def skip_if(condition: bool) -> ControlFlow:
    return ADVANCE_SKIP if condition else ADVANCE


# @intent:data_structure 命令ワードを4つのニブルと派生オペランドに分解した結果。
class InstructionFields(NamedTuple):
    high: int  # 最上位ニブル（命令グループ）
    x: int
    y: int
    n: int
    kk: int
    nnn: int

# @intent:utility_function 16bitの命令ワードをフィールドに分解します。
def split_fields(word: int) -> InstructionFields:
    return InstructionFields(
        high=(word & 0xF000) >> 12,
        x=(word & 0x0F00) >> 8,
        y=(word & 0x00F0) >> 4,
        n=word & 0x000F,
        kk=word & 0x00FF,
        nnn=word & 0x0FFF,
    )


# @intent:constant オペランド名ごとの許容上限（含む）。
_OPERAND_LIMITS = {"x": 0xF, "y": 0xF, "n": 0xF, "kk": 0xFF, "nnn": 0xFFF}


# @intent:responsibility 全命令の基底クラス。オペランド範囲の検証と表示形式を提供します。
@dataclass(frozen=True)
class Instruction:
    MNEMONIC: ClassVar[str] = "???"

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            limit = _OPERAND_LIMITS.get(f.name)
            if limit is not None and not 0 <= value <= limit:
                raise ValueError(f"{type(self).__name__}.{f.name}={value} is out of range (0-{limit:#x}).")

    # @intent:responsibility 分解済みフィールドから、この命令が必要とするオペランドだけを取り出して生成します。
    @classmethod
    def from_fields(cls, f: InstructionFields) -> "Instruction":
        values = f._asdict()
        return cls(**{field_.name: values[field_.name] for field_ in fields(cls)})

    # @intent:responsibility 表示用のオペランド文字列を返します。既定ではフィールド順に整形します。
    def operands(self) -> List[str]:
        result = []
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name in ("x", "y"):
                result.append(reg(value))
            elif f.name == "kk":
                result.append(f"{value:#04x}")
            elif f.name == "nnn":
                result.append(addr(value))
            else:
                result.append(str(value))
        return result

    def __str__(self) -> str:
        ops = self.operands()
        return f"{self.MNEMONIC} {', '.join(ops)}" if ops else self.MNEMONIC


def reg(index: int) -> str:
    return f"v{index:x}"

def addr(value: int) -> str:
    return f"0x{value:03X}"


# @intent:responsibility 実行関数が操作する周辺装置と実行時ポリシーをまとめます。
# @intent:rationale 1ステップの間、CPUはこれらに排他的にアクセスします。
@dataclass
class Peripherals:
    memory: Memory
    display: Display
    keypad: Keypad
    rng: random.Random
    quirks: Quirks
