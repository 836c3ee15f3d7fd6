# src/retro_chip8/arch/chip8/instructions/decoder.py
"""
CHIP-8 命令デコーダ。

最上位ニブルで一次判定し、0x0 / 0x5 / 0x8 / 0x9 / 0xE / 0xF の各グループは
下位ニブルまたは下位バイトで二次判定します。デコードは副作用を持ちません。
"""
from retro_chip8.common.errors import UnknownInstruction, UnsupportedInstruction
from .base import Instruction, split_fields
from .control import SysCall
from .maps import (
    KEY_DECODE_MAP, LOGICAL_DECODE_MAP, MISC_DECODE_MAP, PRIMARY_DECODE_MAP,
    REGISTER_COMPARE_DECODE_MAP, SUPER_MISC_CODES, SUPER_SCROLL_DOWN_PREFIX,
    SUPER_SYSTEM_WORDS, SYSTEM_DECODE_MAP,
)


# @intent:responsibility 拡張命令セットに属するワードかどうかを判定します。
def is_super_chip(word: int) -> bool:
    f = split_fields(word)
    if f.high == 0x0:
        return word in SUPER_SYSTEM_WORDS or (word & 0xFFF0) == SUPER_SCROLL_DOWN_PREFIX
    if f.high == 0xD:
        return f.n == 0  # Dxy0: 16x16 スプライト
    if f.high == 0xF:
        return f.kk in SUPER_MISC_CODES
    return False


# @intent:responsibility 16bitの命令ワードを命令オブジェクトに変換します。
# @intent:post-condition 一致しないワードは UnknownInstruction、拡張命令は UnsupportedInstruction を送出します。
def decode_opcode(word: int) -> Instruction:
    """
    命令ワードをデコードし、オペランド付きの命令オブジェクトを返します。
    """
    if not 0 <= word <= 0xFFFF:
        raise ValueError(f"Instruction word {word} is not a 16-bit value.")
    if is_super_chip(word):
        raise UnsupportedInstruction(word)

    f = split_fields(word)
    if f.high == 0x0:
        cls = SYSTEM_DECODE_MAP.get(word, SysCall)
    elif f.high in REGISTER_COMPARE_DECODE_MAP:
        cls = REGISTER_COMPARE_DECODE_MAP[f.high] if f.n == 0 else None
    elif f.high == 0x8:
        cls = LOGICAL_DECODE_MAP.get(f.n)
    elif f.high == 0xE:
        cls = KEY_DECODE_MAP.get(f.kk)
    elif f.high == 0xF:
        cls = MISC_DECODE_MAP.get(f.kk)
    else:
        cls = PRIMARY_DECODE_MAP.get(f.high)

    if cls is None:
        raise UnknownInstruction(word)
    return cls.from_fields(f)
