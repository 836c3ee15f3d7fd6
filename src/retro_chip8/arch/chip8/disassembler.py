# src/retro_chip8/arch/chip8/disassembler.py
"""
CHIP-8 Disassembler

メモリ上のバイナリデータを解析し、CHIP-8のニーモニックに変換します。
Instruction Layerのデコードロジックを再利用しますが、アクセスログを汚さないように
Memory.peek で読み込みます。
"""
from typing import List

from retro_chip8.common.errors import DecodeError
from retro_chip8.common.types import DisassemblyLine
from retro_chip8.transport.memory import Memory
from retro_chip8.arch.chip8.instructions import INSTRUCTION_WIDTH, decode_opcode

# @intent:responsibility 指定されたメモリ範囲を逆アセンブルし、表示用データを生成します。
def disassemble(memory: Memory, start_addr: int, length: int) -> List[DisassemblyLine]:
    """
    指定された範囲のメモリを2バイト単位で逆アセンブルします。
    デコードできないワードは ".word" として出力します。
    """
    result = []
    current_addr = start_addr
    end_addr = min(start_addr + length, memory.size)

    # 末尾の1バイトだけ残った場合は命令として扱わない
    while current_addr + INSTRUCTION_WIDTH <= end_addr:
        high, low = memory.peek(current_addr, INSTRUCTION_WIDTH)
        word = (high << 8) | low
        try:
            text = str(decode_opcode(word))
        except DecodeError:
            text = f".word 0x{word:04X}"
        result.append(DisassemblyLine(current_addr, f"{word:04X}", text))
        current_addr += INSTRUCTION_WIDTH

    return result
