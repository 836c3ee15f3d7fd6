# retro_chip8/loader/loader.py
"""
ROMローダーモジュール。
生のバイナリROMイメージをメモリのプログラム領域（0x200）へそのままコピーします。
内容の検証は行わず、不正な命令は実行時のデコード失敗として扱われます。
"""
import logging
from pathlib import Path
from typing import Union

from retro_chip8.common.errors import OutOfBoundsAccess
from retro_chip8.transport.memory import Memory
from retro_chip8.arch.chip8.state import PROGRAM_START

logger = logging.getLogger(__name__)

class RomLoader:
    """
    バイナリROMファイルを読み込み、メモリに配置するローダー。
    """
    def load_rom(self, file_path: Union[str, Path], memory: Memory, address: int = PROGRAM_START) -> int:
        with open(file_path, 'rb') as f:
            data = f.read()
        size = self.load_rom_bytes(data, memory, address)
        logger.info("Loaded %d bytes from %s at %#05x", size, file_path, address)
        return size

    def load_rom_bytes(self, data: bytes, memory: Memory, address: int = PROGRAM_START) -> int:
        """
        バイト列をメモリに配置し、配置したバイト数を返します。
        """
        if address + len(data) > memory.size:
            raise OutOfBoundsAccess(
                f"ROM of {len(data)} bytes does not fit in memory at {address:#05x} "
                f"({memory.size - address} bytes available)."
            )
        memory.load_data(address, data)
        return len(data)
