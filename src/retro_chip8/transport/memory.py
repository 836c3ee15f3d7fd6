# retro_chip8/transport/memory.py
"""
Transport Layer (メモリ)

このモジュールは、CHIP-8の4KBフラットなアドレス空間と、CALL/RET専用の
コールスタックを管理する責務を負います。
全ての読み書きはアクセスログに記録され、スナップショットとデバッガから参照されます。
"""
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from retro_chip8.common.errors import OutOfBoundsAccess, CallStackOverflow

# @intent:constant CHIP-8のアドレス空間のサイズと、歴史的なコールスタックの深さ。
MEMORY_SIZE = 0x1000
DEFAULT_STACK_DEPTH = 16

# @intent:responsibility メモリアクセスを記録するためのタイプを定義します。
class MemoryAccessType(Enum):
    READ = "READ"
    WRITE = "WRITE"

# @intent:responsibility 個々のメモリアクセス操作（1バイト単位）を記録します。
@dataclass(frozen=True) # 不変データ構造
class MemoryAccess:
    """
    メモリ上で行われた単一のアクセス（読み込みまたは書き込み）を記録するデータクラス。
    """
    address: int
    data: int # 8bit value
    access_type: MemoryAccessType

# @intent:responsibility バイト単位でアドレス指定可能な固定長メモリとコールスタックを提供します。
class Memory:
    """
    CHIP-8のメインメモリ。
    範囲外アクセスは切り詰めずに OutOfBoundsAccess を送出します。
    """
    # @intent:responsibility 指定サイズのメモリ領域と空のコールスタックを初期化します。
    # @intent:pre-condition size と stack_depth は正の整数である必要があります。
    def __init__(self, size: int = MEMORY_SIZE, stack_depth: int = DEFAULT_STACK_DEPTH):
        if not isinstance(size, int) or size <= 0:
            raise ValueError("Memory size must be a positive integer.")
        if not isinstance(stack_depth, int) or stack_depth <= 0:
            raise ValueError("Call stack depth must be a positive integer.")
        self._size = size
        self._stack_depth = stack_depth
        self._data = bytearray(size)
        self._stack: List[int] = []
        self._activity_log: List[MemoryAccess] = []

    @property
    def size(self) -> int:
        return self._size

    @property
    def stack_depth(self) -> int:
        return self._stack_depth

    # @intent:responsibility コールスタックの内容（底から頂上の順）を読み取り専用で返します。
    @property
    def stack(self) -> Tuple[int, ...]:
        return tuple(self._stack)

    # @intent:responsibility アクセス範囲がメモリ内に収まることを検証します。
    # @intent:post-condition 範囲外の場合、メモリを一切変更せずに OutOfBoundsAccess を送出します。
    def _check_range(self, offset: int, size: int) -> None:
        if size < 0:
            raise ValueError(f"Access size must not be negative: {size}")
        if offset < 0 or offset + size > self._size:
            raise OutOfBoundsAccess(
                f"Access of {size} bytes at {offset:#06x} exceeds memory of size {self._size:#06x}."
            )

    # @intent:responsibility 書き込みデータを検証し、bytesに正規化します。
    def _to_bytes(self, data: Iterable[int]) -> bytes:
        values = list(data)
        for value in values:
            if not 0 <= value <= 0xFF:
                raise ValueError(f"Data {value} is not an 8-bit value.")
        return bytes(values)

    # @intent:responsibility 指定されたオフセットから size バイトを読み出し、アクセスを記録します。
    def load(self, offset: int, size: int) -> bytes:
        self._check_range(offset, size)
        data = bytes(self._data[offset:offset + size])
        for i, value in enumerate(data):
            self._activity_log.append(MemoryAccess(offset + i, value, MemoryAccessType.READ))
        return data

    # @intent:responsibility ログを記録せずに読み出します。逆アセンブラやインスペクタ用。
    def peek(self, offset: int, size: int = 1) -> bytes:
        self._check_range(offset, size)
        return bytes(self._data[offset:offset + size])

    # @intent:responsibility 指定されたオフセットから data を書き込み、アクセスを記録します。
    # @intent:pre-condition 範囲検証は書き込み前に行われるため、失敗時にメモリは部分的に変更されません。
    def store(self, offset: int, data: Iterable[int]) -> None:
        payload = self._to_bytes(data)
        self._check_range(offset, len(payload))
        self._data[offset:offset + len(payload)] = payload
        for i, value in enumerate(payload):
            self._activity_log.append(MemoryAccess(offset + i, value, MemoryAccessType.WRITE))

    # @intent:responsibility フォントやROMイメージを配置するためのバックドア書き込みです。
    def load_data(self, offset: int, data: Iterable[int]) -> None:
        """
        メモリの内容を初期化するために使用します。アクセスログには残りません。
        """
        payload = self._to_bytes(data)
        self._check_range(offset, len(payload))
        self._data[offset:offset + len(payload)] = payload

    # @intent:utility_function 16bitワードをビッグエンディアン形式で読み込みます。
    def read_word(self, offset: int) -> int:
        high, low = self.load(offset, 2)
        return (high << 8) | low

    # @intent:responsibility 戻りアドレスをコールスタックに積みます。
    def push_return(self, address: int) -> None:
        if len(self._stack) >= self._stack_depth:
            raise CallStackOverflow(
                f"Call stack depth {self._stack_depth} exceeded while pushing {address:#06x}."
            )
        self._stack.append(address)

    # @intent:responsibility 戻りアドレスを取り出します。空の場合は None を返し、扱いは呼び出し側に委ねます。
    def pop_return(self) -> Optional[int]:
        if not self._stack:
            return None
        return self._stack.pop()

    # @intent:responsibility 記録されたアクセスログを取得し、クリアします。
    def get_and_clear_activity_log(self) -> List[MemoryAccess]:
        log = self._activity_log
        self._activity_log = []
        return log

    # @intent:responsibility メモリの内容を残したまま、コールスタックだけを空にします。
    def clear_stack(self) -> None:
        self._stack = []

    # @intent:responsibility メモリをゼロで埋め、コールスタックとログを空にします。
    def reset(self) -> None:
        self._data = bytearray(self._size)
        self._stack = []
        self._activity_log = []
