# src/retro_chip8/arch/chip8/display.py
"""
CHIP-8 モノクロ表示バッファ。

64x32 ピクセルを 1 バイト 8 ピクセル（MSB が左端）で行優先に詰めて保持します。
スプライトは XOR で合成され、1 から 0 に変化したピクセルがあれば衝突として報告されます。
"""
from typing import List, Sequence

from retro_chip8.common.errors import OutOfBoundsAccess

# @intent:constant 表示解像度と1行あたりのバイト数。
DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32
BYTES_PER_ROW = DISPLAY_WIDTH // 8
BUFFER_SIZE = BYTES_PER_ROW * DISPLAY_HEIGHT

# @intent:responsibility パックされたフレームバッファへの XOR 描画と衝突検出を提供します。
# @intent:rationale 画面端では座標を幅・高さで折り返します。はみ出したスプライトのビットは
#                  反対側の端に描画され、バッファ外のインデックスには決して触れません。
class Display:
    def __init__(self):
        self._buffer = bytearray(BUFFER_SIZE)

    # @intent:responsibility 全ピクセルを0にします。
    def clear(self) -> None:
        self._buffer = bytearray(BUFFER_SIZE)

    # @intent:responsibility スプライトを (row, col) に XOR 描画し、衝突の有無を返します。
    # @intent:pre-condition sprite の各要素は8bit値。row/col はピクセル単位で、範囲外でも折り返されます。
    def draw(self, row: int, col: int, sprite: Sequence[int]) -> bool:
        collision = False
        row %= DISPLAY_HEIGHT
        col %= DISPLAY_WIDTH
        byte_col, shift = divmod(col, 8)

        for line, sprite_byte in enumerate(sprite):
            y = (row + line) % DISPLAY_HEIGHT
            # 非整列のスプライトは隣接する2バイトにまたがる
            left = sprite_byte >> shift
            collision |= self._xor_byte(y, byte_col, left)
            if shift:
                right = (sprite_byte << (8 - shift)) & 0xFF
                collision |= self._xor_byte(y, (byte_col + 1) % BYTES_PER_ROW, right)
        return collision

    # @intent:responsibility 1バイトを XOR し、消えたビットがあったかどうかを返します。
    def _xor_byte(self, y: int, byte_col: int, bits: int) -> bool:
        index = y * BYTES_PER_ROW + byte_col
        before = self._buffer[index]
        self._buffer[index] = before ^ bits
        return (before & bits) != 0

    # @intent:responsibility バッファを変更せずに読み出します。col はピクセル単位で8の倍数である必要があります。
    def read(self, row: int, col: int, length: int) -> bytes:
        if col % 8:
            raise ValueError(f"Column {col} is not aligned to a byte boundary.")
        index = row * BYTES_PER_ROW + col // 8
        if row < 0 or col < 0 or length < 0 or index + length > BUFFER_SIZE:
            raise OutOfBoundsAccess(
                f"Read of {length} bytes at row {row}, column {col} exceeds the display buffer."
            )
        return bytes(self._buffer[index:index + length])

    # @intent:responsibility 指定ピクセルが点灯しているかを返します。
    def get_pixel(self, x: int, y: int) -> bool:
        if not (0 <= x < DISPLAY_WIDTH and 0 <= y < DISPLAY_HEIGHT):
            raise OutOfBoundsAccess(f"Pixel ({x}, {y}) is outside the {DISPLAY_WIDTH}x{DISPLAY_HEIGHT} display.")
        value = self._buffer[y * BYTES_PER_ROW + x // 8]
        return bool(value & (0x80 >> (x % 8)))

    # @intent:responsibility レンダラ向けに、ピクセルを行ごとの真偽値リストに展開します。
    def rows(self) -> List[List[bool]]:
        return [
            [self.get_pixel(x, y) for x in range(DISPLAY_WIDTH)]
            for y in range(DISPLAY_HEIGHT)
        ]

    # @intent:responsibility 全ピクセルが消灯しているかを返します。
    def is_blank(self) -> bool:
        return not any(self._buffer)
