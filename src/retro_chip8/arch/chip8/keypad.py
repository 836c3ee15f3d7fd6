# src/retro_chip8/arch/chip8/keypad.py
"""
CHIP-8 16キー入力デバイス。
"""
from typing import Optional

# @intent:constant キーの数（0x0 - 0xF）。
NUM_KEYS = 0x10

# @intent:responsibility 現在押されているキー（最大1つ）を保持します。
# @intent:rationale 後から押されたキーが前のキーを置き換える（last-key-wins）。
class Keypad:
    def __init__(self):
        self._pressed: Optional[int] = None

    # @intent:responsibility key を唯一の押下キーとして記録します。
    # @intent:pre-condition key は 0x0 から 0xF の範囲である必要があります。
    def press(self, key: int) -> None:
        if not isinstance(key, int) or not 0 <= key < NUM_KEYS:
            raise ValueError(f"Key {key!r} is not a valid CHIP-8 key (0x0-0xF).")
        self._pressed = key

    def release(self) -> None:
        self._pressed = None

    # @intent:responsibility key が現在押されているキーかどうかを返します。範囲外の値は押されていない扱いです。
    def is_pressed(self, key: int) -> bool:
        return self._pressed is not None and key == self._pressed

    def get_pressed(self) -> Optional[int]:
        return self._pressed
