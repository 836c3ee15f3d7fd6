# retro_chip8/common/errors.py
"""
例外の定義モジュール。

デコード失敗（回復可能）と、マシンフォールト（致命的）を型で区別します。
組み込み例外（ValueError / IndexError）も多重継承しているため、
既存の呼び出し側は従来通り組み込み型で捕捉できます。
"""


# @intent:responsibility このパッケージが送出する全ての例外の基底クラスです。
class Chip8Error(Exception):
    pass


# @intent:responsibility 命令ワードのデコード失敗を表します。エンジンは命令をスキップして継続します。
class DecodeError(Chip8Error, ValueError):
    """
    命令ワードを解釈できなかったことを示す例外。
    `word` には失敗した16bitの命令ワードが格納されます。
    """
    def __init__(self, word: int, message: str = ""):
        self.word = word
        super().__init__(message or f"No matching instruction for {word:#06x}")


# @intent:responsibility どの既知のエンコーディングにも一致しない命令ワードを表します。
class UnknownInstruction(DecodeError):
    pass


# @intent:responsibility 認識はできるが実装していない拡張命令（Super-CHIP / CHIP-48）を表します。
class UnsupportedInstruction(DecodeError):
    def __init__(self, word: int):
        super().__init__(word, f"Super-CHIP instruction {word:#06x} is not implemented")


# @intent:responsibility 実行を継続できない致命的な状態を表す基底クラスです。
# @intent:rationale 不正なROMまたは実装の欠陥を示すため、ホスト側で停止・リセット等を判断させます。
class MachineFault(Chip8Error):
    pass


# @intent:responsibility メモリ・表示バッファ等の範囲外アクセスを表します。
class OutOfBoundsAccess(MachineFault, IndexError):
    pass


# @intent:responsibility コールスタックの深さ上限を超えた CALL を表します。
class CallStackOverflow(MachineFault):
    pass


# @intent:responsibility 戻りアドレスが存在しない状態での RET を表します。
class CallStackUnderflow(MachineFault):
    pass
