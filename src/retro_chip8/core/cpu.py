# retro_chip8/core/cpu.py
"""
Core Layer (命令サイクル)

フェッチ・デコード・実行・PC更新の順序と、デコード失敗時のスキップ方針を1か所で定めます。
命令ごとの振る舞いは arch/<name>/instructions に置かれます。
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from retro_chip8.common.errors import DecodeError, UnsupportedInstruction
from retro_chip8.common.types import DisassemblyLine, RegisterLayoutInfo, SymbolMap
from retro_chip8.core.snapshot import Metadata, Operation, Snapshot
from retro_chip8.core.state import CpuState
from retro_chip8.transport.memory import Memory

logger = logging.getLogger(__name__)

# @intent:responsibility 1ステップの実行手順を固定し、アーキテクチャ固有の処理をフックとして受け取ります。
class AbstractCpu(ABC):
    """
    CPUエミュレーションの基底クラス。
    状態・メモリ・ステップ数・シンボルマップを保持し、step() ごとに Snapshot を生成します。
    """
    # @intent:responsibility CPUの状態とメモリへの参照を初期化します。
    def __init__(self, memory: Memory):
        self._memory = memory
        self._state: CpuState = self._create_initial_state()
        self._step_count: int = 0
        self._symbol_map: SymbolMap = {}
        self._reverse_symbol_map: Dict[int, str] = {}

    @property
    def memory(self) -> Memory:
        return self._memory

    # @intent:responsibility ラベル名からアドレスへの対応を設定します。Snapshot の symbol_info に使われます。
    def set_symbol_map(self, symbol_map: SymbolMap) -> None:
        self._symbol_map = symbol_map
        self._reverse_symbol_map = {addr: name for name, addr in symbol_map.items()}

    def get_symbol_map(self) -> SymbolMap:
        return self._symbol_map

    @abstractmethod
    def _create_initial_state(self) -> CpuState:
        """
        リセット直後のレジスタ状態を返します。
        """
        pass

    # @intent:responsibility CPUをリセットし、初期状態に戻します。メモリの内容は保持されます。
    def reset(self) -> None:
        self._state = self._create_initial_state()
        self._step_count = 0

    def get_state(self) -> CpuState:
        return self._state

    # @intent:responsibility 保存しておいた状態のコピーでCPUの状態を置き換えます。
    def restore_state(self, state: CpuState) -> None:
        self._state = state.copy()

    @abstractmethod
    def _fetch(self) -> int:
        """
        現在のPCから命令ワードをフェッチして返します。PCは変更しません。
        """
        pass

    @abstractmethod
    def _decode(self, opcode: int) -> Any:
        """
        命令ワードを命令オブジェクトに変換します。失敗時は DecodeError を送出します。
        """
        pass

    @abstractmethod
    def _execute(self, instruction: Any) -> Any:
        """
        命令を実行し、PCの扱い（制御フロー効果）を返します。
        """
        pass

    @abstractmethod
    def _update_pc(self, effect: Any) -> bool:
        """
        制御フロー効果に従ってPCを更新します。PCを据え置いた（停止した）場合は True を返します。
        """
        pass

    @abstractmethod
    def _skip(self) -> None:
        """
        デコードできなかった命令を飛ばすためにPCを進めます。
        """
        pass

    @abstractmethod
    def _describe(self, opcode: int, instruction: Any) -> Operation:
        """
        スナップショット表示用の Operation を生成します。
        """
        pass

    # @intent:responsibility CPUを1命令サイクル進め、その結果のスナップショットを返します。
    # @intent:rationale Template Methodパターンを採用し、共通の実行フロー（ログクリア→フェッチ→デコード→実行→PC更新→Snapshot生成）を定義します。
    #                  PCの更新は実行が成功した後に行うため、致命的な例外が発生した場合はフォールトした命令を指したままになります。
    def step(self) -> Snapshot:
        """
        CPUを1命令サイクル進め、その時点でのCPU状態とメモリアクセスを含むSnapshotを返します。
        """
        self._memory.get_and_clear_activity_log()
        initial_pc = self._state.pc

        opcode = self._fetch()

        try:
            instruction = self._decode(opcode)
        except DecodeError as e:
            # デコード失敗は回復可能: 副作用なしで次の命令へ進む
            if isinstance(e, UnsupportedInstruction):
                logger.info("Skipping unsupported instruction %#06x at %#05x", opcode, initial_pc)
            else:
                logger.warning("Skipping unknown instruction %#06x at %#05x", opcode, initial_pc)
            self._skip()
            operation = Operation(opcode_hex=f"{opcode:04X}", mnemonic=".word", operands=[f"0x{opcode:04X}"])
            return self._create_snapshot(initial_pc, operation, decode_error=str(e))

        effect = self._execute(instruction)
        suspended = self._update_pc(effect)
        return self._create_snapshot(initial_pc, self._describe(opcode, instruction), suspended=suspended)

    # @intent:responsibility スナップショットを生成します。
    def _create_snapshot(self, initial_pc: int, operation: Operation,
                         suspended: bool = False, decode_error: Optional[str] = None) -> Snapshot:
        memory_activity = self._memory.get_and_clear_activity_log()
        self._step_count += 1

        symbol_label = self._reverse_symbol_map.get(initial_pc, "")
        symbol_info = f"{symbol_label}: " if symbol_label else ""
        symbol_info += operation.text

        # 後続のステップで書き換えられないよう、状態はコピーして保持する
        return Snapshot(
            state=self._state.copy(),
            operation=operation,
            metadata=Metadata(
                step_count=self._step_count,
                symbol_info=symbol_info,
                suspended=suspended,
                decode_error=decode_error,
            ),
            memory_activity=memory_activity,
        )

    @abstractmethod
    def get_register_map(self) -> Dict[str, int]:
        """
        表示名からレジスタ値への辞書を返します。
        """
        pass

    @abstractmethod
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        """
        レジスタをどのように配置・グループ化すべきかの定義を返す。
        """
        pass

    @abstractmethod
    def disassemble(self, start_addr: int, length: int) -> List[DisassemblyLine]:
        """
        指定されたメモリ範囲を逆アセンブルする。
        """
        pass
