# retro_chip8/debugger/debugger.py
"""
CHIP-8 デバッガ。

Chip8Cpu をステップ実行し、PC・メモリアクセス・レジスタに関する条件で実行を止めます。
キー入力待ち（Fx0A）で CPU が停止した場合も、ホストに制御を返すため実行を中断します。
"""
import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Deque, Dict, List, Optional

from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.arch.chip8.state import Chip8CpuState
from retro_chip8.core.snapshot import MemoryAccessType, Snapshot

logger = logging.getLogger(__name__)

# @intent:constant 既定で保持する実行履歴の件数。
DEFAULT_HISTORY_LIMIT = 1024

# @intent:responsibility ブレークポイントが監視する対象の種類。
class BreakpointConditionType(Enum):
    PC_MATCH = "PC_MATCH"               # 次に実行する命令のアドレス
    MEMORY_READ = "MEMORY_READ"         # 命令が読んだアドレス（フェッチを含む）
    MEMORY_WRITE = "MEMORY_WRITE"       # 命令が書いたアドレス
    REGISTER_VALUE = "REGISTER_VALUE"   # レジスタが指定値に等しい
    REGISTER_CHANGE = "REGISTER_CHANGE" # レジスタが直前のステップから変化した

# @intent:responsibility 1つのブレークポイント条件。等価性で同一性を判定するため不変です。
@dataclass(frozen=True)
class BreakpointCondition:
    condition_type: BreakpointConditionType
    value: Optional[int] = None           # PC_MATCH のアドレス、REGISTER_VALUE の比較値
    address: Optional[int] = None         # MEMORY_READ / MEMORY_WRITE の監視アドレス
    register_name: Optional[str] = None   # "v0".."vf", "i", "pc", "delay_timer", "sound_timer"
    enabled: bool = True

# @intent:responsibility run() が戻った理由。
class StopReason(Enum):
    BREAKPOINT = "BREAKPOINT"
    SUSPENDED = "SUSPENDED"   # キー入力待ち
    STEP_LIMIT = "STEP_LIMIT"
    STOPPED = "STOPPED"


class Debugger:
    """
    Chip8Cpu の実行制御。

    ステップごとの Snapshot を有限長の履歴に残し、最後のステップの結果を
    ブレークポイント条件と照合します。PC_MATCH だけは命令の実行前に評価されます。
    """
    def __init__(self, cpu: Chip8Cpu, history_limit: int = DEFAULT_HISTORY_LIMIT):
        self._cpu = cpu
        self._conditions: List[BreakpointCondition] = []
        self._running = False
        self._state_before_step: Chip8CpuState = cpu.get_state().copy()
        self._last_snapshot: Optional[Snapshot] = None
        self._history: Deque[Snapshot] = deque(maxlen=history_limit)
        self._matchers: Dict[BreakpointConditionType, Callable[[BreakpointCondition, Snapshot], bool]] = {
            BreakpointConditionType.MEMORY_READ: self._matches_read,
            BreakpointConditionType.MEMORY_WRITE: self._matches_write,
            BreakpointConditionType.REGISTER_VALUE: self._matches_register_value,
            BreakpointConditionType.REGISTER_CHANGE: self._matches_register_change,
        }

    # --- Breakpoint management ---
    # 同じ条件は1つだけ登録され、未登録の条件の更新・削除は無視されます。
    def add_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition in self._conditions:
            return
        self._conditions.append(condition)

    def update_breakpoint(self, old_condition: BreakpointCondition, new_condition: BreakpointCondition) -> None:
        self._conditions = [new_condition if c == old_condition else c for c in self._conditions]

    def remove_breakpoint(self, condition: BreakpointCondition) -> None:
        self._conditions = [c for c in self._conditions if c != condition]

    def get_breakpoints(self) -> List[BreakpointCondition]:
        return self._conditions.copy()

    # --- Inspection ---
    def get_history(self) -> List[Snapshot]:
        """古いものから順に、保持しているSnapshotを返します。"""
        return [snapshot for snapshot in self._history]

    def get_last_snapshot(self) -> Optional[Snapshot]:
        return self._last_snapshot

    @property
    def is_running(self) -> bool:
        return self._running

    # --- Condition matching ---
    def _active(self, condition_type: BreakpointConditionType) -> List[BreakpointCondition]:
        return [c for c in self._conditions if c.enabled and c.condition_type is condition_type]

    def _at_pc_breakpoint(self, pc: int) -> bool:
        return any(c.value == pc for c in self._active(BreakpointConditionType.PC_MATCH))

    @staticmethod
    def _touched(snapshot: Snapshot, address: Optional[int], access_type: MemoryAccessType) -> bool:
        return any(
            access.address == address and access.access_type is access_type
            for access in snapshot.memory_activity
        )

    def _matches_read(self, condition: BreakpointCondition, snapshot: Snapshot) -> bool:
        return self._touched(snapshot, condition.address, MemoryAccessType.READ)

    def _matches_write(self, condition: BreakpointCondition, snapshot: Snapshot) -> bool:
        return self._touched(snapshot, condition.address, MemoryAccessType.WRITE)

    def _matches_register_value(self, condition: BreakpointCondition, snapshot: Snapshot) -> bool:
        if not condition.register_name:
            return False
        return snapshot.state.get_register(condition.register_name) == condition.value

    def _matches_register_change(self, condition: BreakpointCondition, snapshot: Snapshot) -> bool:
        if not condition.register_name:
            return False
        name = condition.register_name
        return snapshot.state.get_register(name) != self._state_before_step.get_register(name)

    # @intent:responsibility 直前のステップの結果が、PC_MATCH 以外のいずれかの有効な条件に一致するかを返します。
    def _step_hit_breakpoint(self, snapshot: Snapshot) -> bool:
        for condition in self._conditions:
            matcher = self._matchers.get(condition.condition_type)
            if condition.enabled and matcher is not None and matcher(condition, snapshot):
                return True
        return False

    # --- Execution control ---
    def step_instruction(self) -> Snapshot:
        """1命令を実行し、その Snapshot を履歴に追加して返します。"""
        self._state_before_step = self._cpu.get_state().copy()
        self._last_snapshot = self._cpu.step()
        self._history.append(self._last_snapshot)
        return self._last_snapshot

    # @intent:responsibility 停止条件のいずれかが成立するまで命令を実行し、停止理由を返します。
    # @intent:rationale 開始位置の PC_MATCH は評価しないため、ブレークポイントで止まった後に run() を再度呼ぶと先へ進みます。
    def run(self, max_steps: Optional[int] = None) -> StopReason:
        self._running = True
        executed = 0
        reason = StopReason.STOPPED

        try:
            while self._running:
                if max_steps is not None and executed >= max_steps:
                    reason = StopReason.STEP_LIMIT
                    break

                pc = self._cpu.get_state().pc
                if executed and self._at_pc_breakpoint(pc):
                    logger.info("Breakpoint hit at PC: %#05x", pc)
                    reason = StopReason.BREAKPOINT
                    break

                snapshot = self.step_instruction()
                executed += 1

                if snapshot.metadata.suspended:
                    logger.info("Waiting for key at PC: %#05x", snapshot.state.pc)
                    reason = StopReason.SUSPENDED
                    break
                if self._step_hit_breakpoint(snapshot):
                    logger.info("Breakpoint hit after %s at PC: %#05x", snapshot.operation.text, snapshot.state.pc)
                    reason = StopReason.BREAKPOINT
                    break
        finally:
            # マシンフォールトで抜けた場合も実行中フラグを下ろす
            self._running = False
        return reason

    def stop(self) -> None:
        self._running = False
