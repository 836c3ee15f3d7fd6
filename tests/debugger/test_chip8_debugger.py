# tests/debugger/test_chip8_debugger.py
"""
retro_chip8.debugger.debuggerモジュールの単体テスト。
Debuggerの実行制御、ブレークポイント管理、および条件チェック機能を検証します。
"""
import pytest
from unittest.mock import patch

from retro_chip8.common.errors import CallStackUnderflow
from retro_chip8.transport.memory import Memory
from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.arch.chip8.state import Chip8CpuState
from retro_chip8.core.snapshot import Snapshot, Operation, Metadata
from retro_chip8.debugger.debugger import (
    Debugger, BreakpointCondition, BreakpointConditionType, StopReason,
)

# @intent:test_suite デバッガのブレークポイントと実行制御機能の検証。

class TestDebugger:
    """
    Debuggerの単体テスト。
    """
    @pytest.fixture
    def setup_debugger(self):
        memory = Memory()
        cpu = Chip8Cpu(memory)
        debugger = Debugger(cpu)
        return debugger, cpu, memory

    def _load(self, memory, words, address=0x200):
        data = []
        for word in words:
            data += [word >> 8, word & 0xFF]
        memory.load_data(address, data)

    # @intent:test_case_add_remove_breakpoint ブレークポイントの追加と削除が正しく行われることを検証します。
    def test_add_remove_breakpoint(self, setup_debugger):
        debugger, _, _ = setup_debugger
        bp1 = BreakpointCondition(BreakpointConditionType.PC_MATCH, value=0x208)
        bp2 = BreakpointCondition(BreakpointConditionType.MEMORY_WRITE, address=0x300)

        debugger.add_breakpoint(bp1)
        debugger.add_breakpoint(bp2)
        debugger.add_breakpoint(bp1) # 重複追加は無視される
        assert debugger.get_breakpoints() == [bp1, bp2]

        debugger.remove_breakpoint(bp1)
        debugger.remove_breakpoint(bp1) # 存在しないブレークポイントの削除はエラーにならない
        assert debugger.get_breakpoints() == [bp2]

    def test_update_breakpoint(self, setup_debugger):
        debugger, _, _ = setup_debugger
        bp = BreakpointCondition(BreakpointConditionType.PC_MATCH, value=0x208)
        disabled = BreakpointCondition(BreakpointConditionType.PC_MATCH, value=0x208, enabled=False)
        debugger.add_breakpoint(bp)
        debugger.update_breakpoint(bp, disabled)
        assert debugger.get_breakpoints() == [disabled]

    # @intent:test_case_step_instruction step_instructionがcpu.stepを呼び出し、Snapshotを返すことを検証します。
    def test_step_instruction(self, setup_debugger):
        debugger, cpu, _ = setup_debugger
        expected = Snapshot(
            state=Chip8CpuState(pc=0x202),
            operation=Operation(opcode_hex="6000", mnemonic="ld", operands=["v0", "0x00"]),
            metadata=Metadata(step_count=1),
        )
        with patch.object(cpu, 'step', return_value=expected) as mock_step:
            snapshot = debugger.step_instruction()
            mock_step.assert_called_once()
        assert snapshot is expected
        assert debugger.get_last_snapshot() is expected
        assert debugger.get_history() == [expected]

    # @intent:test_case_run_pc_breakpoint PCブレークポイントで実行が停止することを検証します。
    def test_run_stops_at_pc_breakpoint(self, setup_debugger):
        debugger, cpu, memory = setup_debugger
        self._load(memory, [0x6001, 0x6102, 0x6203, 0x6304, 0x1208])
        debugger.add_breakpoint(BreakpointCondition(BreakpointConditionType.PC_MATCH, value=0x204))
        assert debugger.run() is StopReason.BREAKPOINT
        assert cpu.get_state().pc == 0x204
        assert cpu.get_state().v[2] == 0  # ブレークポイントの命令は未実行
        assert not debugger.is_running

    def test_run_leaves_breakpoint_at_current_pc(self, setup_debugger):
        debugger, cpu, memory = setup_debugger
        self._load(memory, [0x1200])  # 自分自身へのジャンプ
        debugger.add_breakpoint(BreakpointCondition(BreakpointConditionType.PC_MATCH, value=0x200))
        assert debugger.run() is StopReason.BREAKPOINT
        assert len(debugger.get_history()) == 1

    def test_disabled_breakpoint_is_ignored(self, setup_debugger):
        debugger, _, memory = setup_debugger
        self._load(memory, [0x6001, 0x1202])
        debugger.add_breakpoint(BreakpointCondition(BreakpointConditionType.PC_MATCH, value=0x202, enabled=False))
        assert debugger.run(max_steps=10) is StopReason.STEP_LIMIT

    def test_run_step_limit(self, setup_debugger):
        debugger, _, memory = setup_debugger
        self._load(memory, [0x1200])
        assert debugger.run(max_steps=5) is StopReason.STEP_LIMIT
        assert len(debugger.get_history()) == 5

    def test_memory_write_breakpoint(self, setup_debugger):
        debugger, cpu, memory = setup_debugger
        # ld I, 0x300 / ld v0, 7 / ld B, v0 / jp 0x206
        self._load(memory, [0xA300, 0x6007, 0xF033, 0x1206])
        debugger.add_breakpoint(BreakpointCondition(BreakpointConditionType.MEMORY_WRITE, address=0x302))
        assert debugger.run(max_steps=100) is StopReason.BREAKPOINT
        assert debugger.get_last_snapshot().operation.opcode_hex == "F033"
        assert memory.peek(0x302) == b"\x07"

    def test_memory_read_breakpoint(self, setup_debugger):
        debugger, _, memory = setup_debugger
        self._load(memory, [0x6000, 0x1200])
        debugger.add_breakpoint(BreakpointCondition(BreakpointConditionType.MEMORY_READ, address=0x203))
        assert debugger.run(max_steps=100) is StopReason.BREAKPOINT
        assert debugger.get_last_snapshot().operation.opcode_hex == "1200"

    def test_register_value_breakpoint(self, setup_debugger):
        debugger, cpu, memory = setup_debugger
        # add v0, 1 / jp 0x200
        self._load(memory, [0x7001, 0x1200])
        debugger.add_breakpoint(BreakpointCondition(
            BreakpointConditionType.REGISTER_VALUE, register_name="v0", value=3))
        assert debugger.run(max_steps=100) is StopReason.BREAKPOINT
        assert cpu.get_state().v[0] == 3

    def test_register_change_breakpoint(self, setup_debugger):
        debugger, cpu, memory = setup_debugger
        self._load(memory, [0x6000, 0x6000, 0x6005, 0x1206])
        debugger.add_breakpoint(BreakpointCondition(
            BreakpointConditionType.REGISTER_CHANGE, register_name="v0"))
        assert debugger.run(max_steps=100) is StopReason.BREAKPOINT
        assert cpu.get_state().pc == 0x206

    def test_run_stops_when_waiting_for_key(self, setup_debugger):
        debugger, cpu, memory = setup_debugger
        self._load(memory, [0xF00A])
        assert debugger.run(max_steps=100) is StopReason.SUSPENDED
        assert cpu.get_state().pc == 0x200

        cpu.keypad.press(0x5)
        debugger.step_instruction()
        assert cpu.get_state().v[0] == 0x5

    def test_run_clears_running_flag_on_fault(self, setup_debugger):
        debugger, cpu, memory = setup_debugger
        self._load(memory, [0x00EE])  # 空のスタックで ret
        with pytest.raises(CallStackUnderflow):
            debugger.run(max_steps=10)
        assert not debugger.is_running

    def test_history_limit(self):
        memory = Memory()
        memory.load_data(0x200, [0x12, 0x00])
        debugger = Debugger(Chip8Cpu(memory), history_limit=3)
        debugger.run(max_steps=10)
        history = debugger.get_history()
        assert len(history) == 3
        assert history[-1].metadata.step_count == 10
