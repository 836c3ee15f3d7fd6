import unittest
from retro_chip8.common.errors import OutOfBoundsAccess
from retro_chip8.config.models import Quirks
from retro_chip8.transport.memory import Memory
from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.arch.chip8.state import FONT_ADDRESS, FONT_SPRITES

class TestChip8LoadInstructions(unittest.TestCase):
    def setUp(self):
        self._build(Quirks())

    def _build(self, quirks):
        self.memory = Memory()
        self.cpu = Chip8Cpu(self.memory, quirks=quirks)
        self.state = self.cpu.get_state()

    def _execute(self, word, current_pc=0x200):
        self.memory.load_data(current_pc, bytes([word >> 8, word & 0xFF]))
        self.state.pc = current_pc
        return self.cpu.step()

    def test_ld_imm_and_reg(self):
        self._execute(0x6A42)
        self.assertEqual(self.state.v[0xA], 0x42)
        self._execute(0x8BA0)
        self.assertEqual(self.state.v[0xB], 0x42)

    def test_ld_addr(self):
        self._execute(0xA2F0)
        self.assertEqual(self.state.i, 0x2F0)

    def test_add_addr_keeps_flag(self):
        self.state.i = 0xFFF
        self.state.v[1] = 0x02
        self.state.vf = 0
        self._execute(0xF11E)
        self.assertEqual(self.state.i, 0x1001)
        self.assertEqual(self.state.vf, 0)

    def test_ld_digit(self):
        self.state.v[2] = 0xA
        self._execute(0xF229)
        self.assertEqual(self.state.i, FONT_ADDRESS + 0xA * 5)
        self.assertEqual(self.memory.peek(self.state.i, 5), FONT_SPRITES[50:55])

    def test_timers(self):
        self.state.v[4] = 60
        self._execute(0xF415)
        self._execute(0xF418)
        self.assertEqual(self.state.delay_timer, 60)
        self.assertEqual(self.state.sound_timer, 60)
        self.assertTrue(self.state.sound_active)
        self.state.delay_timer = 17
        self._execute(0xF507)
        self.assertEqual(self.state.v[5], 17)

    def test_bcd(self):
        self.state.i = 0x300
        self.state.v[3] = 254
        self._execute(0xF333)
        self.assertEqual(self.memory.peek(0x300, 3), bytes([2, 5, 4]))

    def test_bcd_small_value(self):
        self.state.i = 0x300
        self.state.v[3] = 7
        self._execute(0xF333)
        self.assertEqual(self.memory.peek(0x300, 3), bytes([0, 0, 7]))

    def test_bcd_out_of_bounds_is_atomic(self):
        self.state.i = 0xFFE
        self.state.v[3] = 123
        with self.assertRaises(OutOfBoundsAccess):
            self._execute(0xF333)
        self.assertEqual(self.memory.peek(0xFFE, 2), bytes([0, 0]))
        self.assertEqual(self.state.pc, 0x200)

    def test_store_mem_without_increment(self):
        self.state.i = 0x300
        self.state.v[0:3] = [1, 2, 3]
        self.state.v[3] = 4
        self._execute(0xF255)
        self.assertEqual(self.memory.peek(0x300, 4), bytes([1, 2, 3, 0]))
        self.assertEqual(self.state.i, 0x300)

    def test_store_mem_with_increment(self):
        self._build(Quirks(increment_index=True))
        self.state.i = 0x300
        self.state.v[0:3] = [1, 2, 3]
        self._execute(0xF255)
        self.assertEqual(self.state.i, 0x303)

    def test_load_mem(self):
        self.memory.load_data(0x300, bytes([9, 8, 7, 6]))
        self.state.i = 0x300
        self._execute(0xF265)
        self.assertEqual(self.state.v[0:4], [9, 8, 7, 0])
        self.assertEqual(self.state.i, 0x300)

    def test_load_mem_with_increment(self):
        self._build(Quirks(increment_index=True))
        self.memory.load_data(0x300, bytes([9, 8, 7, 6]))
        self.state.i = 0x300
        self._execute(0xF365)
        self.assertEqual(self.state.v[0:4], [9, 8, 7, 6])
        self.assertEqual(self.state.i, 0x304)

    def test_store_mem_out_of_bounds_is_atomic(self):
        self.state.i = 0xFFD
        self.state.v[0:4] = [1, 2, 3, 4]
        with self.assertRaises(OutOfBoundsAccess):
            self._execute(0xF355)
        self.assertEqual(self.memory.peek(0xFFD, 3), bytes([0, 0, 0]))

    def test_load_mem_out_of_bounds_is_atomic(self):
        self.state.i = 0xFFF
        with self.assertRaises(OutOfBoundsAccess):
            self._execute(0xF165)
        self.assertEqual(self.state.v[0:2], [0, 0])

if __name__ == '__main__':
    unittest.main()
