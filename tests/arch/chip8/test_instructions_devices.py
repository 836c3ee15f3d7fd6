import unittest
from retro_chip8.common.errors import OutOfBoundsAccess
from retro_chip8.transport.memory import Memory
from retro_chip8.arch.chip8.cpu import Chip8Cpu

class TestChip8DeviceInstructions(unittest.TestCase):
    def setUp(self):
        self.memory = Memory()
        self.cpu = Chip8Cpu(self.memory)
        self.state = self.cpu.get_state()
        self.display = self.cpu.display
        self.keypad = self.cpu.keypad

    def _execute(self, word, current_pc=0x200):
        self.memory.load_data(current_pc, bytes([word >> 8, word & 0xFF]))
        self.state.pc = current_pc
        return self.cpu.step()

    def test_cls(self):
        self.display.draw(0, 0, [0xFF])
        self._execute(0x00E0)
        self.assertTrue(self.display.is_blank())
        self.assertEqual(self.state.pc, 0x202)

    def test_drw_uses_vx_as_column_and_vy_as_row(self):
        self.memory.load_data(0x300, bytes([0xF0]))
        self.state.i = 0x300
        self.state.v[1] = 8   # x
        self.state.v[2] = 3   # y
        self._execute(0xD121)
        self.assertEqual(self.display.read(3, 8, 1), bytes([0xF0]))
        self.assertEqual(self.state.vf, 0)

    def test_drw_collision(self):
        self.memory.load_data(0x300, bytes([0xFF]))
        self.state.i = 0x300
        self._execute(0xD011)
        self._execute(0xD011)
        self.assertEqual(self.state.vf, 1)
        self.assertTrue(self.display.is_blank())

    def test_drw_font_glyph(self):
        self.state.v[0] = 0x0
        self._execute(0xF029)
        self._execute(0xD005)
        self.assertEqual(self.display.read(0, 0, 1), bytes([0xF0]))
        self.assertEqual(self.display.read(1, 0, 1), bytes([0x90]))

    def test_drw_sprite_out_of_bounds_leaves_display(self):
        self.state.i = 0xFFE
        with self.assertRaises(OutOfBoundsAccess):
            self._execute(0xD004)
        self.assertTrue(self.display.is_blank())

    def test_skp(self):
        self.state.v[3] = 0xA
        self.keypad.press(0xA)
        self._execute(0xE39E)
        self.assertEqual(self.state.pc, 0x204)
        self.keypad.release()
        self._execute(0xE39E)
        self.assertEqual(self.state.pc, 0x202)

    def test_sknp(self):
        self.state.v[3] = 0xA
        self._execute(0xE3A1)
        self.assertEqual(self.state.pc, 0x204)
        self.keypad.press(0xA)
        self._execute(0xE3A1)
        self.assertEqual(self.state.pc, 0x202)

    def test_skp_with_invalid_key_value(self):
        self.state.v[3] = 0x1F
        self.keypad.press(0xF)
        self._execute(0xE39E)
        self.assertEqual(self.state.pc, 0x202)

    def test_wait_key_suspends_until_pressed(self):
        snapshot = self._execute(0xF40A)
        self.assertTrue(snapshot.metadata.suspended)
        self.assertEqual(self.state.pc, 0x200)

        snapshot = self.cpu.step()
        self.assertTrue(snapshot.metadata.suspended)
        self.assertEqual(self.state.pc, 0x200)

        self.keypad.press(0x7)
        snapshot = self.cpu.step()
        self.assertFalse(snapshot.metadata.suspended)
        self.assertEqual(self.state.v[4], 0x7)
        self.assertEqual(self.state.pc, 0x202)

if __name__ == '__main__':
    unittest.main()
