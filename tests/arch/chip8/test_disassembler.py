import unittest
from retro_chip8.transport.memory import Memory
from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.arch.chip8.disassembler import disassemble

class TestChip8Disassembler(unittest.TestCase):
    def setUp(self):
        self.memory = Memory()
        self.memory.load_data(0x200, bytes([0x00, 0xE0, 0xA2, 0x0A, 0xD0, 0x15, 0xFF, 0xFF, 0x00, 0xFF]))

    def test_disassemble_range(self):
        lines = disassemble(self.memory, 0x200, 10)
        self.assertEqual([line.address for line in lines], [0x200, 0x202, 0x204, 0x206, 0x208])
        self.assertEqual(lines[0].hex_bytes, "00E0")
        self.assertEqual(lines[0].text, "cls")
        self.assertEqual(lines[1].text, "ld I, 0x20A")
        self.assertEqual(lines[2].text, "drw v0, v1, 5")

    def test_undecodable_words(self):
        lines = disassemble(self.memory, 0x206, 4)
        self.assertEqual(lines[0].text, ".word 0xFFFF")
        self.assertEqual(lines[1].text, ".word 0x00FF")

    def test_does_not_touch_activity_log(self):
        disassemble(self.memory, 0x200, 10)
        self.assertEqual(self.memory.get_and_clear_activity_log(), [])

    def test_stops_at_end_of_memory(self):
        lines = disassemble(self.memory, 0xFFC, 0x100)
        self.assertEqual([line.address for line in lines], [0xFFC, 0xFFE])

    def test_odd_length_drops_trailing_byte(self):
        self.assertEqual(len(disassemble(self.memory, 0x200, 3)), 1)

    def test_cpu_delegates(self):
        cpu = Chip8Cpu(self.memory)
        self.assertEqual(cpu.disassemble(0x200, 4), disassemble(self.memory, 0x200, 4))

if __name__ == '__main__':
    unittest.main()
