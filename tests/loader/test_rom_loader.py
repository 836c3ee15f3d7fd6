import unittest
import tempfile
import os
from retro_chip8.common.errors import OutOfBoundsAccess
from retro_chip8.transport.memory import Memory
from retro_chip8.loader.loader import RomLoader

class TestRomLoader(unittest.TestCase):
    def setUp(self):
        self.memory = Memory()
        self.loader = RomLoader()

    def test_load_rom_file(self):
        with tempfile.NamedTemporaryFile(suffix=".ch8", delete=False) as f:
            f.write(bytes([0x00, 0xE0, 0x12, 0x00]))
            path = f.name
        try:
            size = self.loader.load_rom(path, self.memory)
        finally:
            os.remove(path)
        self.assertEqual(size, 4)
        self.assertEqual(self.memory.peek(0x200, 4), bytes([0x00, 0xE0, 0x12, 0x00]))
        self.assertEqual(self.memory.get_and_clear_activity_log(), [])

    def test_load_rom_bytes_at_address(self):
        self.loader.load_rom_bytes(b"\xAB\xCD", self.memory, address=0x600)
        self.assertEqual(self.memory.peek(0x600, 2), b"\xAB\xCD")

    def test_largest_rom_fits(self):
        data = bytes([0x11]) * (0x1000 - 0x200)
        self.assertEqual(self.loader.load_rom_bytes(data, self.memory), len(data))
        self.assertEqual(self.memory.peek(0xFFF), b"\x11")

    def test_rom_too_large(self):
        data = bytes(0x1000 - 0x200 + 1)
        with self.assertRaises(OutOfBoundsAccess):
            self.loader.load_rom_bytes(data, self.memory)

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            self.loader.load_rom("/nonexistent/rom.ch8", self.memory)

if __name__ == '__main__':
    unittest.main()
