import random
import unittest

from chip8_core.arch.chip8.cpu import Chip8Cpu
from chip8_core.runtime.shared import SharedRuntimeState

class TestChip8AluInstructions(unittest.TestCase):
    def setUp(self):
        self.cpu = Chip8Cpu(SharedRuntimeState(), cycle_hz=0, rng=random.Random(1234))
        self.store = self.cpu.store

    def _execute(self, opcode):
        self.store.write_block(0x200, [opcode >> 8, opcode & 0xFF])
        self.store.set_pc(0x200)
        self.cpu.step()
        self.assertFalse(self.cpu.is_halted, self.cpu.diagnostic)

    def _set(self, **registers):
        for name, value in registers.items():
            self.store.set_register(int(name[1:], 16), value)

    def _v(self, index):
        return self.store.get_register(index)

    def test_add_immediate_wraps_without_flag(self):
        self._set(v3=0xFF, vF=0x07)
        # ADD V3, #02
        self._execute(0x7302)
        self.assertEqual(self._v(0x3), 0x01)
        self.assertEqual(self._v(0xF), 0x07) # Flag unchanged

    def test_bitwise(self):
        self._set(v1=0b1100, v2=0b1010)
        self._execute(0x8121) # OR
        self.assertEqual(self._v(1), 0b1110)
        self._set(v1=0b1100)
        self._execute(0x8122) # AND
        self.assertEqual(self._v(1), 0b1000)
        self._set(v1=0b1100)
        self._execute(0x8123) # XOR
        self.assertEqual(self._v(1), 0b0110)

    # 宛先がVF以外の組み合わせ（オペランド側がVFの場合を含む）
    CARRY_PAIRS = [(0x0, 0x1), (0xA, 0xB), (0x5, 0xE), (0x3, 0x3), (0x2, 0xF), (0xE, 0xF)]

    def test_add_with_carry_overflow(self):
        # 0xFF + 0x01 -> 0x00, carry
        for x, y in self.CARRY_PAIRS:
            if x == y:
                continue
            with self.subTest(x=x, y=y):
                self.store.set_register(x, 0xFF)
                self.store.set_register(y, 0x01)
                self._execute(0x8004 | (x << 8) | (y << 4))
                self.assertEqual(self._v(x), 0x00)
                self.assertEqual(self._v(0xF), 1)

    def test_add_with_carry_no_overflow(self):
        # 0x01 + 0x01 -> 0x02, no carry
        for x, y in self.CARRY_PAIRS:
            with self.subTest(x=x, y=y):
                self.store.set_register(x, 0x01)
                self.store.set_register(y, 0x01)
                if y != 0xF:
                    self.store.set_register(0xF, 1)
                self._execute(0x8004 | (x << 8) | (y << 4))
                self.assertEqual(self._v(x), 0x02)
                self.assertEqual(self._v(0xF), 0)

    def test_subtract_flags_for_register_pairs(self):
        for x, y in self.CARRY_PAIRS:
            if x == y:
                continue
            with self.subTest(x=x, y=y):
                self.store.set_register(x, 0x05)
                self.store.set_register(y, 0x0A)
                self._execute(0x8005 | (x << 8) | (y << 4))
                self.assertEqual(self._v(x), 0xFB)
                self.assertEqual(self._v(0xF), 0)

    def test_add_with_carry_into_flag_register(self):
        # 宛先がVFの場合はフラグより結果が優先される
        self._set(vF=0xFF, v1=0x01)
        self._execute(0x8F14)
        self.assertEqual(self._v(0xF), 0x00)
        self._set(vF=0x01, v1=0x01)
        self._execute(0x8F14)
        self.assertEqual(self._v(0xF), 0x02)

    def test_add_with_carry_same_register(self):
        self._set(v2=0x80)
        self._execute(0x8224)
        self.assertEqual(self._v(2), 0x00)
        self.assertEqual(self._v(0xF), 1)

    def test_subtract_with_borrow(self):
        self._set(v0=0x05, v1=0x0A)
        self._execute(0x8015)
        self.assertEqual(self._v(0), 0xFB)
        self.assertEqual(self._v(0xF), 0) # Borrow

    def test_subtract_without_borrow(self):
        self._set(v0=0x0A, v1=0x05)
        self._execute(0x8015)
        self.assertEqual(self._v(0), 0x05)
        self.assertEqual(self._v(0xF), 1)

    def test_subtract_equal_values(self):
        self._set(v0=0x33, v1=0x33)
        self._execute(0x8015)
        self.assertEqual(self._v(0), 0x00)
        self.assertEqual(self._v(0xF), 1)

    def test_subtract_reversed(self):
        # Vx = Vy - Vx
        self._set(v0=0x05, v1=0x0A)
        self._execute(0x8017)
        self.assertEqual(self._v(0), 0x05)
        self.assertEqual(self._v(0xF), 1)

        self._set(v0=0x0A, v1=0x05)
        self._execute(0x8017)
        self.assertEqual(self._v(0), 0xFB)
        self.assertEqual(self._v(0xF), 0)

    def test_shift_right(self):
        self._set(v4=0x03)
        self._execute(0x8406)
        self.assertEqual(self._v(4), 0x01)
        self.assertEqual(self._v(0xF), 1) # LSB of 0x03

        self._set(v4=0x02)
        self._execute(0x8406)
        self.assertEqual(self._v(4), 0x01)
        self.assertEqual(self._v(0xF), 0)

    def test_shift_left(self):
        self._set(v4=0x81)
        self._execute(0x840E)
        self.assertEqual(self._v(4), 0x02)
        self.assertEqual(self._v(0xF), 1) # MSB of 0x81

        self._set(v4=0x41)
        self._execute(0x840E)
        self.assertEqual(self._v(4), 0x82)
        self.assertEqual(self._v(0xF), 0)

    # 宛先がVFの場合は結果が残る
    def test_flag_register_as_destination(self):
        self._set(vF=0x0A, v1=0x05)
        self._execute(0x8F15)
        self.assertEqual(self._v(0xF), 0x05)

    def test_random_is_masked(self):
        for _ in range(32):
            self._execute(0xC50F)
            self.assertEqual(self._v(5) & 0xF0, 0)
        self._execute(0xC500)
        self.assertEqual(self._v(5), 0)

    def test_random_is_reproducible_with_seed(self):
        values = []
        for _ in range(2):
            cpu = Chip8Cpu(SharedRuntimeState(), cycle_hz=0, rng=random.Random(7))
            cpu.load_program(bytes([0xC0, 0xFF]))
            cpu.step()
            values.append(cpu.store.get_register(0))
        self.assertEqual(values[0], values[1])

if __name__ == '__main__':
    unittest.main()
