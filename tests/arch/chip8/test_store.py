# tests/arch/chip8/test_store.py
"""
chip8_core.arch.chip8.store.RegisterStore の単体テスト。
"""
import pytest

from chip8_core.common.errors import OutOfBounds, StackOverflow, StackUnderflow
from chip8_core.arch.chip8.store import RegisterStore
from chip8_core.arch.chip8.state import FONT_START, FONT_SPRITES, PROGRAM_START, STACK_DEPTH

# @intent:test_suite レジスタ、PC、スタック、RAMへの範囲検査付きアクセスを検証します。

class TestRegisterStore:
    @pytest.fixture
    def store(self):
        return RegisterStore()

    def test_initial_state(self, store):
        assert store.pc == PROGRAM_START
        assert store.index == 0
        assert store.stack_depth == 0
        assert all(store.get_register(r) == 0 for r in range(16))

    def test_font_installed(self, store):
        assert bytes(store.read_block(FONT_START, len(FONT_SPRITES))) == FONT_SPRITES

    def test_register_bounds(self, store):
        store.set_register(0xF, 0xFF)
        assert store.get_register(0xF) == 0xFF
        with pytest.raises(OutOfBounds):
            store.get_register(0x10)
        with pytest.raises(OutOfBounds):
            store.set_register(-1, 0)
        with pytest.raises(ValueError):
            store.set_register(0, 0x100)

    def test_index_register_wraps_16bit(self, store):
        store.index = 0x1_0005
        assert store.index == 0x0005

    def test_pc_advance_skip_and_rewind(self, store):
        store.advance_pc()
        assert store.pc == 0x202
        store.skip_pc()
        assert store.pc == 0x206
        store.rewind_pc()
        assert store.pc == 0x204

    # @intent:test_case_pc PCは偶数かつ [0x200, 0xFFF) の範囲に限られます。
    def test_set_pc_validation(self, store):
        store.set_pc(0xFFE)
        assert store.pc == 0xFFE
        with pytest.raises(OutOfBounds):
            store.set_pc(0x1FE)
        with pytest.raises(OutOfBounds):
            store.set_pc(0x1000)
        with pytest.raises(OutOfBounds):
            store.set_pc(0x201)
        assert store.pc == 0xFFE

    def test_stack_lifo_and_bounds(self, store):
        with pytest.raises(StackUnderflow):
            store.pop_return()
        for depth in range(STACK_DEPTH):
            store.push_return(0x200 + depth * 2)
        assert store.stack_depth == STACK_DEPTH
        assert store.state.sp == STACK_DEPTH
        with pytest.raises(StackOverflow):
            store.push_return(0x300)
        assert store.stack_depth == STACK_DEPTH
        for depth in reversed(range(STACK_DEPTH)):
            assert store.pop_return() == 0x200 + depth * 2
        assert store.state.sp == 0

    def test_byte_access(self, store):
        store.write_byte(0x300, 0x7F)
        assert store.read_byte(0x300) == 0x7F
        with pytest.raises(OutOfBounds):
            store.read_byte(0x1000)
        with pytest.raises(OutOfBounds):
            store.write_byte(0x1000, 0)

    # @intent:test_case_block 範囲の一部でも外れていれば、何も書き込まずに拒否されます。
    def test_write_block_is_all_or_nothing(self, store):
        with pytest.raises(OutOfBounds):
            store.write_block(0xFFE, [1, 2, 3])
        assert store.read_byte(0xFFD) == 0
        assert store.read_byte(0xFFE) == 0

    # @intent:test_case_ram RAMのアドレス空間は [0x000, 0xFFF) で、0xFFE が最後のセルです。
    def test_ram_ends_before_0xfff(self, store):
        store.write_byte(0xFFE, 0xAB)
        assert store.read_byte(0xFFE) == 0xAB
        with pytest.raises(OutOfBounds):
            store.read_byte(0xFFF)
        with pytest.raises(OutOfBounds):
            store.write_byte(0xFFF, 0xAB)
        with pytest.raises(OutOfBounds):
            store.read_word(0xFFE)
        assert store.read_block(0xFFD, 2) == [0, 0xAB]

    def test_peek_return_keeps_entry(self, store):
        with pytest.raises(StackUnderflow):
            store.peek_return()
        store.push_return(0x204)
        assert store.peek_return() == 0x204
        assert store.stack_depth == 1

    def test_read_word_big_endian(self, store):
        store.write_block(0x200, [0x12, 0x34])
        assert store.read_word(0x200) == 0x1234

    def test_load_program(self, store):
        store.load_program(bytes([0x60, 0x05, 0x70, 0x01]))
        assert store.read_block(PROGRAM_START, 4) == [0x60, 0x05, 0x70, 0x01]
        assert store.bus.get_and_clear_activity_log() == []

    def test_load_program_too_large(self, store):
        with pytest.raises(ValueError):
            store.load_program(bytes(0xE00))

    def test_reset_registers_keeps_ram(self, store):
        store.load_program(bytes([0xAB, 0xCD]))
        store.set_register(3, 9)
        store.push_return(0x202)
        store.reset_registers()
        assert store.get_register(3) == 0
        assert store.stack_depth == 0
        assert store.read_word(PROGRAM_START) == 0xABCD
