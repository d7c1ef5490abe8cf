# tests/arch/chip8/test_instructions_io.py
"""
表示、キーパッド、タイマー、メモリ転送命令の単体テスト。
"""
import threading
import time

import pytest

from chip8_core.common.types import KeyState, HaltReason
from chip8_core.arch.chip8.cpu import Chip8Cpu
from chip8_core.arch.chip8.state import FONT_START
from chip8_core.runtime.shared import SharedRuntimeState

# @intent:test_suite 共有ランタイム状態とタイマーに作用する命令を検証します。

def load(cpu, *opcodes):
    image = []
    for opcode in opcodes:
        image += [opcode >> 8, opcode & 0xFF]
    cpu.load_program(bytes(image))

@pytest.fixture
def runtime():
    return SharedRuntimeState()

@pytest.fixture
def cpu(runtime):
    return Chip8Cpu(runtime, cycle_hz=0, key_poll_interval=0.001)

class TestDrawSprite:
    def _lit(self, runtime):
        return {(x, y) for y, row in enumerate(runtime.get_framebuffer()) for x, on in enumerate(row) if on}

    def test_draw_on_empty_region(self, cpu, runtime):
        # I = font "0", DRW V0, V1, 5
        cpu.store.index = FONT_START
        load(cpu, 0xD015)
        cpu.step()
        assert cpu.store.get_register(0xF) == 0
        lit = self._lit(runtime)
        assert {(0, 0), (1, 0), (2, 0), (3, 0)} <= lit  # 0xF0
        assert (0, 1) in lit and (3, 1) in lit and (1, 1) not in lit  # 0x90
        assert len(lit) == 4 + 2 + 2 + 2 + 4

    # @intent:test_case_xor 同じスプライトを2回描くと描画前の状態に戻り、2回目は衝突が検出されます。
    def test_draw_twice_restores_and_reports_collision(self, cpu, runtime):
        runtime.set_pixel(40, 40, True)
        before = runtime.get_framebuffer()
        cpu.store.set_register(0, 10)
        cpu.store.set_register(1, 12)
        cpu.store.index = FONT_START + 5 * 8
        load(cpu, 0xD015, 0xD015)

        cpu.step()
        assert cpu.store.get_register(0xF) == 0
        assert runtime.get_framebuffer() != before
        cpu.step()
        assert cpu.store.get_register(0xF) == 1
        assert runtime.get_framebuffer() == before

    def test_partial_overlap_sets_collision(self, cpu, runtime):
        runtime.set_pixel(2, 0, True)
        cpu.store.write_block(0x300, [0b10100000])
        cpu.store.index = 0x300
        load(cpu, 0xD011)
        cpu.step()
        assert cpu.store.get_register(0xF) == 1
        assert runtime.get_pixel(0, 0) is True
        assert runtime.get_pixel(2, 0) is False

    def test_draw_wraps_around_edges(self, cpu, runtime):
        cpu.store.set_register(0, runtime.width - 2)
        cpu.store.set_register(1, runtime.height - 1)
        cpu.store.write_block(0x300, [0xF0, 0x80])
        cpu.store.index = 0x300
        load(cpu, 0xD012)
        cpu.step()
        lit = self._lit(runtime)
        w, h = runtime.width, runtime.height
        assert lit == {(w - 2, h - 1), (w - 1, h - 1), (0, h - 1), (1, h - 1), (w - 2, 0)}

    def test_clear_display(self, cpu, runtime):
        runtime.set_pixel(5, 5, True)
        load(cpu, 0x00E0)
        cpu.step()
        assert not any(any(row) for row in runtime.get_framebuffer())

    def test_sprite_out_of_ram_halts_without_drawing(self, cpu, runtime):
        cpu.store.index = 0xFFE
        load(cpu, 0xD015)
        cpu.step()
        assert cpu.is_halted
        assert cpu.diagnostic.reason is HaltReason.OUT_OF_BOUNDS
        assert not any(any(row) for row in runtime.get_framebuffer())

    def test_sprite_at_last_ram_cell(self, cpu, runtime):
        cpu.store.write_byte(0xFFE, 0x80)
        cpu.store.index = 0xFFE
        load(cpu, 0xD011)
        cpu.step()
        assert not cpu.is_halted
        assert runtime.get_pixel(0, 0) is True

    def test_sprite_past_ram_end_halts(self, cpu, runtime):
        cpu.store.index = 0xFFF
        load(cpu, 0xD011)
        cpu.step()
        assert cpu.is_halted
        assert cpu.diagnostic.reason is HaltReason.OUT_OF_BOUNDS
        assert not any(any(row) for row in runtime.get_framebuffer())

class TestKeys:
    @pytest.mark.parametrize("opcode, pressed, expected_pc", [
        (0xE09E, True, 0x204),
        (0xE09E, False, 0x202),
        (0xE0A1, True, 0x202),
        (0xE0A1, False, 0x204),
    ])
    def test_key_skips(self, cpu, runtime, opcode, pressed, expected_pc):
        cpu.store.set_register(0, 0x12)  # 下位ニブルのみ使用 -> key 2
        runtime.set_key_state(2, KeyState.PRESSED if pressed else KeyState.RELEASED)
        load(cpu, opcode)
        cpu.step()
        assert cpu.store.pc == expected_pc

    def test_block_returns_immediately_when_key_already_pressed(self, cpu, runtime):
        runtime.set_key_state(0xB, KeyState.PRESSED)
        load(cpu, 0xF30A)
        cpu.step()
        assert cpu.store.get_register(3) == 0xB
        assert cpu.store.pc == 0x202

    # @intent:test_case_block キーが押されるまで待機し、押されたキーIDを格納して再開することを検証します。
    def test_block_waits_for_key(self, cpu, runtime):
        load(cpu, 0xF30A)
        worker = threading.Thread(target=cpu.step)
        worker.start()
        time.sleep(0.05)
        assert worker.is_alive()
        assert cpu.store.get_register(3) == 0

        runtime.set_key_state(7, KeyState.PRESSED)
        worker.join(timeout=2)
        assert not worker.is_alive()
        assert cpu.store.get_register(3) == 7
        assert cpu.store.pc == 0x202

    def test_stop_aborts_key_wait(self, cpu, runtime):
        load(cpu, 0xF30A)
        worker = threading.Thread(target=cpu.step)
        worker.start()
        time.sleep(0.02)
        cpu.stop()
        worker.join(timeout=2)
        assert not worker.is_alive()
        assert cpu.store.pc == 0x200  # 再実行できるよう命令に戻る

        cpu.step()
        assert cpu.is_halted
        assert cpu.diagnostic.reason is HaltReason.STOP_REQUESTED

class TestTimers:
    def test_set_and_read_delay_timer(self, cpu):
        cpu.store.set_register(0, 10)
        load(cpu, 0xF015, 0xF107)
        cpu.step()
        assert cpu.timers.get_delay() == 10
        cpu.step()
        assert cpu.store.get_register(1) == 10

    def test_set_sound_timer(self, cpu):
        cpu.store.set_register(2, 3)
        load(cpu, 0xF218)
        cpu.step()
        assert cpu.timers.sound.value == 3
        assert cpu.timers.is_sounding

class TestIndexAndMemory:
    def test_set_index_and_add(self, cpu):
        cpu.store.set_register(0, 0x10)
        load(cpu, 0xA123, 0xF01E)
        cpu.step()
        assert cpu.store.index == 0x123
        cpu.step()
        assert cpu.store.index == 0x133

    def test_add_to_index_wraps_16bit(self, cpu):
        cpu.store.index = 0xFFFF
        cpu.store.set_register(0, 2)
        load(cpu, 0xF01E)
        cpu.step()
        assert cpu.store.index == 0x0001
        assert cpu.store.get_register(0xF) == 0

    @pytest.mark.parametrize("value, expected", [(0x0A, 0xA), (0x1A, 0xA), (0x00, 0x0), (0x0F, 0xF)])
    def test_load_font_sprite(self, cpu, value, expected):
        cpu.store.set_register(4, value)
        load(cpu, 0xF429)
        cpu.step()
        assert cpu.store.index == FONT_START + 5 * expected

    def test_to_decimal(self, cpu):
        cpu.store.set_register(5, 254)
        cpu.store.index = 0x300
        load(cpu, 0xF533)
        cpu.step()
        assert cpu.store.read_block(0x300, 3) == [2, 5, 4]
        assert cpu.store.index == 0x300

    # @intent:test_case_atomic 書き込み範囲がRAMを越える場合は何も書き込まずに停止します。
    def test_to_decimal_out_of_range_is_atomic(self, cpu):
        cpu.store.set_register(5, 123)
        cpu.store.index = 0xFFD  # 2バイト目までは収まり、3バイト目がRAMの外
        load(cpu, 0xF533)
        cpu.step()
        assert cpu.is_halted
        assert cpu.store.read_byte(0xFFD) == 0
        assert cpu.store.read_byte(0xFFE) == 0
        assert cpu.store.pc == 0x200

    def test_copy_registers_into_memory(self, cpu):
        for r, value in enumerate([1, 2, 3, 4, 5]):
            cpu.store.set_register(r, value)
        cpu.store.index = 0x300
        load(cpu, 0xF355)
        cpu.step()
        assert cpu.store.read_block(0x300, 5) == [1, 2, 3, 4, 0]
        assert cpu.store.index == 0x300

    def test_copy_registers_from_memory(self, cpu):
        cpu.store.write_block(0x300, [9, 8, 7, 6])
        cpu.store.index = 0x300
        load(cpu, 0xF265)
        cpu.step()
        assert [cpu.store.get_register(r) for r in range(4)] == [9, 8, 7, 0]
        assert cpu.store.index == 0x300

    def test_set_reg_and_copy(self, cpu):
        load(cpu, 0x6A42, 0x8BA0)
        cpu.step()
        cpu.step()
        assert cpu.store.get_register(0xA) == 0x42
        assert cpu.store.get_register(0xB) == 0x42
