# src/chip8_core/arch/chip8/store.py
"""
レジスタ/メモリストア。

RAM、汎用レジスタ、アドレスレジスタ、プログラムカウンタ、コールスタックを所有し、
範囲検査付きのアクセサだけを公開します。変更するのは実行エンジンのみで、
並行アクセスはないため内部ロックは持ちません。
"""
from typing import List, Optional, Sequence

from chip8_core.common.errors import OutOfBounds, StackOverflow, StackUnderflow
from chip8_core.transport.bus import Bus, RAM
from chip8_core.arch.chip8.state import (
    Chip8CpuState, RAM_SIZE, PROGRAM_START, PROGRAM_END, INSTRUCTION_WIDTH,
    REGISTER_COUNT, STACK_DEPTH, FONT_START, FONT_SPRITES,
)

# @intent:responsibility CHIP-8 のレジスタとメモリへの検証付きアクセスを提供します。
class RegisterStore:
    def __init__(self, bus: Optional[Bus] = None):
        if bus is None:
            bus = Bus()
            bus.register_device(0x000, RAM_SIZE - 1, RAM(RAM_SIZE))
        self.bus = bus
        self.state = Chip8CpuState()
        self.write_block(FONT_START, FONT_SPRITES)
        self.bus.get_and_clear_activity_log()

    # @intent:responsibility レジスタとスタックを初期状態に戻します。RAMは保持されます。
    def reset_registers(self) -> Chip8CpuState:
        self.state = Chip8CpuState()
        return self.state

    # --- 汎用レジスタ ---
    def _check_register(self, index: int) -> None:
        if not 0 <= index < REGISTER_COUNT:
            raise OutOfBounds(f"Register index {index} out of range 0x0-0xF.")

    def get_register(self, index: int) -> int:
        self._check_register(index)
        return self.state.v[index]

    def set_register(self, index: int, value: int) -> None:
        self._check_register(index)
        if not 0 <= value <= 0xFF:
            raise ValueError(f"Register value {value} is not an 8-bit value.")
        self.state.v[index] = value

    # --- アドレスレジスタ (I) ---
    @property
    def index(self) -> int:
        return self.state.i

    @index.setter
    def index(self, value: int) -> None:
        self.state.i = value & 0xFFFF

    # --- プログラムカウンタ ---
    @property
    def pc(self) -> int:
        return self.state.pc

    # @intent:pre-condition addressは偶数かつ [0x200, 0xFFF) の範囲内である必要があります。
    def set_pc(self, address: int) -> None:
        self.check_pc(address)
        self.state.pc = address

    @staticmethod
    def check_pc(address: int) -> None:
        if not PROGRAM_START <= address < PROGRAM_END:
            raise OutOfBounds(f"Program counter {address:#05x} outside program space.", pc=address)
        if address % INSTRUCTION_WIDTH:
            raise OutOfBounds(f"Program counter {address:#05x} is not word-aligned.", pc=address)

    # @intent:rationale 範囲検査は次のフェッチ時に行います。最後の命令がジャンプの場合も正しく動作させるためです。
    def advance_pc(self) -> None:
        self.state.pc += INSTRUCTION_WIDTH

    # PCを2命令分進めます（実行前のPCを基準とする呼び出し元向け）。
    def skip_pc(self) -> None:
        self.state.pc += INSTRUCTION_WIDTH * 2

    # @intent:responsibility PCを1命令分戻し、同じ命令が再実行されるようにします。
    def rewind_pc(self) -> None:
        self.state.pc -= INSTRUCTION_WIDTH

    # --- コールスタック ---
    def push_return(self, address: int) -> None:
        if len(self.state.stack) >= STACK_DEPTH:
            raise StackOverflow(f"Call stack exceeded {STACK_DEPTH} entries.")
        self.state.stack.append(address)
        self.state.sp = len(self.state.stack)

    # @intent:responsibility 取り出さずに最上段の戻りアドレスを返します。
    def peek_return(self) -> int:
        if not self.state.stack:
            raise StackUnderflow("Return with an empty call stack.")
        return self.state.stack[-1]

    def pop_return(self) -> int:
        if not self.state.stack:
            raise StackUnderflow("Return with an empty call stack.")
        address = self.state.stack.pop()
        self.state.sp = len(self.state.stack)
        return address

    @property
    def stack_depth(self) -> int:
        return len(self.state.stack)

    # --- RAM ---
    def read_byte(self, address: int) -> int:
        return self.bus.read(address)

    def write_byte(self, address: int, value: int) -> None:
        self.bus.write(address, value)

    @staticmethod
    def _check_range(address: int, length: int) -> None:
        if address < 0 or address + length > RAM_SIZE:
            raise OutOfBounds(f"Range {address:#05x}+{length} exceeds RAM of size {RAM_SIZE:#x}.")

    # @intent:post-condition 範囲全体を先に検証するため、失敗時にRAMは一切変更されません。
    def read_block(self, address: int, length: int) -> List[int]:
        self._check_range(address, length)
        return [self.bus.read(address + offset) for offset in range(length)]

    def write_block(self, address: int, data: Sequence[int]) -> None:
        self._check_range(address, len(data))
        for offset, value in enumerate(data):
            self.bus.write(address + offset, value)

    # @intent:responsibility ビッグエンディアンの16ビットオペコードを読み出します。
    def read_word(self, address: int) -> int:
        self._check_range(address, INSTRUCTION_WIDTH)
        return (self.bus.read(address) << 8) | self.bus.read(address + 1)

    # @intent:responsibility ROMイメージを 0x200 から連続してロードします。
    def load_program(self, image: bytes) -> None:
        if len(image) > PROGRAM_END - PROGRAM_START:
            raise ValueError(
                f"Program image of {len(image)} bytes does not fit in {PROGRAM_END - PROGRAM_START} bytes."
            )
        self.write_block(PROGRAM_START, image)
        self.bus.get_and_clear_activity_log()
