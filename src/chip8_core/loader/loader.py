# chip8_core/loader/loader.py
"""
ROMローダーモジュール。
ビッグエンディアンの16ビットオペコードが連続した生のバイナリイメージを読み込みます。
"""
import logging
from pathlib import Path
from typing import Union

from chip8_core.arch.chip8.state import PROGRAM_START, PROGRAM_END

logger = logging.getLogger(__name__)

MAX_ROM_SIZE = PROGRAM_END - PROGRAM_START

class RomLoader:
    """
    ROMファイルを読み込み、サイズを検証してバイト列を返すローダー。
    """
    def load(self, file_path: Union[str, Path]) -> bytes:
        path = Path(file_path)
        image = path.read_bytes()
        if not image:
            raise ValueError(f"ROM file {path} is empty.")
        if len(image) > MAX_ROM_SIZE:
            raise ValueError(f"ROM file {path} is {len(image)} bytes; at most {MAX_ROM_SIZE} bytes fit in memory.")
        if len(image) % 2:
            logger.warning("ROM file %s has an odd length (%d bytes); the last byte is not a full opcode.", path, len(image))
        logger.debug("Loaded ROM %s (%d bytes)", path, len(image))
        return image
