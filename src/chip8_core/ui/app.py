# src/chip8_core/ui/app.py
"""
アプリケーションのエントリポイント。
設定とROMを読み込み、システムを構築してメインウィンドウを起動します。
"""
import argparse
import logging
import sys
from typing import List, Optional

from PySide6.QtWidgets import QApplication

from chip8_core.config.builder import SystemBuilder
from chip8_core.config.loader import ConfigLoader
from chip8_core.config.models import SystemConfig
from chip8_core.loader.loader import RomLoader
from .main_window import Chip8Window

logger = logging.getLogger(__name__)

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chip8-core", description="CHIP-8 virtual machine")
    parser.add_argument("rom", help="path to a raw CHIP-8 program image")
    parser.add_argument("--config", help="YAML system configuration file")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="logging level")
    return parser

# @intent:responsibility アプリケーションを起動し、メインウィンドウを表示します。
def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="[%(levelname)s] %(name)s: %(message)s", stream=sys.stdout)

    config = ConfigLoader().load_from_file(args.config) if args.config else SystemConfig()
    try:
        rom = RomLoader().load(args.rom)
    except (OSError, ValueError) as e:
        logger.error("Cannot load ROM: %s", e)
        return 1
    system = SystemBuilder().build_system(config, rom)

    app = QApplication(sys.argv[:1])
    window = Chip8Window(config.display.title, system.cpu, system.runtime, config.display, config.keypad)
    window.show()
    window.start()
    return app.exec()

if __name__ == '__main__':
    sys.exit(main())
