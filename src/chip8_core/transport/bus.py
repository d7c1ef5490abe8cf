# chip8_core/transport/bus.py
"""
Transport Layer (メモリバス)

CHIP-8 の 4KB アドレス空間をデバイスに割り当て、バイト単位の読み書きを仲介します。
1命令の間に発生したアクセスはログに溜められ、Snapshotの bus_activity になります。
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from chip8_core.common.errors import OutOfBounds

class BusAccessType(Enum):
    READ = "READ"
    WRITE = "WRITE"

# @intent:data_structure バス上の1回のアクセス（アドレス、8ビット値、方向）。
@dataclass(frozen=True)
class BusAccess:
    address: int
    data: int
    access_type: BusAccessType

# @intent:responsibility バスに接続できるデバイスの最小インターフェース。
class Device(ABC):
    """
    read/write に渡されるアドレスは、割り当て範囲の先頭からのオフセットです。
    """
    @abstractmethod
    def read(self, address: int) -> int:
        pass

    @abstractmethod
    def write(self, address: int, data: int) -> None:
        pass

    # @intent:return 固定サイズを持つデバイスはそのバイト数。サイズを持たない場合はNone。
    def get_size(self) -> Optional[int]:
        return None

# @intent:responsibility 0で初期化されたバイト配列。範囲外は OutOfBounds、8ビット外の値は ValueError。
class RAM(Device):
    def __init__(self, size: int):
        if not isinstance(size, int) or size <= 0:
            raise ValueError("RAM size must be a positive integer.")
        self._cells = bytearray(size)

    def _check(self, address: int) -> None:
        if not 0 <= address < len(self._cells):
            raise OutOfBounds(f"RAM offset {address:#05x} outside 0x000-{len(self._cells) - 1:#05x}.")

    def read(self, address: int) -> int:
        self._check(address)
        return self._cells[address]

    def write(self, address: int, data: int) -> None:
        self._check(address)
        if not 0 <= data <= 0xFF:
            raise ValueError(f"Data {data} is not an 8-bit value.")
        self._cells[address] = data

    def get_size(self) -> int:
        return len(self._cells)

@dataclass(frozen=True)
class _Region:
    start: int
    end: int # 終端を含む
    device: Device

    def contains(self, address: int) -> bool:
        return self.start <= address <= self.end

# @intent:responsibility アドレスをデバイスとオフセットに解決し、記録付きのアクセスを提供します。
class Bus:
    def __init__(self):
        self._regions: List[_Region] = []
        self._activity: List[BusAccess] = []

    # @intent:pre-condition 0 <= start <= end。サイズを持つデバイスは範囲の長さと一致する必要があります。
    def register_device(self, start_address: int, end_address: int, device: Device) -> None:
        if not 0 <= start_address <= end_address:
            raise ValueError(f"Invalid address range {start_address:#06x}-{end_address:#06x}.")
        if not isinstance(device, Device):
            raise TypeError(f"{type(device).__name__} is not a Device.")
        size = device.get_size()
        span = end_address - start_address + 1
        if size is not None and size != span:
            raise ValueError(f"{type(device).__name__} of {size} bytes cannot be mapped onto {span} addresses.")
        self._regions.append(_Region(start_address, end_address, device))

    def _resolve(self, address: int) -> Tuple[Device, int]:
        for region in self._regions:
            if region.contains(address):
                return region.device, address - region.start
        raise OutOfBounds(f"Address {address:#06x} not mapped to any device.")

    def read(self, address: int) -> int:
        device, offset = self._resolve(address)
        data = device.read(offset)
        self._activity.append(BusAccess(address, data, BusAccessType.READ))
        return data

    # 記録しない読み出し（逆アセンブラ用）
    def peek(self, address: int) -> int:
        device, offset = self._resolve(address)
        return device.read(offset)

    def write(self, address: int, data: int) -> None:
        device, offset = self._resolve(address)
        device.write(offset, data)
        self._activity.append(BusAccess(address, data, BusAccessType.WRITE))

    # @intent:responsibility 溜まったアクセス記録を返し、記録を空にします。
    def get_and_clear_activity_log(self) -> List[BusAccess]:
        activity, self._activity = self._activity, []
        return activity
