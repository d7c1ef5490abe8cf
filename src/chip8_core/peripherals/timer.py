# src/chip8_core/peripherals/timer.py
"""
タイマーサブシステム。

遅延タイマーとサウンドタイマーは、それぞれ独立した8ビットのカウンタで、
値が0でない間だけ固定周期（既定60Hz）で1ずつ減少します。
各カウンタは寿命の間1本の常駐スレッドを持ち、値が0の間はConditionで待機します。
"""
import logging
import threading
import time
from typing import Optional

logger = logging.getLogger(__name__)

TIMER_FREQUENCY_HZ = 60

# @intent:responsibility 周期的に減少する8ビットのカウンタを提供します。
class CountdownTimer:
    """
    setで新しい値を設定すると、その値から減少を（再）開始します。0を設定すると停止します。
    valueの読み出しはブロックせず、減少処理とは同じロックで保護されます。
    """
    def __init__(self, name: str, frequency_hz: float = TIMER_FREQUENCY_HZ):
        if frequency_hz <= 0:
            raise ValueError("Timer frequency must be positive.")
        self.name = name
        self._period = 1.0 / frequency_hz
        self._cond = threading.Condition()
        self._value = 0
        self._generation = 0 # setの度に増え、進行中の周期を無効化する
        self._stopping = False
        self._thread: Optional[threading.Thread] = None

    @property
    def value(self) -> int:
        with self._cond:
            return self._value

    # @intent:pre-condition valueは8ビット値である必要があります。
    def set(self, value: int) -> None:
        if not 0 <= value <= 0xFF:
            raise ValueError(f"Timer value {value} is not an 8-bit value.")
        with self._cond:
            self._value = value
            self._generation += 1
            self._cond.notify_all()

    # @intent:responsibility 1周期分だけカウンタを減少させます。0未満にはなりません。
    def tick(self) -> int:
        with self._cond:
            if self._value > 0:
                self._value -= 1
                if self._value == 0:
                    logger.debug("%s timer expired", self.name)
            return self._value

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    # @intent:responsibility 常駐スレッドを起動します。起動済みの場合は何もしません。
    def start(self) -> None:
        with self._cond:
            if self.running:
                return
            self._stopping = False
            self._thread = threading.Thread(target=self._run, name=f"{self.name}-timer", daemon=True)
            self._thread.start()

    # @intent:responsibility 常駐スレッドを停止し、終了を待ちます。
    def stop(self, timeout: Optional[float] = 1.0) -> None:
        with self._cond:
            self._stopping = True
            self._cond.notify_all()
            thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        self._thread = None

    def _run(self) -> None:
        with self._cond:
            while not self._stopping:
                if self._value == 0:
                    # 次のsetまたはstopまで待機（ビジーループしない）
                    self._cond.wait()
                    continue
                generation = self._generation
                deadline = time.monotonic() + self._period
                while not self._stopping and generation == self._generation:
                    remaining = deadline - time.monotonic()
                    if remaining <= 0:
                        break
                    self._cond.wait(remaining)
                if self._stopping or generation != self._generation:
                    continue
                self.tick()

# @intent:responsibility 遅延タイマーとサウンドタイマーをまとめて管理します。
class TimerUnit:
    def __init__(self, frequency_hz: float = TIMER_FREQUENCY_HZ):
        self.delay = CountdownTimer("delay", frequency_hz)
        self.sound = CountdownTimer("sound", frequency_hz)

    def start(self) -> None:
        self.delay.start()
        self.sound.start()

    def stop(self) -> None:
        self.delay.stop()
        self.sound.stop()

    def set_delay(self, value: int) -> None:
        self.delay.set(value)

    def get_delay(self) -> int:
        return self.delay.value

    # @intent:rationale 音声出力は行いません。開始/停止の遷移のみログに記録します。
    def set_sound(self, value: int) -> None:
        if value and not self.sound.value:
            logger.debug("Sound started for %d ticks", value)
        elif not value and self.sound.value:
            logger.debug("Sound stopped")
        self.sound.set(value)

    @property
    def is_sounding(self) -> bool:
        return self.sound.value > 0
