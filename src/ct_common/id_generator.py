"""Time-ordered string IDs for marketplace records (orders, products, reviews, disputes).

IDs are snowflake-style integers rendered as strings, so lexical order within
the same digit count follows creation order. List endpoints rely on that for
``ORDER BY id DESC`` pagination.
"""

import threading
import time


class SnowflakeIdGenerator:
    """Layout (64 bits): 41 bits ms since epoch | 10 bits node | 12 bits sequence."""

    _EPOCH_MS = 1_735_689_600_000  # 2025-01-01T00:00:00Z
    _NODE_BITS = 10
    _SEQUENCE_BITS = 12
    _SEQUENCE_MASK = (1 << _SEQUENCE_BITS) - 1

    def __init__(self, node_id: int = 0) -> None:
        if not (0 <= node_id < (1 << self._NODE_BITS)):
            raise ValueError(f"node_id must be 0-{(1 << self._NODE_BITS) - 1}")
        self._node_id = node_id
        self._sequence = 0
        self._last_ms = -1
        self._lock = threading.Lock()

    def next_id(self) -> str:
        with self._lock:
            now_ms = self._now_ms()
            if now_ms < self._last_ms:
                # Clock moved backwards; keep issuing from the last timestamp
                now_ms = self._last_ms
            if now_ms == self._last_ms:
                self._sequence = (self._sequence + 1) & self._SEQUENCE_MASK
                if self._sequence == 0:
                    now_ms = self._wait_until_after(now_ms)
            else:
                self._sequence = 0
            self._last_ms = now_ms

            value = (
                ((now_ms - self._EPOCH_MS) << (self._NODE_BITS + self._SEQUENCE_BITS))
                | (self._node_id << self._SEQUENCE_BITS)
                | self._sequence
            )
            return str(value)

    @staticmethod
    def _now_ms() -> int:
        return time.time_ns() // 1_000_000

    def _wait_until_after(self, last_ms: int) -> int:
        now_ms = self._now_ms()
        while now_ms <= last_ms:
            now_ms = self._now_ms()
        return now_ms


_default_generator = SnowflakeIdGenerator()


def generate_id() -> str:
    """Next ID from the process-wide generator."""
    return _default_generator.next_id()
