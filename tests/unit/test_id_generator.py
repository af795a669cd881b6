"""Tests for ct_common.id_generator and ct_common.datetime_utils."""

import pytest

from src.ct_common.datetime_utils import utc_now
from src.ct_common.id_generator import SnowflakeIdGenerator, generate_id


class TestSnowflakeIdGenerator:
    def test_returns_digit_string(self) -> None:
        value = generate_id()
        assert isinstance(value, str)
        assert value.isdigit()

    def test_unique_and_increasing(self) -> None:
        gen = SnowflakeIdGenerator(node_id=1)
        ids = [int(gen.next_id()) for _ in range(5000)]
        assert len(set(ids)) == len(ids)
        assert ids == sorted(ids)

    def test_node_id_encoded(self) -> None:
        gen = SnowflakeIdGenerator(node_id=7)
        assert (int(gen.next_id()) >> 12) & 0x3FF == 7

    @pytest.mark.parametrize("node_id", [-1, 1024])
    def test_node_id_out_of_range(self, node_id: int) -> None:
        with pytest.raises(ValueError):
            SnowflakeIdGenerator(node_id=node_id)

    def test_clock_moving_backwards_keeps_order(self, monkeypatch: pytest.MonkeyPatch) -> None:
        gen = SnowflakeIdGenerator()
        first = int(gen.next_id())
        monkeypatch.setattr(
            SnowflakeIdGenerator, "_now_ms", staticmethod(lambda: 1_735_689_600_000)
        )
        second = int(gen.next_id())
        assert second > first


class TestUtcNow:
    def test_timezone_aware(self) -> None:
        now = utc_now()
        assert now.tzinfo is not None
        assert now.utcoffset().total_seconds() == 0  # type: ignore[union-attr]
