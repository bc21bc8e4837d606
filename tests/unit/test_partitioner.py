"""
Unit tests for workload partitioning.
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from varejo_datagen.generators.partitioner import partition


class TestPartitionProperties:
    """Properties that hold for every valid (total, workers) pair."""

    @given(total=st.integers(min_value=0, max_value=5000), workers=st.integers(min_value=1, max_value=64))
    def test_ranges_cover_workload_exactly_once(self, total: int, workers: int):
        """Ranges are disjoint, sorted and their union is [0, total)."""
        ranges = partition(total, workers)

        assert len(ranges) == workers
        covered = [index for chunk in ranges for index in chunk]
        assert covered == list(range(total))

    @given(total=st.integers(min_value=1, max_value=5000), workers=st.integers(min_value=1, max_value=64))
    def test_ranges_are_contiguous(self, total: int, workers: int):
        """Each range starts where the previous one stopped."""
        ranges = partition(total, workers)
        for previous, current in zip(ranges, ranges[1:]):
            assert current.start == previous.stop

    @given(total=st.integers(min_value=64, max_value=5000), workers=st.integers(min_value=1, max_value=64))
    def test_last_range_absorbs_remainder(self, total: int, workers: int):
        """All ranges hold total // workers items except the last one."""
        ranges = partition(total, workers)
        chunk = total // workers

        assert all(len(r) == chunk for r in ranges[:-1])
        assert len(ranges[-1]) == chunk + total % workers


class TestPartitionExamples:
    """Concrete partitions."""

    def test_even_split(self):
        assert partition(10, 5) == [range(0, 2), range(2, 4), range(4, 6), range(6, 8), range(8, 10)]

    def test_uneven_split(self):
        assert partition(10, 3) == [range(0, 3), range(3, 6), range(6, 10)]

    def test_single_worker(self):
        assert partition(7, 1) == [range(0, 7)]

    def test_fewer_items_than_workers(self):
        """7 items over 10 workers: 7 workers get one item, 3 get nothing."""
        ranges = partition(7, 10)

        assert len(ranges) == 10
        assert [len(r) for r in ranges] == [1] * 7 + [0] * 3
        assert [r.start for r in ranges[:7]] == list(range(7))

    def test_empty_workload(self):
        assert all(len(r) == 0 for r in partition(0, 4))


class TestPartitionErrors:
    """Invalid arguments."""

    @pytest.mark.parametrize("workers", [0, -1])
    def test_non_positive_workers(self, workers):
        with pytest.raises(ValueError, match="workers must be positive"):
            partition(10, workers)

    def test_negative_total(self):
        with pytest.raises(ValueError, match="total must be non-negative"):
            partition(-1, 4)
