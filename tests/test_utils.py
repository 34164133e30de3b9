import pytest

from micaprof.utils import ChunkTable, block_range, cumulative_at


def test_block_range_single_byte_is_one_block():
    for address in (0, 5, 63, 64, 1000):
        blocks = block_range(address, 1, 6)
        assert list(blocks) == [address >> 6]


def test_block_range_crossing_boundary():
    assert list(block_range(63, 2, 6)) == [0, 1]


def test_block_range_aligned_full_block():
    blocks = block_range(128, 64, 6)
    assert len(blocks) == 1
    assert blocks[0] == 128 >> 6


def test_block_range_zero_size_aligned_is_empty():
    assert len(block_range(0, 0, 6)) == 0


def test_block_range_rejects_negative_address():
    with pytest.raises(ValueError):
        block_range(-1, 4, 6)


def test_block_range_rejects_negative_size():
    with pytest.raises(ValueError):
        block_range(0, -4, 6)


def test_cumulative_at_values():
    assert cumulative_at([1, 2, 3, 4], [0, 2]) == [1, 6]


def test_cumulative_at_last_point_is_total():
    distribution = [3, 0, 7, 1, 9]
    assert cumulative_at(distribution, [len(distribution) - 1]) == [sum(distribution)]


def test_cumulative_at_skips_points_past_end():
    distribution = [2, 2]
    assert cumulative_at(distribution, [1, 8, 64]) == [sum(distribution)]


def test_cumulative_at_rejects_negative_point():
    with pytest.raises(ValueError):
        cumulative_at([1, 2], [-1])


def test_chunk_table_counts_distinct_blocks():
    table = ChunkTable(4)
    blocks = [0, 1, 1, 15, 16, 17, 300, 300, 1 << 20]
    for block in blocks:
        table.mark(block)
    assert table.count() == len(set(blocks))


def test_chunk_table_mark_reports_new_blocks():
    table = ChunkTable(3)
    assert table.mark(9) is True
    assert table.mark(9) is False
    assert table.count() == 1


def test_chunk_table_clear():
    table = ChunkTable(2)
    for block in range(10):
        table.mark(block)
    table.clear()
    assert table.count() == 0
    assert table.mark(3) is True


def test_chunk_table_rejects_negative_block():
    table = ChunkTable(2)
    with pytest.raises(ValueError):
        table.mark(-1)