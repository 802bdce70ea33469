import pytest

from sodiumlib.kheap import (
    ALLOCATED_HEADER_SIZE,
    FREE_HEADER_SIZE,
    HEAP_SIZE,
    FreeBlock,
    HeapError,
    KernelHeap,
)


def _accounted_bytes(heap, allocations):
    free_bytes = sum(block.size + FREE_HEADER_SIZE for block in heap.free_blocks())
    used_bytes = sum(heap.block_size(a) + ALLOCATED_HEADER_SIZE for a in allocations)
    return free_bytes + used_bytes


def _is_sorted(heap):
    sizes = [block.size for block in heap.free_blocks()]
    return sizes == sorted(sizes)


def test_new_heap_has_one_free_block():
    heap = KernelHeap()
    assert heap.free_blocks() == [FreeBlock(0, HEAP_SIZE - FREE_HEADER_SIZE)]


def test_three_allocations_fill_4000_bytes():
    heap = KernelHeap()
    allocations = [heap.malloc(500), heap.malloc(1500), heap.malloc(1988)]
    blocks = heap.free_blocks()
    assert len(blocks) == 1
    assert blocks[0].address == 4000
    assert blocks[0].end == HEAP_SIZE
    assert _accounted_bytes(heap, allocations) == HEAP_SIZE


def test_address_is_past_the_header():
    heap = KernelHeap()
    assert heap.malloc(500) == ALLOCATED_HEADER_SIZE


def test_block_size_records_request():
    heap = KernelHeap()
    address = heap.malloc(700)
    assert heap.block_size(address) == 700


def test_example_session_keeps_accounts_and_order():
    heap = KernelHeap()
    p1 = heap.malloc(500)
    p2 = heap.malloc(1500)
    p3 = heap.malloc(1988)
    p4 = heap.malloc(700)
    heap.free(p1)
    heap.free(p3)
    leaked = heap.malloc(3500)
    p5 = heap.malloc(490)
    live = [p2, p4, leaked, p5]
    assert _accounted_bytes(heap, live) == HEAP_SIZE
    assert _is_sorted(heap)

    heap.free(p4)
    heap.free(p5)
    heap.free(p2)
    assert _accounted_bytes(heap, [leaked]) == HEAP_SIZE
    assert _is_sorted(heap)
    assert len(heap.free_blocks()) == 2

    heap.free(leaked)
    assert heap.free_blocks() == [FreeBlock(0, HEAP_SIZE - FREE_HEADER_SIZE)]


def test_freed_small_block_is_reused_first():
    heap = KernelHeap()
    p1 = heap.malloc(500)
    heap.malloc(1500)
    heap.free(p1)
    assert heap.malloc(490) == p1


def test_exact_fit_leaves_no_free_block():
    heap = KernelHeap(1000)
    exact = 1000 - FREE_HEADER_SIZE + FREE_HEADER_SIZE - ALLOCATED_HEADER_SIZE
    address = heap.malloc(exact)
    assert heap.free_blocks() == []
    with pytest.raises(HeapError):
        heap.malloc(1)
    heap.free(address)
    assert heap.free_blocks() == [FreeBlock(0, 1000 - FREE_HEADER_SIZE)]


def test_block_too_small_to_split_is_skipped():
    heap = KernelHeap(1000)
    payload = 1000 - FREE_HEADER_SIZE
    with pytest.raises(HeapError):
        heap.malloc(payload - ALLOCATED_HEADER_SIZE + 2)
    assert heap.free_blocks() == [FreeBlock(0, payload)]


def test_too_large_request_raises():
    heap = KernelHeap()
    with pytest.raises(HeapError):
        heap.malloc(HEAP_SIZE)


def test_zero_size_raises():
    with pytest.raises(ValueError):
        KernelHeap().malloc(0)


def test_free_none_raises():
    with pytest.raises(ValueError):
        KernelHeap().free(None)


def test_free_unknown_address_raises():
    heap = KernelHeap()
    heap.malloc(10)
    with pytest.raises(HeapError):
        heap.free(999)


def test_double_free_raises():
    heap = KernelHeap()
    address = heap.malloc(10)
    heap.free(address)
    with pytest.raises(HeapError):
        heap.free(address)


def test_block_size_of_unknown_address_raises():
    with pytest.raises(HeapError):
        KernelHeap().block_size(4)


def test_heap_too_small_raises():
    with pytest.raises(ValueError):
        KernelHeap(FREE_HEADER_SIZE - 1)


def test_neighbours_are_merged():
    heap = KernelHeap()
    a = heap.malloc(100)
    b = heap.malloc(100)
    c = heap.malloc(100)
    heap.malloc(100)
    heap.free(a)
    heap.free(c)
    count_before = len(heap.free_blocks())
    heap.free(b)
    assert len(heap.free_blocks()) == count_before - 1
    assert any(block.address == 0 for block in heap.free_blocks())


def test_describe_lists_every_block():
    heap = KernelHeap()
    p1 = heap.malloc(500)
    heap.malloc(100)
    heap.free(p1)
    text = heap.describe()
    lines = text.rstrip("\n").split("\n")
    assert lines[0] == "# Free memory blocks in the heap"
    assert len(lines) == 1 + len(heap.free_blocks())
    assert f"start: {heap.free_blocks()[0].address}" in lines[1]
    assert f"(+{FREE_HEADER_SIZE} ctrl)" in lines[1]