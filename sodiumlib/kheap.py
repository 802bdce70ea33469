"""A first-fit kernel heap kept as a list of free blocks ordered by size.

The heap is a fixed range of addresses starting at zero. Every free block
carries an 8-byte header (its size and the link to the next free block)
and every allocated block a 4-byte header (its size). A block handed out
by :meth:`KernelHeap.malloc` is addressed just past its header.
"""

import operator
from dataclasses import dataclass

HEAP_SIZE = 12 * 1000
FREE_HEADER_SIZE = 8
ALLOCATED_HEADER_SIZE = 4


class HeapError(Exception):
    """Raised when the heap cannot satisfy a request or is misused."""


@dataclass(frozen=True)
class FreeBlock:
    """A free block: where its header starts and how many bytes follow it."""

    address: int
    size: int

    @property
    def end(self):
        """Address just past the block, header included."""
        return self.address + self.size + FREE_HEADER_SIZE


class KernelHeap:
    """Dynamic memory over a fixed heap of ``size`` bytes."""

    def __init__(self, size=HEAP_SIZE):
        size = operator.index(size)
        if size < FREE_HEADER_SIZE:
            raise ValueError(f"heap of {size} bytes cannot hold a free block header")
        self.size = size
        self._free = [FreeBlock(0, size - FREE_HEADER_SIZE)]
        self._allocated = {}

    def _insert_sorted(self, block):
        position = next(
            (index for index, node in enumerate(self._free) if node.size >= block.size),
            len(self._free),
        )
        self._free.insert(position, block)

    def _find_fit(self, needed):
        """Index of the first free block that fits exactly or can be split."""
        return next(
            (
                index
                for index, node in enumerate(self._free)
                if node.size + FREE_HEADER_SIZE == needed or node.size >= needed
            ),
            None,
        )

    def malloc(self, size):
        """Reserve ``size`` bytes and return the address of the block."""
        size = operator.index(size)
        if size <= 0:
            raise ValueError(f"requested size must be positive: {size}")
        needed = size + ALLOCATED_HEADER_SIZE
        index = self._find_fit(needed)
        if index is None:
            raise HeapError(f"no free block of {size} bytes in the heap")

        block = self._free.pop(index)
        if block.size + FREE_HEADER_SIZE > needed:
            self._insert_sorted(FreeBlock(block.address + needed, block.size - needed))

        address = block.address + ALLOCATED_HEADER_SIZE
        self._allocated[address] = size
        return address

    def free(self, address):
        """Return a block obtained from :meth:`malloc`, merging neighbours."""
        if address is None:
            raise ValueError("cannot free a null address")
        try:
            size = self._allocated.pop(address)
        except KeyError:
            raise HeapError(f"address {address} is not an allocated block") from None

        released = FreeBlock(
            address - ALLOCATED_HEADER_SIZE,
            size + ALLOCATED_HEADER_SIZE - FREE_HEADER_SIZE,
        )

        before = next(
            (index for index, node in enumerate(self._free) if node.end == released.address),
            None,
        )
        if before is not None:
            previous = self._free.pop(before)
            released = FreeBlock(
                previous.address, previous.size + released.size + FREE_HEADER_SIZE
            )

        after = next(
            (index for index, node in enumerate(self._free) if node.address == released.end),
            None,
        )
        if after is not None:
            following = self._free.pop(after)
            released = FreeBlock(
                released.address, released.size + following.size + FREE_HEADER_SIZE
            )

        self._insert_sorted(released)

    def free_blocks(self):
        """The free blocks in list order, smallest first."""
        return list(self._free)

    def block_size(self, address):
        """The size requested for the allocated block at ``address``."""
        try:
            return self._allocated[address]
        except KeyError:
            raise HeapError(f"address {address} is not an allocated block") from None

    def describe(self):
        """A printable listing of the free blocks."""
        lines = ["# Free memory blocks in the heap"]
        lines.extend(
            f"#\tBlock {number:2d}\tstart: {block.address}\t"
            f"size = {block.size:6d} bytes (+{FREE_HEADER_SIZE} ctrl)"
            for number, block in enumerate(self._free, start=1)
        )
        return "\n".join(lines) + "\n"