"""A growable first-fit heap with malloc, calloc, realloc and free.

The heap starts empty and is created on the first allocation. Whenever no
free block fits a request, the heap is grown at its end, the way a data
segment is grown with ``sbrk``. Free blocks are kept in a list ordered by
size and are merged with their neighbours when memory is released.

Addresses are offsets into the heap's backing memory. Every free block
carries an 8-byte header and every allocated block a 4-byte header. The
address of an allocated block points just past its header.
"""

import operator

from sodiumlib.kheap import (
    ALLOCATED_HEADER_SIZE,
    FREE_HEADER_SIZE,
    FreeBlock,
    HeapError,
)

INITIAL_SIZE = 3000
INCREMENT = 3000


class Heap:
    """Dynamic memory over a heap that grows on demand.

    ``initial_size`` is added to the first request when the heap is
    created, ``increment`` to every later request that forces the heap to
    grow, and ``limit`` caps the total heap size (``None`` for no cap).
    """

    def __init__(self, initial_size=INITIAL_SIZE, increment=INCREMENT, limit=None):
        initial_size = operator.index(initial_size)
        increment = operator.index(increment)
        if initial_size < FREE_HEADER_SIZE:
            raise ValueError(f"initial size must be at least {FREE_HEADER_SIZE}: {initial_size}")
        if increment < FREE_HEADER_SIZE:
            raise ValueError(f"increment must be at least {FREE_HEADER_SIZE}: {increment}")
        if limit is not None:
            limit = operator.index(limit)
            if limit < 0:
                raise ValueError(f"limit must not be negative: {limit}")
        self.initial_size = initial_size
        self.increment = increment
        self.limit = limit
        self._memory = bytearray()
        self._free = []
        self._allocated = {}
        self._created = False

    @property
    def end(self):
        """Address just past the end of the heap."""
        return len(self._memory)

    def _grow(self, amount):
        """Extend the heap by ``amount`` bytes; return the old and new ends."""
        old_end = self.end
        if self.limit is not None and old_end + amount > self.limit:
            raise HeapError(
                f"cannot grow the heap by {amount} bytes beyond its limit of {self.limit}"
            )
        self._memory.extend(bytes(amount))
        return old_end, self.end

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

    def _create(self, size):
        old_end, new_end = self._grow(size + self.initial_size)
        self._free = [FreeBlock(old_end, new_end - old_end - FREE_HEADER_SIZE)]
        self._created = True

    def _extend(self, size):
        """Grow the heap, joining the new space to a free block that ends there."""
        old_end, new_end = self._grow(size + self.increment)
        top = max(self._free, key=lambda node: node.address, default=None)
        if top is not None and top.end == old_end:
            self._free.remove(top)
            self._insert_sorted(FreeBlock(top.address, top.size + new_end - old_end))
        else:
            self._free.append(FreeBlock(old_end, new_end - old_end - FREE_HEADER_SIZE))

    def malloc(self, size):
        """Reserve ``size`` bytes and return the address of the block."""
        size = operator.index(size)
        if size <= 0:
            raise ValueError(f"requested size must be positive: {size}")
        if not self._created:
            self._create(size)

        needed = size + ALLOCATED_HEADER_SIZE
        index = self._find_fit(needed)
        if index is None:
            self._extend(size)
            index = self._find_fit(needed)
            if index is None:
                raise HeapError(f"no free block of {size} bytes after growing the heap")

        block = self._free.pop(index)
        if block.size + FREE_HEADER_SIZE > needed:
            self._insert_sorted(FreeBlock(block.address + needed, block.size - needed))

        address = block.address + ALLOCATED_HEADER_SIZE
        self._allocated[address] = size
        return address

    def calloc(self, size):
        """Reserve ``size`` bytes set to zero and return the block's address."""
        address = self.malloc(size)
        self._memory[address:address + size] = bytes(size)
        return address

    def realloc(self, address, size):
        """Resize a block, moving it and copying its contents.

        A ``None`` address allocates a new block; a size of zero frees the
        block and returns ``None``; the same size returns the same address.
        """
        if address is None:
            return self.malloc(size)
        size = operator.index(size)
        if size == 0:
            self.free(address)
            return None
        original = self._size_of(address)
        if size == original:
            return address
        new_address = self.malloc(size)
        count = min(size, original)
        self._memory[new_address:new_address + count] = self._memory[address:address + count]
        self.free(address)
        return new_address

    def free(self, address):
        """Return a block to the heap, merging it with adjacent free blocks."""
        if address is None:
            raise ValueError("cannot free a null address")
        size = self._size_of(address)
        del self._allocated[address]

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

    def _size_of(self, address):
        try:
            return self._allocated[address]
        except KeyError:
            raise HeapError(f"address {address} is not an allocated block") from None

    def _check_span(self, address, count):
        size = self._size_of(address)
        if count < 0 or count > size:
            raise ValueError(f"{count} bytes do not fit in a block of {size} bytes")

    def read(self, address, size):
        """The first ``size`` bytes of the allocated block at ``address``."""
        size = operator.index(size)
        self._check_span(address, size)
        return bytes(self._memory[address:address + size])

    def write(self, address, data):
        """Store ``data`` at the start of the allocated block at ``address``."""
        data = bytes(data)
        self._check_span(address, len(data))
        self._memory[address:address + len(data)] = data

    def free_blocks(self):
        """The free blocks in list order."""
        return list(self._free)

    def describe(self):
        """A printable listing of the free blocks."""
        lines = ["# Free memory blocks in the heap"]
        lines.extend(
            f"#\tBlock {number:2d}\tstart: {block.address}\t"
            f"size = {block.size:6d} bytes (+{FREE_HEADER_SIZE} ctrl)"
            for number, block in enumerate(self._free, start=1)
        )
        return "\n".join(lines) + "\n"