"""A first-fit allocator over a fixed-size heap with block headers."""

from __future__ import annotations

import sys
from dataclasses import dataclass, replace

HEAP_SIZE = 1024
WORD_SIZE = 8
HEADER_SIZE = 24


def _align(size: int) -> int:
    return (size + WORD_SIZE - 1) & ~(WORD_SIZE - 1)


@dataclass
class HeapBlock:
    """A block header: its offset in the heap, payload size and state."""

    offset: int
    size: int
    is_free: bool

    @property
    def address(self) -> int:
        """Offset of the payload that follows the header."""
        return self.offset + HEADER_SIZE


class Heap:
    """A heap of ``size`` bytes handing out payload offsets."""

    def __init__(self, size: int = HEAP_SIZE) -> None:
        if size < HEADER_SIZE:
            raise ValueError(f"heap of {size} bytes cannot hold a block header")
        self.size = size
        self._blocks = [HeapBlock(0, size - HEADER_SIZE, True)]

    def malloc(self, size: int) -> int | None:
        """Allocate ``size`` bytes; return the payload offset or None if nothing fits."""
        if size <= 0:
            return None
        size = _align(size)
        for index, block in enumerate(self._blocks):
            if not (block.is_free and block.size >= size):
                continue
            if block.size >= size + HEADER_SIZE:
                rest = HeapBlock(
                    block.offset + HEADER_SIZE + size,
                    block.size - size - HEADER_SIZE,
                    True,
                )
                self._blocks.insert(index + 1, rest)
                block.size = size
            block.is_free = False
            return block.address
        return None

    def free(self, address: int | None) -> None:
        """Release the block at ``address`` and merge neighbouring free blocks."""
        if address is None:
            return
        for block in self._blocks:
            if block.address == address:
                block.is_free = True
                break
        else:
            raise ValueError(f"no block at address {address}")
        index = 0
        while index < len(self._blocks) - 1:
            current, following = self._blocks[index], self._blocks[index + 1]
            if current.is_free and following.is_free:
                current.size += following.size + HEADER_SIZE
                del self._blocks[index + 1]
            else:
                index += 1

    def blocks(self) -> list[HeapBlock]:
        """Return copies of the block headers in address order."""
        return [replace(block) for block in self._blocks]


def _show(address: int | None) -> str:
    return "(nil)" if address is None else f"0x{address:x}"


def main(argv: list[str] | None = None) -> int:
    heap = Heap(HEAP_SIZE)

    def allocate(size: int) -> int | None:
        print(f"SIZE: {_align(size)}")
        return heap.malloc(size)

    ptr = allocate(400)
    ptr2 = allocate(400)
    ptr3 = allocate(400)
    print(_show(ptr))
    print(_show(ptr2))
    print(_show(ptr3))

    heap.free(ptr)
    print(_show(ptr))
    heap.free(ptr2)

    ptr4 = allocate(900)
    print(_show(ptr4))
    return 0


if __name__ == "__main__":
    sys.exit(main())