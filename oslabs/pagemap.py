"""Decode the pagemap entries of every present page of a process."""

from __future__ import annotations

import mmap
import re
import struct
import sys
from dataclasses import dataclass
from typing import BinaryIO, Iterable, Iterator

ENTRY_SIZE = 8
_ENTRY = struct.Struct("=Q")
_PFN_MASK = (1 << 55) - 1
_MAPS_LINE = re.compile(r"\s*(?:0[xX])?([0-9a-fA-F]+)-(?:0[xX])?([0-9a-fA-F]+)")


@dataclass(frozen=True)
class PagemapEntry:
    """One 64-bit pagemap entry split into its fields."""

    raw: int
    present: bool
    swapped: bool
    file_page: bool
    soft_dirty: bool
    pfn: int

    @classmethod
    def from_raw(cls, raw: int) -> "PagemapEntry":
        return cls(
            raw=raw,
            present=bool((raw >> 63) & 1),
            swapped=bool((raw >> 62) & 1),
            file_page=bool((raw >> 61) & 1),
            soft_dirty=bool((raw >> 55) & 1),
            pfn=raw & _PFN_MASK,
        )

    def describe(self) -> str:
        """Return the decoded fields, one tab-indented line each."""
        return "\n".join(
            [
                f"\tpresent = {int(self.present)}",
                f"\tswapped = {int(self.swapped)}",
                f"\tfile/shared = {int(self.file_page)}",
                f"\tsoft-dirty = {int(self.soft_dirty)}",
                f"\tPFN = 0x{self.pfn:x}",
            ]
        )


def format_bits(value: int) -> str:
    """Render 64 bits, most significant first, each byte followed by a space."""
    bits = f"{value & ((1 << 64) - 1):064b}"
    return "".join(bits[i : i + 8] + " " for i in range(0, 64, 8))


def parse_maps(lines: Iterable[str]) -> Iterator[tuple[int, int]]:
    """Yield (start, end) for each line of a maps file that names a range."""
    for line in lines:
        match = _MAPS_LINE.match(line)
        if match:
            yield int(match.group(1), 16), int(match.group(2), 16)


def read_pagemap_entry(pagemap: BinaryIO, vaddr: int, page_size: int) -> PagemapEntry:
    """Read the entry describing the page that holds ``vaddr``."""
    pagemap.seek((vaddr // page_size) * ENTRY_SIZE)
    data = pagemap.read(ENTRY_SIZE)
    if data is None or len(data) != ENTRY_SIZE:
        raise EOFError(f"no pagemap entry for address 0x{vaddr:x}")
    (raw,) = _ENTRY.unpack(data)
    return PagemapEntry.from_raw(raw)


def _present_pages(
    regions: Iterable[tuple[int, int]], pagemap: BinaryIO, page_size: int
) -> Iterator[tuple[int, PagemapEntry]]:
    for start, end in regions:
        for addr in range(start, end, page_size):
            try:
                entry = read_pagemap_entry(pagemap, addr, page_size)
            except (OSError, EOFError, OverflowError, ValueError):
                continue
            if entry.present:
                yield addr, entry


def iter_present_pages(pid: int, page_size: int | None = None) -> Iterator[tuple[int, PagemapEntry]]:
    """Yield (address, entry) for every present page mapped by process ``pid``."""
    size = page_size or mmap.PAGESIZE
    with open(f"/proc/{pid}/maps", encoding="utf-8", errors="replace") as maps, open(
        f"/proc/{pid}/pagemap", "rb", buffering=0
    ) as pagemap:
        yield from _present_pages(parse_maps(maps), pagemap, size)


def _atoi(text: str) -> int:
    match = re.match(r"\s*([+-]?\d+)", text)
    return int(match.group(1)) if match else 0


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if not args:
        print("usage: pagemap <pid>", file=sys.stderr)
        return 1
    pid = _atoi(args[0])
    try:
        for addr, entry in iter_present_pages(pid):
            print(f"Address: 0x{addr:x}")
            print(f"\tBits: {format_bits(entry.raw)}")
            print(entry.describe())
            print()
    except OSError as exc:
        print(f"open /proc/{pid}: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())