"""Sorted, front-coded name dictionaries."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from shpdat.common.binary import BinaryCursor, pack_uint
from shpdat.common.constants import NAME_LENGTH_WIDTH
from shpdat.common.errors import ContractError


def shared_prefix_length(a: bytes, b: bytes) -> int:
    length = 0
    for x, y in zip(a, b):
        if x != y:
            break
        length += 1
    return length


@dataclass(frozen=True)
class NameDictionary:
    names: tuple[bytes, ...]
    index: dict[bytes, int] = field(compare=False, repr=False)

    @classmethod
    def build(cls, names: Iterable[bytes]) -> "NameDictionary":
        ordered = tuple(sorted(set(names)))
        return cls(names=ordered, index={name: i for i, name in enumerate(ordered)})

    def __len__(self) -> int:
        return len(self.names)

    def index_of(self, name: bytes) -> int:
        try:
            return self.index[name]
        except KeyError as exc:
            raise ContractError(f"Name {name!r} is missing from its dictionary") from exc

    def encode(self, count_width: int, what: str = "name dictionary") -> bytes:
        """Serialise as a count followed by (prefix, suffix length, suffix) entries."""
        out = bytearray(pack_uint(len(self.names), count_width, f"{what} size"))
        previous = b""
        for name in self.names:
            common = shared_prefix_length(name, previous)
            suffix = name[common:]
            out += pack_uint(common, NAME_LENGTH_WIDTH, f"{what} shared prefix of {name!r}")
            out += pack_uint(len(suffix), NAME_LENGTH_WIDTH, f"{what} suffix length of {name!r}")
            out += suffix
            previous = name
        return bytes(out)


def build_dictionaries(*collections: Iterable[bytes]) -> list[NameDictionary]:
    return [NameDictionary.build(collection) for collection in collections]


def decode_names(cursor: BinaryCursor, count_width: int) -> list[bytes]:
    count = cursor.read_uint(count_width)
    names: list[bytes] = []
    previous = b""
    for _ in range(count):
        common = cursor.read_uint(NAME_LENGTH_WIDTH)
        suffix = cursor.read_bytes(cursor.read_uint(NAME_LENGTH_WIDTH))
        name = previous[:common] + suffix
        names.append(name)
        previous = name
    return names
