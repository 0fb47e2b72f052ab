"""An entity: a code shared by a cluster of matching records."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import BinaryIO, Optional

_U32 = struct.Struct("<I")


def _read_exact(stream: BinaryIO, count: int) -> bytes:
    data = stream.read(count)
    if len(data) < count:
        raise EOFError("truncated entities file")
    return data


def _read_u32(stream: BinaryIO) -> int:
    (value,) = _U32.unpack(_read_exact(stream, _U32.size))
    return value


@dataclass
class Entity:
    """An entity code and the IDs of the records that match it."""

    id: int = 0
    code: Optional[str] = None
    matching_records: list[int] = field(default_factory=list)

    @property
    def num_matching_records(self) -> int:
        """Number of records in the entity's cluster."""
        return len(self.matching_records)

    def add_matching_record(self, record_id: int) -> None:
        """Add a record ID to the cluster."""
        self.matching_records.append(record_id)

    def write(self, stream: BinaryIO) -> None:
        """Store the entity in binary form."""
        encoded = self.code.encode("utf-8", "surrogateescape") if self.code else b""
        stream.write(_U32.pack(self.id))
        stream.write(_U32.pack(len(encoded)))
        stream.write(encoded)
        stream.write(_U32.pack(len(self.matching_records)))
        stream.write(struct.pack(f"<{len(self.matching_records)}I", *self.matching_records))

    @classmethod
    def read(cls, stream: BinaryIO) -> "Entity":
        """Load an entity stored by :meth:`write`; raise EOFError if truncated."""
        entity_id = _read_u32(stream)
        length = _read_u32(stream)
        code = (
            _read_exact(stream, length).decode("utf-8", "surrogateescape")
            if length
            else None
        )
        count = _read_u32(stream)
        records = list(struct.unpack(f"<{count}I", _read_exact(stream, 4 * count)))
        return cls(id=entity_id, code=code, matching_records=records)

    def display(self) -> None:
        """Print the entity and its matching record IDs."""
        code = self.code if self.code is not None else "(null)"
        ids = "".join(f"{r}, " for r in self.matching_records)
        print("==================")
        print(f"Displaying Entity with ID: {self.id} ")
        print(f"\tID: {self.id}, Matching Records: {self.num_matching_records}, Code: {code}")
        print(f"\tMatching_record IDs: {ids}")