"""Execution parameters shared by index construction and query processing."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import BinaryIO, Optional

_LENGTH = struct.Struct("<I")
# num_req_results, index_type, min/max term length, lexicon table size,
# compression block size, query algorithm, index_type again, two flags,
# then the similarity bounds as 32-bit floats.
_TAIL = struct.Struct("<8I??ff")


def _read_exact(stream: BinaryIO, count: int) -> bytes:
    data = stream.read(count)
    if len(data) < count:
        raise EOFError("truncated parameters file")
    return data


def _write_string(stream: BinaryIO, value: Optional[str]) -> None:
    encoded = value.encode("utf-8", "surrogateescape") if value else b""
    stream.write(_LENGTH.pack(len(encoded)))
    stream.write(encoded)


def _read_string(stream: BinaryIO) -> Optional[str]:
    (length,) = _LENGTH.unpack(_read_exact(stream, _LENGTH.size))
    if length == 0:
        return None
    return _read_exact(stream, length).decode("utf-8", "surrogateescape")


@dataclass
class InputParams:
    """Parameters of an index build or a query run.

    The server host and port are kept in memory only; everything else is
    stored by :meth:`write`.  Empty strings are stored as absent values.
    """

    input_data_file: Optional[str] = None
    random_string: Optional[str] = None
    output_dir: Optional[str] = None
    server_host: Optional[str] = None
    server_port: Optional[str] = None
    num_req_results: int = 0
    query_processing_algorithm: int = 0
    index_type: int = 0
    min_term_length: int = 0
    max_term_length: int = 0
    lexicon_table_size: int = 0
    compression_block_size: int = 0
    handle_hyphens: bool = False
    handle_slashes: bool = False
    min_sim: float = 0.0
    max_sim: float = 0.0

    def write(self, stream: BinaryIO) -> None:
        """Store the parameters in binary form."""
        _write_string(stream, self.input_data_file)
        _write_string(stream, self.random_string)
        _write_string(stream, self.output_dir)
        stream.write(
            _TAIL.pack(
                self.num_req_results,
                self.index_type,
                self.min_term_length,
                self.max_term_length,
                self.lexicon_table_size,
                self.compression_block_size,
                self.query_processing_algorithm,
                self.index_type,
                bool(self.handle_hyphens),
                bool(self.handle_slashes),
                self.min_sim,
                self.max_sim,
            )
        )

    @classmethod
    def read(cls, stream: BinaryIO) -> "InputParams":
        """Load parameters stored by :meth:`write`; raise EOFError if truncated."""
        input_data_file = _read_string(stream)
        random_string = _read_string(stream)
        output_dir = _read_string(stream)
        (
            num_req_results,
            _,
            min_term_length,
            max_term_length,
            lexicon_table_size,
            compression_block_size,
            query_processing_algorithm,
            index_type,
            handle_hyphens,
            handle_slashes,
            min_sim,
            max_sim,
        ) = _TAIL.unpack(_read_exact(stream, _TAIL.size))
        return cls(
            input_data_file=input_data_file,
            random_string=random_string,
            output_dir=output_dir,
            num_req_results=num_req_results,
            query_processing_algorithm=query_processing_algorithm,
            index_type=index_type,
            min_term_length=min_term_length,
            max_term_length=max_term_length,
            lexicon_table_size=lexicon_table_size,
            compression_block_size=compression_block_size,
            handle_hyphens=handle_hyphens,
            handle_slashes=handle_slashes,
            min_sim=min_sim,
            max_sim=max_sim,
        )