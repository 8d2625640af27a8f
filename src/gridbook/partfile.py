import struct
from typing import List, Optional

import snappy
from google.protobuf.internal.decoder import _DecodeVarint32
from google.protobuf.internal.encoder import _VarintBytes
from google.protobuf.json_format import MessageToDict, ParseDict
from google.protobuf.message import DecodeError
from google.protobuf.struct_pb2 import Struct

from gridbook.constants import MAX_CHUNK_SIZE


def is_part_file(blob: bytes) -> bool:
    """bool: ``True`` if the blob starts like a compressed part."""
    return len(blob) >= 4 and blob[0] == 0x00


class PartFile:
    """A document part: a list of messages, each a dict of JSON-like values.

    On disk a part is a sequence of chunks, each a zero byte, a 3-byte
    little-endian length and a snappy-compressed payload. The uncompressed
    data is a sequence of varint length-prefixed ``google.protobuf.Struct``
    messages.
    """

    def __init__(self, messages: List[dict], filename: Optional[str] = None):
        self.messages = messages
        self.filename = filename

    def __eq__(self, other):
        return self.messages == other.messages  # pragma: no cover

    @property
    def message(self) -> dict:
        """dict: The first message in the part."""
        if not self.messages:
            raise ValueError(f"{self.filename}: part contains no messages")
        return self.messages[0]

    @classmethod
    def _decompress_all(cls, data: bytes):
        while data:
            header = data[:4]
            if len(header) < 4:
                raise ValueError("truncated chunk header")
            if header[0] != 0x00:
                raise ValueError("chunk does not start with 0x00! (found %x)" % header[0])

            length = struct.unpack_from("<I", bytes(header[1:]) + b"\x00")[0]
            chunk = data[4 : 4 + length]
            if len(chunk) != length:
                raise ValueError("truncated chunk")
            data = data[4 + length :]
            yield snappy.uncompress(chunk)

    @classmethod
    def from_buffer(cls, data: bytes, filename: Optional[str] = None):
        try:
            data = b"".join(cls._decompress_all(data))
            messages = []
            while data:
                (length, pos) = _DecodeVarint32(data, 0)
                if pos + length > len(data):
                    raise ValueError("truncated message")
                message = Struct()
                message.ParseFromString(data[pos : pos + length])
                messages.append(MessageToDict(message))
                data = data[pos + length :]
            return cls(messages, filename)
        except (IndexError, ValueError, DecodeError, snappy.UncompressError) as e:
            if filename:
                raise ValueError("Failed to deserialize " + filename) from e
            else:
                raise ValueError("Failed to deserialize part") from e

    @classmethod
    def from_dict(cls, _dict: dict, filename: Optional[str] = None):
        return cls(list(_dict["messages"]), filename)

    def to_dict(self) -> dict:
        return {"messages": self.messages}

    def to_buffer(self) -> bytes:
        segments = []
        for message in self.messages:
            data = ParseDict(message, Struct()).SerializeToString()
            segments.append(_VarintBytes(len(data)) + data)
        uncompressed = b"".join(segments)

        payloads = []
        while uncompressed:
            payloads.append(snappy.compress(uncompressed[:MAX_CHUNK_SIZE]))
            uncompressed = uncompressed[MAX_CHUNK_SIZE:]
        return b"".join(
            [b"\x00" + struct.pack("<I", len(payload))[:3] + payload for payload in payloads]
        )
