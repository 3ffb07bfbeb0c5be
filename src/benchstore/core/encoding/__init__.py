"""Encoders for persisted benchmark documents."""

from benchstore.core.encoding.json_codec import (
    branch_file_name,
    decode_entries,
    decode_entry,
    encode_entries,
    encode_entry,
    sanitize_branch_name,
)

__all__ = [
    "branch_file_name",
    "decode_entries",
    "decode_entry",
    "encode_entries",
    "encode_entry",
    "sanitize_branch_name",
]
