"""
Record list serialization.

The persisted form is a UTF-8 JSON array of record objects keyed by wire names.

Design constraints
------------------
- Serialization is deterministic for a given in-memory list.
- Order is preserved; the array order is the display order.
- Decoding accepts payloads written by earlier releases (``dob`` key, no ``id``).
"""

from __future__ import annotations

import json
from typing import Iterable

from .data_models import ProfileRecord
from .errors import RecordCodecError


def encode_records(records: Iterable[ProfileRecord]) -> bytes:
    """
    Serialize records to bytes.

    Parameters
    ----------
    records:
        Records in display order.

    Returns
    -------
    bytes
        UTF-8 encoded JSON array.
    """
    payload = [record.to_dict() for record in records]
    return json.dumps(payload, sort_keys=True, ensure_ascii=False).encode("utf-8")


def decode_records(data: bytes) -> list[ProfileRecord]:
    """
    Deserialize records from bytes.

    Parameters
    ----------
    data:
        Bytes previously produced by :func:`encode_records` (or a legacy payload).

    Returns
    -------
    list[ProfileRecord]
        Decoded records in stored order.

    Raises
    ------
    RecordCodecError
        If the payload is not valid UTF-8 JSON, is not an array, or contains an
        item that is not a complete record object.
    """
    try:
        payload = json.loads(data.decode("utf-8"))
    except UnicodeDecodeError as exc:
        raise RecordCodecError("Record payload is not valid UTF-8") from exc
    except json.JSONDecodeError as exc:
        raise RecordCodecError(f"Record payload is not valid JSON: {exc.msg}") from exc

    if not isinstance(payload, list):
        raise RecordCodecError("Record payload must be a JSON array")

    records: list[ProfileRecord] = []
    for index, item in enumerate(payload):
        if not isinstance(item, dict):
            raise RecordCodecError(f"Record #{index} is not an object")
        try:
            records.append(ProfileRecord.from_dict(item))
        except ValueError as exc:
            raise RecordCodecError(f"Record #{index}: {exc}") from exc
    return records
