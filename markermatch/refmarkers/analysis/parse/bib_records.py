from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any


class RecordFormatError(ValueError):
    pass


@dataclass(frozen=True)
class BibRecord:
    raw: str
    label: str | None
    authors: str
    year: int | str | None
    record_id: str


def author_key(record: BibRecord) -> str:
    key = f"{record.authors} et al"
    if record.year is not None and str(record.year).strip():
        key += f" {record.year}"
    return key


def label_key(record: BibRecord) -> str:
    return record.label or ""


def _opt_str(item: dict[str, Any], name: str, index: int) -> str | None:
    value = item.get(name)
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(int(value)) if float(value).is_integer() else str(value)
    if not isinstance(value, str):
        raise RecordFormatError(f"Record {index}: {name!r} must be a string.")
    return value.strip() or None


def records_from_json(data: Any) -> list[BibRecord]:
    if not isinstance(data, list):
        raise RecordFormatError("Bibliography records must be a JSON array.")
    out: list[BibRecord] = []
    for i, item in enumerate(data):
        if not isinstance(item, dict):
            raise RecordFormatError(f"Record {i}: expected an object, got {type(item).__name__}.")
        raw = item.get("raw")
        if not isinstance(raw, str) or not raw.strip():
            raise RecordFormatError(f"Record {i}: missing 'raw' text.")

        year: int | str | None = None
        year_raw = _opt_str(item, "year", i)
        if year_raw:
            year = int(year_raw) if year_raw.isdigit() else year_raw

        out.append(
            BibRecord(
                raw=raw,
                label=_opt_str(item, "label", i),
                authors=_opt_str(item, "authors", i) or "",
                year=year,
                record_id=_opt_str(item, "id", i) or f"ref-{i + 1}",
            )
        )
    return out


def load_records(path: str | Path) -> list[BibRecord]:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise RecordFormatError(f"{path}: not valid UTF-8 (byte {e.start}).") from e
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise RecordFormatError(f"{path}: invalid JSON ({e.msg} at line {e.lineno}).") from e
    return records_from_json(data)
