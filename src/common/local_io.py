"""Local file I/O utilities."""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Any

from common.serialization import serialize_dataclass

logger = logging.getLogger(__name__)


def save_jsonl_records_local(
    records: list[Any],
    name: str,
    output_dir: str | Path = "output",
) -> Path:
    """
    Save a list of dataclass records to a local JSONL file.

    Args:
        records: List of dataclass objects to save
        name: File name without extension (e.g., "document_topics")
        output_dir: Directory to save to (default: "output")

    Returns:
        Path to the created file.
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)
    filepath = output_path / f"{name}.jsonl"

    with filepath.open("w", encoding="utf-8") as f:
        for record in records:
            serialized = serialize_dataclass(record)
            f.write(json.dumps(serialized, default=str, ensure_ascii=False) + "\n")

    logger.info("Saved %d records to %s", len(records), filepath)
    return filepath


def save_csv_records_local(
    records: list[Any],
    name: str,
    output_dir: str | Path = "output",
    columns: list[str] | None = None,
) -> Path:
    """
    Save a list of dataclass records to a local CSV file.

    Column order follows `columns` when given, otherwise the dataclass field
    order of the first record. An empty record list writes a header-only file
    when `columns` is given and an empty file otherwise.
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)
    filepath = output_path / f"{name}.csv"

    rows = [serialize_dataclass(record) for record in records]
    fieldnames = columns or (list(rows[0].keys()) if rows else [])

    with filepath.open("w", newline="", encoding="utf-8") as f:
        if fieldnames:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            writer.writerows(rows)

    logger.info("Saved %d records to %s", len(records), filepath)
    return filepath
