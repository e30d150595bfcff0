"""
CSV export.

Rows are rendered the way the browser dashboards download them: the header
is the keys of the first row, every cell is the JSON encoding of its value
(missing values become the empty string "") and rows are joined by "\\n".
"""

import json
import logging
import math
import os
from datetime import datetime
from typing import Dict, List

import pandas as pd

from src.models.suggestion import Suggestion
from src.utils.timeutils import format_relative

logger = logging.getLogger(__name__)


def _json_cell(value) -> str:
    if value is None or (isinstance(value, float) and math.isnan(value)):
        value = ""
    elif hasattr(value, "item") and not isinstance(value, (list, dict, str)):
        # numpy scalar
        value = value.item()
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def to_csv_text(rows: List[Dict]) -> str:
    """
    Render rows as CSV text.

    Args:
        rows: Row dicts; columns come from the first row

    Returns:
        CSV text with len(rows) + 1 lines, or "" when there are no rows
    """
    if not rows:
        return ""

    keys = list(rows[0].keys())
    frame = pd.DataFrame(rows, columns=keys, dtype=object)
    cells = frame.map(_json_cell)

    lines = [",".join(keys)]
    lines.extend(",".join(row) for row in cells.itertuples(index=False, name=None))
    return "\n".join(lines)


def review_queue_rows(suggestions: List[Suggestion], now: datetime) -> List[Dict]:
    """Admin review queue rows, with creation time as relative text."""
    return [
        {
            "id": s.id,
            "title": s.title,
            "status": s.status.value,
            "category": s.category,
            "author": s.author.name,
            "department": s.author.department,
            "createdAt": format_relative(s.created_at, now),
            "votes": s.votes,
            "comments": s.comments,
        }
        for s in suggestions
    ]


def save_csv(text: str, filepath: str) -> str:
    """
    Write CSV text to a file, creating parent directories.

    Returns:
        The written path
    """
    directory = os.path.dirname(filepath)
    if directory:
        os.makedirs(directory, exist_ok=True)

    try:
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(text)
        logger.info(f"Saved CSV export to {filepath}")
        return filepath
    except OSError as e:
        logger.error(f"Failed to save CSV export to {filepath}: {e}")
        raise


def export_tables(tables: Dict[str, List[Dict]], directory: str) -> List[str]:
    """
    Write one CSV file per table into directory.

    Args:
        tables: Row lists keyed by file stem
        directory: Output directory

    Returns:
        Paths written
    """
    paths = []
    for name, rows in tables.items():
        paths.append(save_csv(to_csv_text(rows), os.path.join(directory, f"{name}.csv")))
    return paths
