"""
Export generated records to files.

Tabular formats go through pandas; YAML through PyYAML.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pandas as pd
import yaml

logger = logging.getLogger(__name__)

FORMATS = ("json", "ndjson", "csv", "yaml", "parquet")

EXTENSION_FORMATS = {
    ".json": "json",
    ".ndjson": "ndjson",
    ".jsonl": "ndjson",
    ".csv": "csv",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".parquet": "parquet",
}


def infer_format(path: Union[str, Path]) -> str:
    """Output format from a file extension (json if unknown)."""
    return EXTENSION_FORMATS.get(Path(path).suffix.lower(), "json")


def format_records(records: List[Dict[str, Any]], fmt: str = "json") -> str:
    """
    Render records as text.

    Args:
        records: Generated records
        fmt: json, ndjson, csv or yaml

    Returns:
        Serialized records
    """
    if fmt == "json":
        return json.dumps(records, indent=2, default=str)
    elif fmt == "ndjson":
        return "".join(json.dumps(r, default=str) + "\n" for r in records)
    elif fmt == "csv":
        return pd.DataFrame(records).to_csv(index=False)
    elif fmt == "yaml":
        return yaml.safe_dump(records, sort_keys=False, allow_unicode=True)
    elif fmt == "parquet":
        raise ValueError("parquet is a binary format; use export_records")
    else:
        raise ValueError(f"Unknown output format: {fmt}. Available: {', '.join(FORMATS)}")


def export_records(
    records: List[Dict[str, Any]],
    path: Union[str, Path],
    fmt: Optional[str] = None,
) -> Path:
    """
    Write records to a file.

    Args:
        records: Generated records
        path: Destination file (parent directories are created)
        fmt: Output format (inferred from the extension if None)

    Returns:
        The written path
    """
    path = Path(path)
    fmt = fmt or infer_format(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if fmt == "parquet":
        # Requires pyarrow (pip install gannicus[parquet])
        pd.DataFrame(records).to_parquet(path, index=False)
    else:
        path.write_text(format_records(records, fmt), encoding="utf-8")

    logger.info(f"Wrote {len(records)} records to {path} ({fmt})")
    return path
