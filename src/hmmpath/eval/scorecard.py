from __future__ import annotations

import csv
import json
import math
from pathlib import Path
from typing import Any, Dict, List


def aggregate(results: List[Dict[str, Any]]) -> Dict[str, float]:
    """Mean of every numeric column except ``id``."""
    if not results:
        return {}
    keys = [k for k in results[0] if k != "id"]
    return {k: float(sum(r[k] for r in results) / len(results)) for k in keys}


def _json_safe(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def write_scorecard(
    path_json: Path,
    path_csv: Path,
    rows: List[Dict[str, Any]],
    summary: Dict[str, Any],
    metadata: Dict[str, Any] | None = None,
) -> None:
    payload = {
        "results": [{k: _json_safe(v) for k, v in row.items()} for row in rows],
        "summary": {k: _json_safe(v) for k, v in summary.items()},
    }
    if metadata:
        payload["metadata"] = metadata
    path_json.parent.mkdir(parents=True, exist_ok=True)
    path_json.write_text(json.dumps(payload, indent=2, sort_keys=True))

    fieldnames = list(rows[0].keys()) if rows else []
    path_csv.parent.mkdir(parents=True, exist_ok=True)
    with open(path_csv, "w", newline="") as handle:
        writer = csv.DictWriter(handle, fieldnames=fieldnames)
        if fieldnames:
            writer.writeheader()
            writer.writerows(rows)


def read_scorecard(path_json: Path) -> Dict[str, Any]:
    return json.loads(path_json.read_text())
