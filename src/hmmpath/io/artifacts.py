"""Artifact writing utilities."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping, Sequence

import numpy as np

from hmmpath.decode.decoder import ViterbiTrellis
from hmmpath.model.hmm import Model


def save_trellis(trellis: ViterbiTrellis, path: Path, *, state_names: Sequence[str]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    np.savez_compressed(
        path,
        sequence_probability=trellis.sequence_probability,
        prev_seq_state=trellis.prev_seq_state,
        metadata=json.dumps({"state_names": list(state_names)}),
    )


def load_trellis(path: Path) -> ViterbiTrellis:
    with np.load(path) as data:
        return ViterbiTrellis(
            sequence_probability=np.array(data["sequence_probability"]),
            prev_seq_state=np.array(data["prev_seq_state"]),
        )


def path_payload(model: Model, path: Sequence[int], steps: Sequence[int], probability: float) -> dict[str, Any]:
    """JSON-ready description of a decoded path."""

    return {
        "n_steps": len(path),
        "path_probability": probability,
        "state_index": model.states.to_dict(),
        "states": [
            {"step": int(step), "index": int(idx), "name": model.state_name(int(idx))}
            for step, idx in zip(steps, path)
        ],
    }


def save_json(data: Any, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2))


def save_path(payload: Mapping[str, Any], out_dir: Path, stem: str) -> Path:
    """Write a decoded path under ``<out_dir>/<stem>_path.json``."""

    path = out_dir / f"{stem}_path.json"
    save_json(dict(payload), path)
    return path
