"""
Export helpers for spreadsheet and BI analysis.

All functions write to disk and return the written ``Path``.
They accept generic ``list[dict]`` data to stay decoupled from
specific report shapes.

CSV exports are flat (no nested dicts) so they load directly in Excel,
Power BI, or pandas without any pre-processing step.

``flatten_trajectory()`` is the main adapter function: it converts the
history and projection of a ``Projection`` into one row per month with a
``kind`` column (``"actual"`` / ``"projected"``).
"""

from __future__ import annotations

import csv
import json
from pathlib import Path

from commitment_forecaster.models.projection import Projection

TRAJECTORY_COLUMNS: list[str] = [
    "month", "kind", "consumed", "projected", "cumulative", "run_rate",
    "commitment", "currency",
]


def export_to_csv(
    records: list[dict],
    path: Path,
    fieldnames: list[str] | None = None,
) -> Path:
    """Write ``records`` to a UTF-8 CSV file.

    Args:
        records:    List of row dicts.
        path:       Destination file path (parent dirs created if missing).
        fieldnames: Column order.  If None, uses the keys of the first record.

    Returns:
        ``path`` as written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    if not records:
        path.write_text("", encoding="utf-8")
        return path
    cols = fieldnames or list(records[0].keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=cols, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(records)
    return path


def export_to_json(
    data: dict | list,
    path: Path,
) -> Path:
    """Write ``data`` to a pretty-printed JSON file.

    Args:
        data: Dict or list to serialise.
        path: Destination file path (parent dirs created if missing).

    Returns:
        ``path`` as written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, default=str), encoding="utf-8")
    return path


def flatten_trajectory(projection: Projection) -> list[dict]:
    """One flat row per month of the full trajectory, amounts rounded to cents."""
    commitment = projection.commitment
    rows: list[dict] = []
    for kind, series in (
        ("actual", projection.consumption_history),
        ("projected", projection.projected_consumption),
    ):
        for point in series:
            rows.append({
                "month":      point.month,
                "kind":       kind,
                "consumed":   round(point.consumed, 2),
                "projected":  round(point.projected, 2),
                "cumulative": round(point.cumulative, 2),
                "run_rate":   round(point.run_rate, 2),
                "commitment": commitment.total_commitment,
                "currency":   commitment.currency,
            })
    return rows


def write_projection_reports(projection: Projection, output_dir: Path, stem: str) -> list[Path]:
    """Write ``<stem>_trajectory.csv`` and ``<stem>_projection.json``.

    Returns:
        Paths written, CSV first.
    """
    csv_path = export_to_csv(
        flatten_trajectory(projection),
        output_dir / f"{stem}_trajectory.csv",
        fieldnames=TRAJECTORY_COLUMNS,
    )
    json_path = export_to_json(
        projection.model_dump(mode="json"),
        output_dir / f"{stem}_projection.json",
    )
    return [csv_path, json_path]
