"""Render summary tables as static (matplotlib) or interactive (plotly) charts."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Sequence

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import plotly.graph_objects as go  # noqa: E402

from common.utils import get_value  # noqa: E402
from render_charts.models import ChartSpec  # noqa: E402

logger = logging.getLogger(__name__)


def _extract(rows: Sequence[Any], spec: ChartSpec) -> tuple[list[Any], list[Any]]:
    xs = [get_value(row, spec.x) for row in rows]
    ys = [get_value(row, spec.y) for row in rows]
    if all(x is None for x in xs):
        raise ValueError(f"Field {spec.x!r} not found in rows")
    if all(y is None for y in ys):
        raise ValueError(f"Field {spec.y!r} not found in rows")
    return xs, ys


def _render_static(xs: list[Any], ys: list[Any], spec: ChartSpec, path: Path) -> Path:
    fig, ax = plt.subplots(figsize=(10, 6))
    try:
        if spec.kind == "bar":
            ax.bar([str(x) for x in xs], ys, color="#1f77b4")
            ax.axhline(0, color="black", linewidth=0.8)
        elif spec.kind == "line":
            ax.plot(xs, ys, marker="o", linewidth=1.5)
        else:
            ax.scatter(xs, ys, alpha=0.6)

        ax.set_title(spec.title)
        ax.set_xlabel(spec.x_label or spec.x)
        ax.set_ylabel(spec.y_label or spec.y)
        ax.tick_params(axis="x", labelrotation=45)
        fig.tight_layout()
        fig.savefig(path, dpi=150)
    finally:
        plt.close(fig)
    return path


def _render_interactive(xs: list[Any], ys: list[Any], spec: ChartSpec, path: Path) -> Path:
    if spec.kind == "bar":
        trace = go.Bar(x=[str(x) for x in xs], y=ys)
    elif spec.kind == "line":
        trace = go.Scatter(x=xs, y=ys, mode="lines+markers")
    else:
        trace = go.Scatter(x=xs, y=ys, mode="markers", opacity=0.6)

    fig = go.Figure(data=[trace])
    fig.update_layout(
        title=spec.title,
        xaxis_title=spec.x_label or spec.x,
        yaxis_title=spec.y_label or spec.y,
        template="plotly_white",
    )
    fig.write_html(str(path), include_plotlyjs="cdn")
    return path


def render_chart(
    rows: Sequence[Any],
    spec: ChartSpec,
    output_path: str | Path,
    interactive: bool = False,
) -> Path:
    """
    Draw rows according to spec and write the chart to disk.

    Args:
        rows: Records (dataclasses or dicts) holding the spec.x and spec.y fields.
        spec: Chart kind, axis fields and title.
        output_path: Destination; the suffix is forced to .png (static) or .html (interactive).
        interactive: Write an interactive plotly HTML file instead of a PNG.

    Returns:
        Path of the written file.
    """
    if not rows:
        raise ValueError(f"No rows to render for chart {spec.title!r}")

    xs, ys = _extract(rows, spec)
    path = Path(output_path).with_suffix(".html" if interactive else ".png")
    path.parent.mkdir(parents=True, exist_ok=True)

    if interactive:
        _render_interactive(xs, ys, spec, path)
    else:
        _render_static(xs, ys, spec, path)

    logger.info("Rendered %s chart %r to %s", spec.kind, spec.title, path)
    return path
