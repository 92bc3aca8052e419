"""Data models for render_charts pipeline stage."""

from dataclasses import dataclass

CHART_KINDS = ("bar", "line", "scatter")


@dataclass(frozen=True)
class ChartSpec:
    """What to draw: chart kind, the record fields on each axis, and a title."""
    kind: str
    x: str
    y: str
    title: str
    x_label: str | None = None
    y_label: str | None = None

    def __post_init__(self) -> None:
        if self.kind not in CHART_KINDS:
            raise ValueError(f"Invalid chart kind: {self.kind}. Must be one of {list(CHART_KINDS)}")
