"""
Disaster types chart view.

`ChartView` owns the selected year and sort mode, the bars currently on
screen, and the scales they were drawn with. Every state change goes through
`dispatch`, which recomputes the visible slice and performs exactly one
render pass.

Bars are keyed by disaster type. On an animated pass:
- bars already on screen move from their previous geometry to the new one,
- new bars grow from the baseline,
- bars no longer visible shrink to the baseline and are then dropped.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Sequence, Tuple, Union

import pandas as pd

from disaster_bars.data_pipeline.aggregate_types import VALUE_COL
from disaster_bars.data_pipeline.preprocess_disasters import TYPE_COL, YEAR_COL
from disaster_bars.utils.plot_utils import BAND_PADDING, BandScale, LinearScale, plot_rect
from disaster_bars.utils.style_config import category_colors

SORT_NONE = "none"
SORT_ASC = "cntAsce"
SORT_DESC = "cntDesc"
SORT_MODES = {
    SORT_NONE: "None",
    SORT_ASC: "Count (ascending)",
    SORT_DESC: "Count (descending)",
}

ENTER, UPDATE, EXIT = "enter", "update", "exit"


@dataclass(frozen=True)
class ViewState:
    year: int
    sort_mode: str = SORT_NONE


@dataclass(frozen=True)
class YearChanged:
    year: int


@dataclass(frozen=True)
class SortChanged:
    sort_mode: str


@dataclass(frozen=True)
class Bar:
    """One rectangle in canvas pixels. `shown` is the count its height represents."""
    disaster_type: str
    value: int
    shown: float
    x: float
    y: float
    width: float
    height: float
    fill: str

    @property
    def tooltip(self) -> str:
        return f"{self.disaster_type}: {self.value} disasters"


@dataclass
class BarTransition:
    phase: str
    start: Bar
    end: Bar

    @property
    def key(self) -> str:
        return self.end.disaster_type


@dataclass
class RenderPass:
    """Result of one render: scales, per-bar transitions and whether to animate."""
    state: ViewState
    x_scale: BandScale
    y_scale: LinearScale
    transitions: List[BarTransition]
    animated: bool
    previous_scales: Optional[Tuple[BandScale, LinearScale]] = None

    def _phase(self, phase: str) -> List[BarTransition]:
        return [t for t in self.transitions if t.phase == phase]

    @property
    def entering(self) -> List[BarTransition]:
        return self._phase(ENTER)

    @property
    def updating(self) -> List[BarTransition]:
        return self._phase(UPDATE)

    @property
    def exiting(self) -> List[BarTransition]:
        return self._phase(EXIT)

    def start_bars(self) -> List[Bar]:
        return [t.start for t in self.transitions]

    def end_bars(self) -> List[Bar]:
        return [t.end for t in self.transitions]


def sort_slice(visible: pd.DataFrame, sort_mode: str) -> pd.DataFrame:
    """Stable sort by count; any other mode keeps the incoming order."""
    if sort_mode == SORT_ASC:
        return visible.sort_values(VALUE_COL, ascending=True, kind="mergesort")
    if sort_mode == SORT_DESC:
        return visible.sort_values(VALUE_COL, ascending=False, kind="mergesort")
    return visible


def visible_slice(metric: pd.DataFrame, year: int, sort_mode: str) -> pd.DataFrame:
    """Rows for `year` projected to (Disaster Type, Count), ordered per `sort_mode`."""
    rows = metric.loc[metric[YEAR_COL] == year, [TYPE_COL, VALUE_COL]]
    return sort_slice(rows, sort_mode).reset_index(drop=True)


def y_domain(visible: pd.DataFrame) -> Tuple[int, int]:
    top = int(visible[VALUE_COL].max()) if len(visible) else 0
    return 0, max(top, 1)


@dataclass(eq=False)
class ChartView:
    metric: pd.DataFrame = field(default_factory=pd.DataFrame)
    categories: List[str] = field(default_factory=list)
    colors: Dict[str, str] = field(default_factory=dict)
    state: Optional[ViewState] = None
    visible: pd.DataFrame = field(default_factory=pd.DataFrame)
    bars: Dict[str, Bar] = field(default_factory=dict)
    scales: Optional[Tuple[BandScale, LinearScale]] = None

    def initialize(self, metric_rows: pd.DataFrame, categories: Sequence[str],
                   year: int, sort_mode: str = SORT_NONE) -> RenderPass:
        """Bind the data and draw the first (non-animated) chart for the controls' current values."""
        self.metric = metric_rows
        self.categories = list(categories)
        self.colors = category_colors(self.categories)
        self.state = ViewState(int(year), sort_mode)
        self.bars = {}
        self.scales = None
        self.visible = visible_slice(self.metric, self.state.year, self.state.sort_mode)
        return self.render(animated=False)

    def on_year_change(self, year: int) -> RenderPass:
        return self.dispatch(YearChanged(int(year)))

    def on_sort_change(self, sort_mode: str) -> RenderPass:
        return self.dispatch(SortChanged(sort_mode))

    def dispatch(self, event: Union[YearChanged, SortChanged]) -> RenderPass:
        if self.state is None:
            raise RuntimeError("ChartView.initialize must be called before dispatching events")
        if isinstance(event, YearChanged):
            self.state = replace(self.state, year=event.year)
        elif isinstance(event, SortChanged):
            self.state = replace(self.state, sort_mode=event.sort_mode)
        else:
            raise TypeError(f"Unsupported chart event: {event!r}")

        self.visible = visible_slice(self.metric, self.state.year, self.state.sort_mode)
        return self.render(animated=True)

    def color(self, disaster_type: str) -> str:
        return self.colors.get(disaster_type, "#9E9E9E")

    def _scales(self) -> Tuple[BandScale, LinearScale]:
        rect = plot_rect()
        x_scale = BandScale(self.visible[TYPE_COL].tolist(), (rect["left"], rect["right"]), BAND_PADDING)
        y_scale = LinearScale(y_domain(self.visible), (rect["bottom"], rect["top"]))
        return x_scale, y_scale

    def _bar(self, disaster_type: str, value: int, shown: float,
             x_scale: BandScale, y_scale: LinearScale) -> Bar:
        return Bar(
            disaster_type=disaster_type,
            value=value,
            shown=shown,
            x=x_scale(disaster_type),
            y=y_scale(shown),
            width=x_scale.bandwidth,
            height=y_scale(0) - y_scale(shown),
            fill=self.color(disaster_type),
        )

    def render(self, animated: bool = True) -> RenderPass:
        x_scale, y_scale = self._scales()
        baseline = y_scale(0)
        transitions: List[BarTransition] = []

        for row in self.visible.itertuples(index=False):
            disaster_type, value = row[0], int(row[1])
            end = self._bar(disaster_type, value, value, x_scale, y_scale)
            previous = self.bars.get(disaster_type)
            if not animated:
                transitions.append(BarTransition(UPDATE if previous else ENTER, end, end))
            elif previous is not None:
                transitions.append(BarTransition(UPDATE, previous, end))
            else:
                start = replace(end, shown=0, y=baseline, height=0)
                transitions.append(BarTransition(ENTER, start, end))

        visible_keys = {t.key for t in transitions}
        if animated:
            for key, previous in self.bars.items():
                if key in visible_keys:
                    continue
                end = replace(previous, shown=0, y=baseline, height=0)
                transitions.append(BarTransition(EXIT, previous, end))

        render_pass = RenderPass(
            state=self.state,
            x_scale=x_scale,
            y_scale=y_scale,
            transitions=transitions,
            animated=animated,
            previous_scales=self.scales,
        )
        # exiting bars are gone once their transition ends
        self.bars = {t.key: t.end for t in transitions if t.phase != EXIT}
        self.scales = (x_scale, y_scale)
        return render_pass
