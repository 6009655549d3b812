"""
plot_utils.py
-------------
Scales and figure helpers for the disaster types bar chart.

Bars are laid out in canvas pixels (band scale on x, linear scale on y) and
drawn with plotly on a numeric x axis whose range equals the plotting
rectangle, so one data unit on x is one pixel.
"""
from __future__ import annotations

import math
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Tuple

import numpy as np
import plotly.graph_objects as go
import plotly.io as pio

if TYPE_CHECKING:
    from disaster_bars.chart_view import Bar, RenderPass

# Canvas
WIDTH, HEIGHT = 1500, 950
MARGINS = {"top": 10, "right": 10, "bottom": 350, "left": 60}

BAND_PADDING = 0.2
TRANSITION_MS = 1000
EASING = "linear"
TICK_ANGLE = -65
TICK_FONT_SIZE = 15

PLOTLY_CFG = {
    "displaylogo": False,
    "scrollZoom": False,
    "modeBarButtonsToRemove": [
        "zoom", "pan", "zoomIn2d", "zoomOut2d", "autoScale2d", "resetScale2d", "select2d", "lasso2d", "zoom2d"
    ],
}


class BandScale:
    """Categorical band scale: equal inner/outer padding, bands centred in the range."""

    def __init__(self, domain: Sequence[str], range_: Tuple[float, float], padding: float = BAND_PADDING):
        self.domain = list(domain)
        self.range = range_
        self.padding = padding

        start, stop = range_
        n = len(self.domain)
        self.step = (stop - start) / max(1, n - padding + padding * 2)
        self._start = start + (stop - start - self.step * (n - padding)) * 0.5
        self.bandwidth = self.step * (1 - padding)
        self._index = {k: i for i, k in enumerate(self.domain)}

    def __call__(self, key: str) -> Optional[float]:
        i = self._index.get(key)
        if i is None:
            return None
        return self._start + self.step * i

    def centers(self) -> List[float]:
        return [self(k) + self.bandwidth / 2 for k in self.domain]


class LinearScale:
    def __init__(self, domain: Tuple[float, float], range_: Tuple[float, float]):
        self.domain = domain
        self.range = range_

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        return r0 + (value - d0) / (d1 - d0) * (r1 - r0)

    def invert(self, pixel: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        return d0 + (pixel - r0) / (r1 - r0) * (d1 - d0)

    def ticks(self, count: int = 10) -> List[float]:
        """Round tick values covering the domain (1, 2 or 5 times a power of ten)."""
        start, stop = self.domain
        if stop <= start:
            return [start]
        raw = (stop - start) / count
        power = math.floor(math.log10(raw))
        error = raw / 10 ** power
        if error >= math.sqrt(50):
            factor = 10
        elif error >= math.sqrt(10):
            factor = 5
        elif error >= math.sqrt(2):
            factor = 2
        else:
            factor = 1
        step = factor * 10 ** power
        idx = np.arange(math.ceil(start / step), math.floor(stop / step) + 1)
        return [float(round(v, 10)) for v in idx * step]


def plot_rect() -> Dict[str, float]:
    return {
        "left": MARGINS["left"],
        "right": WIDTH - MARGINS["right"],
        "top": MARGINS["top"],
        "bottom": HEIGHT - MARGINS["bottom"],
    }


def _axes_layout(x_scale: BandScale, y_scale: LinearScale) -> Dict:
    rect = plot_rect()
    return {
        "xaxis": dict(
            range=[rect["left"], rect["right"]],
            tickvals=x_scale.centers(),
            ticktext=list(x_scale.domain),
            tickangle=TICK_ANGLE,
            tickfont=dict(size=TICK_FONT_SIZE),
            showgrid=False, zeroline=False, showline=True, ticks="outside", fixedrange=True,
        ),
        "yaxis": dict(
            range=list(y_scale.domain),
            tickvals=y_scale.ticks(),
            tickfont=dict(size=TICK_FONT_SIZE),
            showline=False, zeroline=False, ticks="outside", fixedrange=True,
        ),
    }


def _bar_trace(bars: Sequence["Bar"]) -> go.Bar:
    return go.Bar(
        ids=[b.disaster_type for b in bars],
        x=[b.x + b.width / 2 for b in bars],
        y=[b.shown for b in bars],
        width=[b.width for b in bars],
        base=0,
        marker=dict(color=[b.fill for b in bars], line=dict(width=0)),
        hovertext=[b.tooltip for b in bars],
        hovertemplate="%{hovertext}<extra></extra>",
    )


def build_figure(render_pass: "RenderPass") -> go.Figure:
    """
    Plotly figure for one render pass.

    Animated passes hold the start geometry in `data` and the end geometry in
    a single frame; otherwise the figure shows the end geometry directly.
    """
    if render_pass.animated:
        x0, y0 = render_pass.previous_scales or (render_pass.x_scale, render_pass.y_scale)
        bars, axes = render_pass.start_bars(), _axes_layout(x0, y0)
    else:
        bars, axes = render_pass.end_bars(), _axes_layout(render_pass.x_scale, render_pass.y_scale)

    fig = go.Figure(data=[_bar_trace(bars)])
    fig.update_layout(
        width=WIDTH, height=HEIGHT,
        margin=dict(l=MARGINS["left"], r=MARGINS["right"], t=MARGINS["top"], b=MARGINS["bottom"], autoexpand=False),
        showlegend=False,
        plot_bgcolor="white",
        hovermode="closest",
        **axes,
    )

    if render_pass.animated:
        end_axes = _axes_layout(render_pass.x_scale, render_pass.y_scale)
        fig.frames = [go.Frame(name="end", data=[_bar_trace(render_pass.end_bars())], layout=end_axes)]
    return fig


def animation_opts() -> Dict:
    """Shared time base for every bar and axis in a transition."""
    return {
        "frame": {"duration": TRANSITION_MS, "redraw": False},
        "transition": {"duration": TRANSITION_MS, "easing": EASING},
        "mode": "immediate",
    }


def figure_html(fig: go.Figure, animated: bool) -> str:
    """Standalone HTML snippet; animated figures play their frame on load."""
    return pio.to_html(
        fig,
        config=PLOTLY_CFG,
        auto_play=animated,
        include_plotlyjs="cdn",
        full_html=False,
        animation_opts=animation_opts() if animated else None,
        default_width=f"{WIDTH}px",
        default_height=f"{HEIGHT}px",
    )
