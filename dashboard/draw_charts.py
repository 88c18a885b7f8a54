# dashboard/draw_charts.py - Plotly chart helpers
# What it does:
# - pie_chart(): chart payload -> pie with the dataset's colour list
# - bar_chart(): chart payload -> bar with labels on X and counts on Y
# - line_chart(): chart payload -> single line series
# - chart_figure(): one of the dashboard charts, straight from filtered records
# Every drawer takes the {"labels", "datasets"} payload from chart_data.py.

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from dashboard.chart_data import CHARTS_BY_KEY, build_chart


def _series(data: dict):
    dataset = data["datasets"][0] if data.get("datasets") else {}
    return data.get("labels", []), dataset.get("data", []), dataset


def _no_data(title: str) -> go.Figure:
    return px.scatter(title=f"{title} (no data)")


def pie_chart(data: dict, title: str) -> go.Figure:
    labels, values, dataset = _series(data)
    if not labels:
        return _no_data(title)
    colors = dataset.get("backgroundColor")
    fig = px.pie(
        names=labels,
        values=values,
        title=title,
        color_discrete_sequence=colors if isinstance(colors, list) else None,
    )
    fig.update_traces(sort=False)
    return fig


def bar_chart(data: dict, title: str) -> go.Figure:
    """
    Labels keep the order they arrive in (already ranked by top_n),
    so the category axis is pinned to that order.
    """
    labels, values, dataset = _series(data)
    if not labels:
        return _no_data(title)
    fig = px.bar(x=labels, y=values, title=title)
    fig.update_traces(marker_color=dataset.get("backgroundColor"), name=dataset.get("label", ""))
    fig.update_layout(
        xaxis_title="",
        yaxis_title=dataset.get("label", "Count"),
        yaxis_rangemode="tozero",
        xaxis={"categoryorder": "array", "categoryarray": labels},
        bargap=0.2,
    )
    return fig


def line_chart(data: dict, title: str) -> go.Figure:
    labels, values, dataset = _series(data)
    if not labels:
        return _no_data(title)
    fig = px.line(x=labels, y=values, markers=True, title=title)
    fig.update_traces(line_color=dataset.get("borderColor"), name=dataset.get("label", ""))
    fig.update_layout(
        xaxis_title="",
        yaxis_title="Count",
        yaxis_rangemode="tozero",
        xaxis={"type": "category"},
    )
    return fig


DRAWERS = {"pie": pie_chart, "bar": bar_chart, "line": line_chart}


def draw(kind: str, data: dict, title: str) -> go.Figure:
    return DRAWERS[kind](data, title)


def chart_figure(key: str, records: pd.DataFrame) -> go.Figure:
    spec = CHARTS_BY_KEY[key]
    return draw(spec.kind, build_chart(spec, records), spec.title)
