"""
Plotly chart builders for the dashboard.
"""
import plotly.express as px
import plotly.graph_objects as go
import pandas as pd


# =============================================================================
# THEME
# =============================================================================

PALETTE = {
    "hours": "#3b6ea5",
    "cost": "#d9822b",
    "revenue": "#2e8b57",
}

BASE_LAYOUT = {
    "template": "plotly_white",
    "font": {"size": 12},
    "margin": {"l": 40, "r": 20, "t": 50, "b": 40},
    "legend": {"orientation": "h", "y": -0.15},
}


def styled(fig: go.Figure, **overrides) -> go.Figure:
    """Dashboard layout defaults, overridable per chart."""
    fig.update_layout(**{**BASE_LAYOUT, **overrides})
    return fig


# =============================================================================
# HOURS
# =============================================================================

def horizontal_bar(df: pd.DataFrame, x: str, y: str,
                   title: str = "", max_bars: int = 20) -> go.Figure:
    """Longest `max_bars` rows of an hours frame already sorted descending."""
    top = df.head(max_bars)
    fig = px.bar(
        top, x=x, y=y, orientation="h", title=title,
        text=top[x].round(1),
        color_discrete_sequence=[PALETTE["hours"]],
    )
    fig.update_traces(textposition="outside", cliponaxis=False)
    fig.update_yaxes(categoryorder="total ascending", title=None)
    fig.update_xaxes(title="Hours")
    return styled(fig, height=max(300, 28 * len(top) + 80))


def hours_pie(df: pd.DataFrame, names: str, values: str = "hours",
              title: str = "", max_slices: int = 10) -> go.Figure:
    """Donut of hours; slices past `max_slices` fold into "Other"."""
    top = df.head(max_slices)
    rest = df.iloc[max_slices:]
    if len(rest):
        top = pd.concat(
            [top, pd.DataFrame([{names: "Other", values: rest[values].sum()}])],
            ignore_index=True,
        )

    fig = px.pie(top, names=names, values=values, title=title, hole=0.4)
    fig.update_traces(textinfo="percent+label")
    return styled(fig, showlegend=False)


# =============================================================================
# MONEY
# =============================================================================

def revenue_cost_bar(summary: pd.DataFrame, name_col: str, title: str = "") -> go.Figure:
    """Grouped revenue vs cost bars per entity, margin in the hover."""
    fig = go.Figure()
    fig.add_trace(go.Bar(
        x=summary[name_col], y=summary["total_revenue"],
        name="Revenue", marker_color=PALETTE["revenue"],
    ))
    fig.add_trace(go.Bar(
        x=summary[name_col], y=summary["total_cost"],
        name="Cost", marker_color=PALETTE["cost"],
        customdata=summary[["margin"]],
        hovertemplate="Cost: %{y:,.2f}<br>Margin: %{customdata[0]:,.2f}<extra></extra>",
    ))
    fig.update_layout(barmode="group", title=title)
    return styled(fig, height=380)
