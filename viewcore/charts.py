from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

import altair as alt
import pandas as pd

from viewcore.models import CategoryStat

alt.data_transformers.disable_max_rows()


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def category_share_chart(stats: Sequence[CategoryStat]) -> Optional[Dict[str, Any]]:
    if not stats:
        return None
    df = pd.DataFrame(
        [
            {"category": s.name or s.id, "amount": s.amount, "percentage": s.percentage, "color": s.color or "#9ca3af"}
            for s in stats
        ]
    )
    donut = (
        alt.Chart(df)
        .mark_arc(innerRadius=60)
        .encode(
            theta=alt.Theta("amount:Q", stack=True),
            color=alt.Color(
                "category:N",
                scale=alt.Scale(domain=df["category"].tolist(), range=df["color"].tolist()),
                legend=alt.Legend(title="Category"),
            ),
            tooltip=[
                alt.Tooltip("category:N", title="Category"),
                alt.Tooltip("amount:Q", format=",.0f"),
                alt.Tooltip("percentage:Q", title="Share %", format=".1f"),
            ],
        )
        .properties(height=260)
    )
    return to_vega_spec(donut)
