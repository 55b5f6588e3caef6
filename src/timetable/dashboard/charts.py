"""
Frames and charts for the timetable dashboard.
"""

from typing import Dict, Mapping, Sequence
from zoneinfo import ZoneInfo

import pandas as pd
import plotly.graph_objects as go

from ..database.models import ClassSession, Club

DAY_ORDER = ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday']

FRAME_COLUMNS = [
    'id', 'name', 'code', 'club', 'club_name', 'start', 'end',
    'duration_minutes', 'is_virtual', 'day_of_week', 'hour',
]


def sessions_to_frame(sessions: Sequence[ClassSession], tz: ZoneInfo,
                      clubs: Mapping[str, Club]) -> pd.DataFrame:
    """One row per session with start/end in the reference timezone."""
    if not sessions:
        return pd.DataFrame(columns=FRAME_COLUMNS)

    rows = []
    for s in sessions:
        start = s.start_at.astimezone(tz)
        rows.append({
            'id': s.id,
            'name': s.name,
            'code': s.code,
            'club': s.club,
            'club_name': clubs[s.club].name if s.club in clubs else s.club,
            'start': start.replace(tzinfo=None),
            'end': s.end_at.astimezone(tz).replace(tzinfo=None),
            'duration_minutes': s.duration_minutes,
            'is_virtual': s.is_virtual,
            'day_of_week': start.strftime('%A'),
            'hour': start.hour,
        })
    return pd.DataFrame(rows, columns=FRAME_COLUMNS)


def calculate_timetable_metrics(df: pd.DataFrame) -> Dict[str, int]:
    """Counts for the KPI cards."""
    if df.empty:
        return {
            'total_classes': 0,
            'clubs': 0,
            'class_types': 0,
            'virtual_classes': 0,
        }
    return {
        'total_classes': len(df),
        'clubs': df['club'].nunique(),
        'class_types': df['code'].nunique(),
        'virtual_classes': int(df['is_virtual'].sum()),
    }


def create_class_heatmap(df: pd.DataFrame, club_name: str = None) -> go.Figure:
    """Heatmap of class counts by weekday and hour."""
    if df.empty:
        return go.Figure()

    if club_name and club_name != "All":
        df = df[df['club_name'] == club_name]

    counts = df.groupby(['day_of_week', 'hour']).size().reset_index(name='classes')
    pivot_data = counts.pivot(index='day_of_week', columns='hour', values='classes')
    pivot_data = pivot_data.reindex(DAY_ORDER).fillna(0).astype(int)

    text_array = [["" if val == 0 else str(val) for val in row] for row in pivot_data.values]

    fig = go.Figure(data=go.Heatmap(
        z=pivot_data.values,
        x=[f"{h:02d}:00" for h in pivot_data.columns],
        y=pivot_data.index,
        colorscale='Blues',
        colorbar=dict(title="Classes"),
        text=text_array,
        texttemplate="%{text}",
        textfont={"size": 10, "family": "Arial"},
        hoverongaps=False
    ))

    title = f"Classes by Weekday and Hour ({club_name})" if club_name and club_name != "All" else "Classes by Weekday and Hour (All Clubs)"

    fig.update_layout(
        title=title,
        xaxis_title="Hour",
        yaxis_title="Weekday",
        height=500,
        font=dict(family="Arial"),
        autosize=True
    )

    return fig
