#!/usr/bin/env python3
"""
Timetable Dashboard
A Streamlit-based dashboard for browsing the current class timetable.
"""

from datetime import datetime

import pandas as pd
import streamlit as st

from timetable.config import CLUBS, Settings
from timetable.dashboard.charts import (
    calculate_timetable_metrics,
    create_class_heatmap,
    sessions_to_frame,
)
from timetable.database.models import QueryCriteria
from timetable.errors import StoreError
from timetable.factory import build_service

# Page configuration
st.set_page_config(
    page_title="Timetable Dashboard",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
<style>
    html, body, [class*="css"] {
        font-family: Arial, sans-serif !important;
    }

    /* Tighter spacing for sidebar elements */
    .stSidebar .element-container {
        margin-bottom: 0.5rem !important;
    }

    .stSidebar .stButton > button {
        width: 100%;
        border-radius: 6px;
        font-weight: 600;
        font-size: 0.8rem;
        padding: 0.25rem 0.5rem !important;
    }
</style>
""", unsafe_allow_html=True)


@st.cache_resource
def get_settings():
    return Settings.from_env()


@st.cache_resource
def get_service():
    """Timetable service shared across reruns."""
    try:
        return build_service(get_settings())
    except (RuntimeError, StoreError) as e:
        st.error(str(e))
        st.stop()


@st.cache_data(ttl=300)
def get_class_types():
    """Class type code -> name."""
    try:
        return {t.id: t.name for t in get_service().list_class_types()}
    except StoreError as e:
        st.error(f"Error fetching class types: {e}")
        return {}


@st.cache_data(ttl=300)
def load_classes(names, clubs, dates, hours, include_virtual):
    """Load matching classes. Arguments are tuples so they hash for caching."""
    criteria = QueryCriteria(
        names=frozenset(names),
        clubs=frozenset(clubs),
        dates=frozenset(dates),
        hours=frozenset(hours),
        include_virtual=include_virtual,
    )
    settings = get_settings()
    try:
        sessions = get_service().list_classes(criteria)
    except StoreError as e:
        st.error(f"Database error: {e}")
        return pd.DataFrame()
    return sessions_to_frame(sessions, settings.reference_timezone, CLUBS)


def main():
    """Main dashboard function."""
    st.title("Club Timetable")

    service = get_service()
    if not service.is_healthy():
        st.warning("The catalog is empty. Run `timetable refresh` first.")
        st.stop()

    class_types = get_class_types()

    st.sidebar.header("Filters")

    with st.sidebar.container():
        st.markdown("### Clubs")

        col1, col2 = st.columns(2)
        with col1:
            if st.button("Select All"):
                st.session_state.selected_clubs = list(CLUBS)
        with col2:
            if st.button("Clear All"):
                st.session_state.selected_clubs = []

        if 'selected_clubs' not in st.session_state:
            st.session_state.selected_clubs = list(CLUBS)

        selected_clubs = []
        for club in CLUBS.values():
            is_selected = club.code in st.session_state.selected_clubs
            if st.checkbox(club.name, value=is_selected, key=f"checkbox_{club.code}"):
                selected_clubs.append(club.code)

        st.session_state.selected_clubs = selected_clubs

        if not selected_clubs:
            st.error("No clubs selected!")
            st.stop()

    with st.sidebar.container():
        st.markdown("### When")
        use_date = st.checkbox("Pick a day", value=False, help="Otherwise all upcoming classes are shown")
        dates = ()
        if use_date:
            dates = (st.date_input("Day:", value=datetime.now(get_settings().reference_timezone).date()),)
        hours = tuple(st.multiselect("Hours:", options=list(range(24)), format_func=lambda h: f"{h:02d}:00"))

    with st.sidebar.container():
        st.markdown("### Classes")
        names = tuple(st.multiselect(
            "Class types:",
            options=sorted(class_types),
            format_func=lambda code: class_types.get(code, code),
        ))
        include_virtual = st.checkbox("Include virtual classes", value=False)

    clubs = tuple(selected_clubs)

    with st.spinner("Loading classes..."):
        df = load_classes(names, clubs, dates, hours, include_virtual)

    if df.empty:
        st.warning("No classes found for the selected filters.")
        st.stop()

    st.caption(f"Latest update: {datetime.now().strftime('%d/%m/%Y %H:%M')}")

    metrics = calculate_timetable_metrics(df)

    st.header("Key Metrics")
    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric(label="Classes", value=f"{metrics['total_classes']:,}")
    with col2:
        st.metric(label="Clubs", value=metrics['clubs'])
    with col3:
        st.metric(label="Class Types", value=metrics['class_types'])
    with col4:
        st.metric(label="Virtual", value=metrics['virtual_classes'])

    st.header("When Classes Run")
    club_names = ["All"] + sorted(df['club_name'].unique())
    heatmap_club = st.selectbox("Club:", club_names)
    st.plotly_chart(create_class_heatmap(df, heatmap_club), use_container_width=True)

    st.header("Timetable")
    st.dataframe(
        df[['start', 'name', 'club_name', 'duration_minutes', 'is_virtual']],
        use_container_width=True
    )


if __name__ == "__main__":
    main()
