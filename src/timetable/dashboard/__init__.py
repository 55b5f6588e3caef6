"""
Dashboard Package

Streamlit read surface over the timetable service.
"""
