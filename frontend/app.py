"""Weather Lookup - Streamlit Frontend."""

import os
import sys
from pathlib import Path

import streamlit as st

# `streamlit run frontend/app.py` puts frontend/ on sys.path, not the repo root
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from frontend.client import (  # noqa: E402
    ApiError,
    WeatherApiClient,
    demo_forecast,
    demo_weather,
    icon_for,
)
from src.tools.shared_libraries.helpers import (  # noqa: E402
    format_forecast_day,
    format_temperature,
)

st.set_page_config(
    page_title="Weather Lookup",
    page_icon="🌤️",
    layout="wide",
)

# Initialize session state
if "weather" not in st.session_state:
    st.session_state.weather = None
if "forecast" not in st.session_state:
    st.session_state.forecast = []
if "demo" not in st.session_state:
    st.session_state.demo = False
if "error" not in st.session_state:
    st.session_state.error = None


def run_lookup(client: WeatherApiClient, **query) -> None:
    """Fetch current conditions and forecast into session state."""
    st.session_state.error = None
    try:
        weather, forecast = client.lookup(**query)
        st.session_state.weather = weather
        st.session_state.forecast = forecast
        st.session_state.demo = False
    except ValueError as e:
        st.session_state.error = str(e)
    except ApiError as e:
        if e.offline:
            # Offline: show sample data rather than an empty page
            st.session_state.weather = demo_weather()
            st.session_state.forecast = demo_forecast()
            st.session_state.demo = True
        else:
            st.session_state.error = e.message


def render_current(weather: dict) -> None:
    st.subheader(f"{icon_for(weather.get('icon'))} {weather['city']}, {weather.get('country') or ''}")
    st.caption(weather["description"].capitalize())

    col1, col2, col3, col4, col5 = st.columns(5)
    col1.metric("Temperature", format_temperature(weather["temperature"]))
    if weather.get("feels_like") is not None:
        col2.metric("Feels like", format_temperature(weather["feels_like"]))
    col3.metric("Humidity", f"{weather.get('humidity', 'N/A')}%")
    col4.metric("Pressure", f"{weather.get('pressure', 'N/A')} hPa")
    col5.metric("Wind", f"{weather.get('wind_speed', 'N/A')} m/s")


def render_forecast(forecast: list[dict]) -> None:
    if not forecast:
        return
    st.subheader("5-day forecast")
    for column, entry in zip(st.columns(len(forecast)), forecast):
        with column:
            st.markdown(f"**{format_forecast_day(entry['date'])}**")
            st.markdown(f"### {icon_for(entry.get('icon'))}")
            st.write(format_temperature(entry["temperature"]))
            st.caption(entry["description"])


def render_history(client: WeatherApiClient) -> None:
    st.subheader("Recent searches")
    try:
        history = client.history()
    except ApiError as e:
        st.caption(f"Error loading history: {e.message}")
        return
    if not history:
        st.caption("No search history yet")
        return
    for item in history:
        st.markdown(
            f"**{item['city']}** · {format_temperature(item['temperature'])} "
            f"- {item['description']} · {item['search_date'][:10]}"
        )


# Sidebar
with st.sidebar:
    st.title("🌤️ Weather Lookup")
    st.divider()

    api_url = st.text_input(
        "Gateway URL",
        value=os.getenv("WEATHER_GATEWAY_URL", "http://localhost:10000"),
    )
    client = WeatherApiClient(api_url)

    try:
        health = client.health()
        st.success(f"✅ Gateway online · database {health['database']}")
    except ApiError:
        st.warning("⚠️ Gateway unreachable")

    st.divider()
    use_coordinates = st.toggle("Search by coordinates")

# Main area
if use_coordinates:
    col1, col2 = st.columns(2)
    lat = col1.number_input("Latitude", min_value=-90.0, max_value=90.0, value=51.51)
    lon = col2.number_input("Longitude", min_value=-180.0, max_value=180.0, value=-0.13)
    if st.button("Get weather", type="primary"):
        with st.spinner("Fetching weather..."):
            run_lookup(client, lat=lat, lon=lon)
else:
    with st.form("search"):
        city = st.text_input("City", placeholder="e.g. London")
        if st.form_submit_button("Get weather", type="primary"):
            with st.spinner("Fetching weather..."):
                run_lookup(client, city=city)

if st.session_state.error:
    st.error(st.session_state.error)

if st.session_state.demo:
    st.info("Showing sample data - the weather service could not be reached.")

if st.session_state.weather:
    render_current(st.session_state.weather)
    st.divider()
    render_forecast(st.session_state.forecast)

st.divider()
render_history(client)
