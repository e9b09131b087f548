"""

FloatChat - Streamlit Dashboard

Main dashboard application with statistics, float maps, profile
visualizations, the chat assistant and NetCDF processing for ARGO data.
"""

import uuid
from datetime import datetime
import logging

import pandas as pd
import streamlit as st
from streamlit_folium import st_folium

from floatchat.config import Config
from floatchat.database import OceanDataGateway, get_db_manager
from floatchat.dashboard import charts, maps
from floatchat.ingestion import NetCDFProcessor, NetCDFFormatError
from floatchat.ingestion.sample_files import seed_sample_data
from floatchat.rag import ChatProcessor
from floatchat.utils import get_ocean_region


# Set up logging
logging.basicConfig(level=Config.LOG_LEVEL)
logger = logging.getLogger(__name__)

# Page configuration
st.set_page_config(
    page_title="FloatChat",
    page_icon="🌊",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Custom CSS
st.markdown("""
<style>
    .main > div {
        padding-top: 2rem;
    }

    .stMetric {
        background-color: var(--secondary-background-color);
        border: 1px solid var(--border-color);
        padding: 1rem;
        border-radius: 0.5rem;
    }
</style>
""", unsafe_allow_html=True)


@st.cache_resource
def get_gateway() -> OceanDataGateway:
    db = get_db_manager()
    db.create_tables()
    return OceanDataGateway(db)


@st.cache_data(ttl=60)
def load_statistics():
    return get_gateway().get_statistics()


@st.cache_data(ttl=60)
def load_floats():
    return get_gateway().list_floats()


@st.cache_data(ttl=60)
def load_profiles(float_id=None, limit=50):
    return get_gateway().get_recent_profiles(limit=limit, float_id=float_id)


def clear_caches():
    load_statistics.clear()
    load_floats.clear()
    load_profiles.clear()


def main():
    """Main dashboard application"""

    st.title("🌊 FloatChat")
    st.markdown("Explore ARGO oceanographic float data and ask questions in plain language")

    # Sidebar
    st.sidebar.title("Navigation")
    page = st.sidebar.selectbox(
        "Choose a page",
        ["Overview", "Maps", "Visualizations", "Chat", "Data Processing"]
    )

    if page == "Overview":
        show_overview()
    elif page == "Maps":
        show_maps()
    elif page == "Visualizations":
        show_visualizations()
    elif page == "Chat":
        show_chat_interface()
    elif page == "Data Processing":
        show_data_processing()


def show_overview():
    """Show overview dashboard"""

    st.header("📊 Dashboard Overview")

    stats = load_statistics()
    floats = load_floats()
    regions = sorted({
        get_ocean_region(f['deployment_latitude'], f['deployment_longitude'])
        for f in floats if f['deployment_latitude'] is not None
    })

    col1, col2, col3, col4 = st.columns(4)

    with col1:
        inactive = stats['total_floats'] - stats['active_floats']
        st.metric("ARGO Floats", stats['total_floats'], f"{stats['active_floats']} active, {inactive} inactive",
                  delta_color="off")

    with col2:
        st.metric("Ocean Profiles", f"{stats['total_profiles']:,}", f"+{stats['recent_profiles']} this week")

    with col3:
        st.metric("Data Points", f"{stats['data_points'] / 1000:.1f}K",
                  f"{stats['embeddings']} embeddings", delta_color="off")

    with col4:
        st.metric("Coverage Areas", len(regions), ", ".join(regions[:2]) or None, delta_color="off")

    st.subheader("Data Overview")
    if floats:
        st.dataframe(pd.DataFrame(floats)[[
            'float_id', 'status', 'deployment_date', 'deployment_latitude',
            'deployment_longitude', 'last_transmission'
        ]], use_container_width=True)
    else:
        st.info("No floats yet. Process a NetCDF file or load the sample data on the Data Processing page.")

    show_recent_activity()


def show_recent_activity():
    """Recent profiles, file processing and chat queries in one feed"""

    st.subheader("Recent Activity")
    gateway = get_gateway()
    activities = []

    for profile in gateway.get_recent_profiles(limit=5, include_measurements=False):
        activities.append({
            'Timestamp': profile['created_at'],
            'Type': 'profile',
            'Details': f"Profile cycle {profile['cycle_number']} from float {profile['float_id']}",
            'Status': None,
            'Location': get_ocean_region(profile['latitude'], profile['longitude']),
        })

    for record in gateway.get_recent_files(limit=5):
        activities.append({
            'Timestamp': record['processed_at'] or record['created_at'],
            'Type': 'processing',
            'Details': record['filename'],
            'Status': record['processing_status'],
            'Location': None,
        })

    for row in gateway.get_recent_chat_sessions(limit=5):
        activities.append({
            'Timestamp': row['created_at'].isoformat() if row['created_at'] else None,
            'Type': 'query',
            'Details': row['user_query'],
            'Status': row['query_type'],
            'Location': None,
        })

    if not activities:
        st.write("No activity yet.")
        return

    feed = pd.DataFrame(activities).sort_values('Timestamp', ascending=False, na_position='last')
    st.dataframe(feed.head(10), use_container_width=True)


def show_maps():
    """Show float positions and a single float's trajectory"""

    st.header("🗺️ Float Maps")

    floats = load_floats()
    if not floats:
        st.warning("No floats to display.")
        return

    st.subheader("ARGO Float Locations")
    st_folium(maps.create_float_map(floats), height=450, width=900)

    st.subheader("Float Trajectory")
    float_id = st.selectbox("Float", [f['float_id'] for f in floats], key="trajectory_float")
    profiles = load_profiles(float_id=float_id)

    if not profiles:
        st.info(f"No profiles recorded for float {float_id}.")
        return

    current_index = len(profiles) - 1
    if len(profiles) > 1:
        current_index = st.slider("Playback position", 0, len(profiles) - 1, len(profiles) - 1)

    point = maps.trajectory_points(profiles)[current_index]
    st.write(f"**Cycle {point['cycle_number']}** on {point['date'][:10]} at "
             f"{point['latitude']:.2f}°N, {point['longitude']:.2f}°E")
    st_folium(maps.create_trajectory_map(profiles, current_index), height=450, width=900)


def show_visualizations():
    """Show depth profiles, time series, comparisons and heatmaps"""

    st.header("📈 Visualizations")

    floats = load_floats()
    if not floats:
        st.warning("No data to visualize.")
        return

    float_ids = [f['float_id'] for f in floats]
    col1, col2 = st.columns(2)
    with col1:
        float_id = st.selectbox("Float", float_ids)
    with col2:
        parameter = st.selectbox("Parameter", list(charts.PARAMETERS))

    profiles = load_profiles(float_id=float_id)
    tab_profile, tab_series, tab_compare, tab_heatmap = st.tabs(
        ["Depth Profile", "Time Series", "Comparison", "Heatmap"]
    )

    with tab_profile:
        if profiles:
            st.plotly_chart(charts.plot_depth_profile(profiles[0], parameter), use_container_width=True)
            with st.expander("View Raw Data"):
                st.dataframe(charts.profile_to_frame(profiles[0]), use_container_width=True)
        else:
            st.info(f"No profiles for float {float_id}.")

    with tab_series:
        time_range = st.radio("Time range", list(charts.TIME_RANGES), index=3, horizontal=True)
        frame = charts.filter_time_range(charts.profiles_to_frame(load_profiles()), time_range)
        stats = charts.time_series_stats(frame[parameter].tolist())

        col1, col2, col3, col4 = st.columns(4)
        col1.metric("Min", f"{stats['min']:.2f}")
        col2.metric("Max", f"{stats['max']:.2f}")
        col3.metric("Average", f"{stats['avg']:.2f}")
        col4.metric("Trend", f"{stats['trend']:+.1f}%")
        st.plotly_chart(charts.plot_time_series(frame, parameter), use_container_width=True)

    with tab_compare:
        other_ids = [f for f in float_ids if f != float_id]
        if not other_ids:
            st.info("At least two floats are needed for a comparison.")
        else:
            other_id = st.selectbox("Compare with", other_ids)
            other_profiles = load_profiles(float_id=other_id, limit=1)
            if profiles and other_profiles:
                st.plotly_chart(charts.plot_comparison(profiles[0], other_profiles[0], parameter),
                                use_container_width=True)
            else:
                st.info("Both floats need at least one profile.")

    with tab_heatmap:
        st.plotly_chart(charts.plot_heatmap(profiles, parameter), use_container_width=True)


def show_chat_interface():
    """Show chat interface for natural language queries"""

    st.header("💬 Chat Interface")
    st.markdown("Ask questions about ARGO data in natural language!")

    if "session_id" not in st.session_state:
        st.session_state.session_id = f"session_{uuid.uuid4().hex}"

    processor = ChatProcessor(get_gateway())
    history = processor.get_chat_history(st.session_state.session_id)

    if not history:
        with st.chat_message("assistant"):
            st.markdown("Hello! I'm your ARGO data assistant. Ask me about temperature, salinity, "
                        "oxygen or the location of a float, for example float 5906468.")

    for message in history:
        with st.chat_message(message["role"]):
            st.markdown(message["content"])
            if message["role"] == "assistant":
                st.caption(f"{message['queryType']} · {message['executionTime']} ms")

    prompt = st.chat_input("Ask a question about ARGO data...")

    st.subheader("💡 Try these questions:")
    for suggestion in processor.get_query_suggestions():
        if st.button(suggestion, key=f"suggestion_{suggestion}"):
            prompt = suggestion

    if prompt:
        with st.spinner("Thinking..."):
            try:
                processor.process_query(prompt, st.session_state.session_id)
            except Exception as e:
                st.error(f"Failed to process chat query: {e}")
                return
        load_statistics.clear()
        st.rerun()


def show_data_processing():
    """Show data processing interface"""

    st.header("⚙️ Data Processing")

    stats = load_statistics()
    files_by_status = stats['files_by_status']

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Files Completed", files_by_status.get('completed', 0))
    with col2:
        st.metric("Files Failed", files_by_status.get('error', 0))
    with col3:
        st.metric("Profiles Ingested", stats['total_profiles'])
    with col4:
        st.metric("Vector Embeddings", stats['embeddings'])

    st.subheader("Process NetCDF File")
    col1, col2 = st.columns(2)
    with col1:
        filename = st.text_input("Filename", placeholder="R5906468_246.nc")
    with col2:
        file_path = st.text_input("File path", value=Config.SAMPLE_DATA_DIR)

    if st.button("Process File", type="primary", disabled=not filename):
        processor = NetCDFProcessor(get_gateway())
        with st.spinner(f"Processing {filename}..."):
            try:
                profile_id = processor.process_and_store(filename, file_path)
                st.success(f"Successfully processed {filename} (profile {profile_id})")
            except NetCDFFormatError as e:
                st.error(str(e))
            except Exception as e:
                logger.error(f"Dashboard processing failed: {e}")
                st.error(f"Failed to process NetCDF file: {e}")
        clear_caches()

    st.subheader("File Status")
    recent_files = get_gateway().get_recent_files(limit=20)
    if recent_files:
        st.dataframe(pd.DataFrame(recent_files)[[
            'filename', 'processing_status', 'processed_at', 'file_size_bytes', 'error_message'
        ]], use_container_width=True)
    else:
        st.write("No files processed yet.")

    st.subheader("Sample Data")
    if st.button("Load sample floats"):
        if seed_sample_data(get_gateway().db):
            st.success("Sample floats and profiles loaded.")
        else:
            st.info("The database already holds floats.")
        clear_caches()

    st.subheader("Database Status")
    healthy = get_gateway().db.test_connection()
    st.metric("Database", "🟢 Healthy" if healthy else "🔴 Unavailable",
              f"checked {datetime.now().strftime('%H:%M:%S')}", delta_color="off")


if __name__ == "__main__":
    main()
