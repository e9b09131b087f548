from datetime import datetime

import folium
import plotly.graph_objects as go
import pytest

from floatchat.dashboard import charts, maps
from floatchat.ingestion import ProfileSynthesizer


def synthetic_profile(rng, float_id="5906468", cycle=245, date="2024-12-20T10:30:00", lat=15.5, lon=68.2):
    synthesizer = ProfileSynthesizer(rng)
    return {
        'id': cycle,
        'float_id': float_id,
        'profile_date': date,
        'latitude': lat,
        'longitude': lon,
        'cycle_number': cycle,
        'depth_measurements': synthesizer.generate_depth_measurements(),
        'bgc_measurements': synthesizer.generate_bgc_measurements(),
    }


def test_profile_frame_merges_physical_and_bgc(rng):
    frame = charts.profile_to_frame(synthetic_profile(rng))

    assert len(frame) == 21
    assert frame['depth_meters'].is_monotonic_increasing
    assert frame['oxygen_umol_kg'].notna().sum() == 17
    assert frame['temperature_celsius'].notna().all()


def test_profile_frame_without_measurements():
    frame = charts.profile_to_frame({'float_id': "5906468"})
    assert frame.empty


def test_depth_profile_figure(rng):
    fig = charts.plot_depth_profile(synthetic_profile(rng), 'salinity')

    assert isinstance(fig, go.Figure)
    assert len(fig.data) == 1
    assert len(fig.data[0].y) == 21
    assert fig.layout.yaxis.autorange == "reversed"


def test_oxygen_profile_skips_levels_without_bgc(rng):
    fig = charts.plot_depth_profile(synthetic_profile(rng), 'oxygen')
    assert len(fig.data[0].x) == 17


def test_time_series_stats():
    assert charts.time_series_stats([10.0, 11.0, 12.0]) == pytest.approx(
        {'min': 10.0, 'max': 12.0, 'avg': 11.0, 'trend': 20.0}
    )
    assert charts.time_series_stats([]) == {'min': 0.0, 'max': 0.0, 'avg': 0.0, 'trend': 0.0}
    assert charts.time_series_stats([5.0])['trend'] == 0.0
    assert charts.time_series_stats([0.0, 3.0])['trend'] == 0.0


def test_time_series_filtering_and_figure(rng):
    profiles = [
        synthetic_profile(rng, cycle=1, date="2024-09-01T00:00:00"),
        synthetic_profile(rng, cycle=2, date="2024-12-10T00:00:00"),
        synthetic_profile(rng, float_id="5906469", cycle=9, date="2024-12-19T00:00:00"),
    ]
    frame = charts.profiles_to_frame(profiles)

    recent = charts.filter_time_range(frame, '30d', now=datetime(2024, 12, 20))

    assert list(recent['cycle_number']) == [2, 9]
    assert len(charts.filter_time_range(frame, '1y', now=datetime(2024, 12, 20))) == 3

    fig = charts.plot_time_series(frame, 'temperature')
    assert {trace.name for trace in fig.data} == {"Float 5906468", "Float 5906469"}


def test_comparison(rng):
    first = synthetic_profile(rng)
    second = synthetic_profile(rng, float_id="5906469", cycle=189)

    frame = charts.build_comparison_frame(first, second, 'temperature')
    assert list(frame.columns) == ['depth_meters', 'float1_temperature', 'float2_temperature']
    assert len(frame) == 21

    fig = charts.plot_comparison(first, second, 'temperature')
    assert [trace.name for trace in fig.data] == ["Float 5906468", "Float 5906469"]


def test_heatmap(rng):
    profiles = [
        synthetic_profile(rng, cycle=1, date="2024-12-01T00:00:00"),
        synthetic_profile(rng, cycle=2, date="2024-12-11T00:00:00"),
    ]

    frame = charts.build_heatmap_frame(profiles, 'temperature')
    assert len(frame) == 42
    assert sorted(frame['date'].unique()) == ["2024-12-01", "2024-12-11"]

    fig = charts.plot_heatmap(profiles, 'temperature')
    assert len(fig.data) == 1
    assert len(fig.data[0].z) == 21
    assert len(fig.data[0].z[0]) == 2


def test_empty_heatmap():
    fig = charts.plot_heatmap([], 'oxygen')
    assert len(fig.data) == 0


@pytest.fixture
def floats():
    return [
        {'float_id': "5906468", 'deployment_latitude': 15.5, 'deployment_longitude': 68.2,
         'status': 'active', 'last_transmission': "2024-12-20T10:30:00"},
        {'float_id': "5906471", 'deployment_latitude': 20.1, 'deployment_longitude': 72.3,
         'status': 'inactive', 'last_transmission': None},
        {'float_id': "5906999", 'deployment_latitude': None, 'deployment_longitude': None,
         'status': 'active', 'last_transmission': None},
    ]


def test_float_map(floats):
    m = maps.create_float_map(floats)

    assert isinstance(m, folium.Map)
    markers = [c for c in m._children.values() if isinstance(c, folium.CircleMarker)]
    assert len(markers) == 2
    assert m.location == pytest.approx([17.8, 70.25])


def test_trajectory(rng):
    profiles = [
        synthetic_profile(rng, cycle=2, date="2024-12-10T00:00:00", lat=15.6, lon=68.3),
        synthetic_profile(rng, cycle=1, date="2024-12-01T00:00:00", lat=15.5, lon=68.2),
        synthetic_profile(rng, cycle=3, date="2024-12-20T00:00:00", lat=15.7, lon=68.4),
    ]

    points = maps.trajectory_points(profiles)
    assert [p['cycle_number'] for p in points] == [1, 2, 3]

    m = maps.create_trajectory_map(profiles, current_index=1)
    assert m.location == pytest.approx([15.6, 68.3])
    lines = [c for c in m._children.values() if isinstance(c, folium.PolyLine)]
    assert len(lines) == 1


def test_trajectory_without_profiles():
    assert maps.create_trajectory_map([]).location == pytest.approx(maps.DEFAULT_CENTER)
