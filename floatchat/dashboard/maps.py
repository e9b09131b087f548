"""
Folium maps for the FloatChat dashboard.
"""

from typing import Any, Dict, List, Optional

import folium

from ..utils.regions import get_ocean_region

# Arabian Sea, where the sample floats are deployed
DEFAULT_CENTER = [15.0, 68.0]

STATUS_COLORS = {
    'active': 'green',
    'inactive': 'red',
}


def float_position(record: Dict[str, Any]) -> Optional[List[float]]:
    lat = record.get('deployment_latitude')
    lon = record.get('deployment_longitude')
    if lat is None or lon is None:
        return None
    return [lat, lon]


def create_float_map(floats: List[Dict[str, Any]]) -> folium.Map:
    """Create interactive map with ARGO float locations coloured by status"""
    positions = [p for p in (float_position(f) for f in floats) if p]
    if positions:
        center = [sum(p[0] for p in positions) / len(positions), sum(p[1] for p in positions) / len(positions)]
    else:
        center = DEFAULT_CENTER

    m = folium.Map(location=center, zoom_start=5, tiles='OpenStreetMap')

    for record in floats:
        position = float_position(record)
        if position is None:
            continue

        color = STATUS_COLORS.get(record.get('status'), 'gray')
        popup_text = f"""
        Float: {record['float_id']}<br>
        Status: {record.get('status')}<br>
        Region: {get_ocean_region(*position)}<br>
        Position: {position[0]:.2f}°N, {position[1]:.2f}°E<br>
        Last transmission: {(record.get('last_transmission') or 'unknown')[:16]}
        """

        folium.CircleMarker(
            location=position,
            radius=8,
            popup=popup_text,
            tooltip=f"Float {record['float_id']}",
            color=color,
            fill=True,
            fillColor=color,
            fillOpacity=0.7
        ).add_to(m)

    return m


def trajectory_points(profiles: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Profiles of one float as ordered track points, oldest first"""
    ordered = sorted(profiles, key=lambda p: p['profile_date'])
    return [
        {
            'date': p['profile_date'],
            'latitude': p['latitude'],
            'longitude': p['longitude'],
            'cycle_number': p.get('cycle_number'),
        }
        for p in ordered
    ]


def create_trajectory_map(profiles: List[Dict[str, Any]], current_index: Optional[int] = None) -> folium.Map:
    """Draw a float's track as a polyline, highlighting the point at current_index"""
    points = trajectory_points(profiles)
    if not points:
        return folium.Map(location=DEFAULT_CENTER, zoom_start=5, tiles='OpenStreetMap')

    if current_index is None:
        current_index = len(points) - 1
    current_index = max(0, min(current_index, len(points) - 1))

    current = points[current_index]
    m = folium.Map(location=[current['latitude'], current['longitude']], zoom_start=8, tiles='OpenStreetMap')

    visited = [[p['latitude'], p['longitude']] for p in points[:current_index + 1]]
    if len(visited) > 1:
        folium.PolyLine(visited, color='blue', weight=3, opacity=0.8).add_to(m)

    for index, point in enumerate(points[:current_index + 1]):
        is_current = index == current_index
        folium.CircleMarker(
            location=[point['latitude'], point['longitude']],
            radius=8 if is_current else 4,
            popup=f"Cycle {point['cycle_number']}<br>{point['date'][:10]}",
            color='red' if is_current else 'blue',
            fill=True,
            fillOpacity=0.9 if is_current else 0.5
        ).add_to(m)

    return m
