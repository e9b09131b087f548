"""
Plotly figures for the FloatChat dashboard.

Builds depth profiles, time series, float comparisons and depth/time
heatmaps from the dictionaries returned by the persistence gateway.
"""

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

PARAMETERS = {
    'temperature': {
        'column': 'temperature_celsius',
        'label': 'Temperature',
        'unit': '°C',
        'color': '#ef4444',
        'compare_color': '#f97316',
        'colorscale': 'RdYlBu_r',
    },
    'salinity': {
        'column': 'salinity_psu',
        'label': 'Salinity',
        'unit': 'PSU',
        'color': '#3b82f6',
        'compare_color': '#06b6d4',
        'colorscale': 'Blues',
    },
    'oxygen': {
        'column': 'oxygen_umol_kg',
        'label': 'Oxygen',
        'unit': 'μmol/kg',
        'color': '#10b981',
        'compare_color': '#84cc16',
        'colorscale': 'RdYlGn',
    },
}

TIME_RANGES = {'7d': 7, '30d': 30, '90d': 90, '1y': 365}


def profile_to_frame(profile: Dict[str, Any]) -> pd.DataFrame:
    """One row per depth with physical and BGC columns side by side"""
    depth = pd.DataFrame(profile.get('depth_measurements') or [])
    bgc = pd.DataFrame(profile.get('bgc_measurements') or [])

    frames = [f.drop(columns=['id', 'profile_id'], errors='ignore') for f in (depth, bgc) if not f.empty]
    if not frames:
        return pd.DataFrame(columns=['depth_meters'])

    merged = frames[0]
    for frame in frames[1:]:
        merged = merged.merge(frame, on='depth_meters', how='outer')

    return merged.sort_values('depth_meters').reset_index(drop=True)


def profiles_to_frame(profiles: List[Dict[str, Any]]) -> pd.DataFrame:
    """Surface values per profile, indexed by profile date"""
    rows = []
    for profile in profiles:
        frame = profile_to_frame(profile)
        surface = frame.iloc[0].to_dict() if not frame.empty else {}
        row = {
            'date': pd.to_datetime(profile['profile_date']),
            'float_id': profile['float_id'],
            'cycle_number': profile.get('cycle_number'),
        }
        for name, config in PARAMETERS.items():
            row[name] = surface.get(config['column'])
        rows.append(row)

    columns = ['date', 'float_id', 'cycle_number'] + list(PARAMETERS)
    return pd.DataFrame(rows, columns=columns).sort_values('date').reset_index(drop=True)


def plot_depth_profile(profile: Dict[str, Any], parameter: str = 'temperature') -> go.Figure:
    """Create a single-profile plot with depth increasing downward"""
    config = PARAMETERS[parameter]
    frame = profile_to_frame(profile)

    fig = go.Figure()
    if config['column'] in frame.columns:
        values = frame.dropna(subset=[config['column']])
        fig.add_trace(go.Scatter(
            x=values[config['column']],
            y=values['depth_meters'],
            mode='lines+markers',
            name=config['label'],
            line=dict(width=3, color=config['color']),
            marker=dict(size=4)
        ))

    fig.update_layout(
        title=f"{config['label']} Profile - Float {profile.get('float_id')} (cycle {profile.get('cycle_number')})",
        xaxis_title=f"{config['label']} ({config['unit']})",
        yaxis_title="Depth (m)",
        yaxis=dict(autorange="reversed"),
        height=600,
        template="plotly_white"
    )

    return fig


def filter_time_range(df: pd.DataFrame, time_range: str = '30d',
                      now: Optional[datetime] = None) -> pd.DataFrame:
    """Keep rows dated within the last 7d, 30d, 90d or 1y"""
    days = TIME_RANGES[time_range]
    cutoff = (now or datetime.utcnow()) - timedelta(days=days)
    return df[df['date'] >= cutoff]


def time_series_stats(values: List[float]) -> Dict[str, float]:
    """Min, max, mean and the percent change from first to last value"""
    values = [v for v in values if v is not None and not pd.isna(v)]
    if not values:
        return {'min': 0.0, 'max': 0.0, 'avg': 0.0, 'trend': 0.0}

    trend = 0.0
    if len(values) > 1 and values[0]:
        trend = (values[-1] - values[0]) / values[0] * 100

    return {
        'min': min(values),
        'max': max(values),
        'avg': sum(values) / len(values),
        'trend': trend,
    }


def plot_time_series(df: pd.DataFrame, parameter: str = 'temperature') -> go.Figure:
    """Plot surface values over time, one line per float"""
    config = PARAMETERS[parameter]

    fig = go.Figure()
    for float_id, group in df.groupby('float_id'):
        fig.add_trace(go.Scatter(
            x=group['date'],
            y=group[parameter],
            mode='lines+markers',
            name=f"Float {float_id}",
            line=dict(width=2),
            marker=dict(size=6)
        ))

    fig.update_layout(
        title=f"Surface {config['label']} Time Series",
        xaxis_title="Date",
        yaxis_title=f"{config['label']} ({config['unit']})",
        height=400,
        template="plotly_white"
    )

    return fig


def build_comparison_frame(profile1: Dict[str, Any], profile2: Dict[str, Any],
                           parameter: str = 'temperature') -> pd.DataFrame:
    """Align two profiles on depth for one parameter"""
    column = PARAMETERS[parameter]['column']
    frames = []
    for suffix, profile in (('float1', profile1), ('float2', profile2)):
        frame = profile_to_frame(profile)
        if column not in frame.columns:
            frame[column] = None
        frames.append(frame[['depth_meters', column]].rename(columns={column: f"{suffix}_{parameter}"}))

    return frames[0].merge(frames[1], on='depth_meters', how='outer')\
        .sort_values('depth_meters')\
        .reset_index(drop=True)


def plot_comparison(profile1: Dict[str, Any], profile2: Dict[str, Any],
                    parameter: str = 'temperature') -> go.Figure:
    """Overlay two floats' profiles of one parameter"""
    config = PARAMETERS[parameter]
    frame = build_comparison_frame(profile1, profile2, parameter)

    fig = go.Figure()
    for suffix, profile, color in (('float1', profile1, config['color']),
                                   ('float2', profile2, config['compare_color'])):
        series = frame.dropna(subset=[f"{suffix}_{parameter}"])
        fig.add_trace(go.Scatter(
            x=series[f"{suffix}_{parameter}"],
            y=series['depth_meters'],
            mode='lines+markers',
            name=f"Float {profile.get('float_id')}",
            line=dict(width=2, color=color),
            marker=dict(size=4)
        ))

    fig.update_layout(
        title=f"{config['label']} Comparison",
        xaxis_title=f"{config['label']} ({config['unit']})",
        yaxis_title="Depth (m)",
        yaxis=dict(autorange="reversed"),
        height=500,
        template="plotly_white"
    )

    return fig


def build_heatmap_frame(profiles: List[Dict[str, Any]], parameter: str = 'temperature') -> pd.DataFrame:
    """Long-form (date, depth, value) rows for every profile"""
    column = PARAMETERS[parameter]['column']
    rows = []
    for profile in profiles:
        frame = profile_to_frame(profile)
        if column not in frame.columns:
            continue
        date = pd.to_datetime(profile['profile_date']).strftime('%Y-%m-%d')
        for _, level in frame.dropna(subset=[column]).iterrows():
            rows.append({'date': date, 'depth': level['depth_meters'], 'value': level[column]})

    return pd.DataFrame(rows, columns=['date', 'depth', 'value'])


def plot_heatmap(profiles: List[Dict[str, Any]], parameter: str = 'temperature') -> go.Figure:
    """Depth against date, coloured by the parameter value"""
    config = PARAMETERS[parameter]
    frame = build_heatmap_frame(profiles, parameter)

    if frame.empty:
        fig = go.Figure()
    else:
        grid = frame.pivot_table(index='depth', columns='date', values='value', aggfunc='mean')
        fig = px.imshow(
            grid,
            labels=dict(x="Date", y="Depth (m)", color=config['unit']),
            color_continuous_scale=config['colorscale'],
            aspect='auto'
        )

    fig.update_layout(
        title=f"{config['label']} Heatmap",
        height=500,
        template="plotly_white"
    )

    return fig
