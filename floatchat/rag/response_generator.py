"""
Templated responses for classified chat queries.

Each query type has a fixed message for an empty result set and a template
filled from the retrieved rows otherwise.
"""

from typing import Any, Dict, List, Optional

from .query_classifier import (
    QueryAnalysis,
    TEMPERATURE_QUERY,
    SALINITY_QUERY,
    BGC_QUERY,
    FLOAT_LOCATION_QUERY,
    COMPARISON_QUERY,
    GENERAL_QUERY,
)
from ..utils.regions import get_ocean_region

NO_DATA_MESSAGES = {
    TEMPERATURE_QUERY: (
        "I don't have temperature data available for your query. Please try asking about a specific "
        "ARGO float ID or check if the data has been processed."
    ),
    SALINITY_QUERY: (
        "I don't have salinity data available for your query. Please specify an ARGO float ID or "
        "check if the data has been processed."
    ),
    BGC_QUERY: (
        "I don't have biogeochemical data available for your query. BGC data is available from "
        "select ARGO floats with biogeochemical sensors."
    ),
    FLOAT_LOCATION_QUERY: (
        "I don't have location data for the requested float. Please check the float ID or try a "
        "different query."
    ),
    COMPARISON_QUERY: (
        "I don't have enough data to make a comparison. Please name the ARGO floats or parameters "
        "you would like to compare, or check if the data has been processed."
    ),
    GENERAL_QUERY: (
        "I don't have specific data to answer your query. Try asking about:\n\n"
        "• Temperature profiles for a specific float\n"
        "• Salinity data in the Arabian Sea\n"
        "• Oxygen levels at different depths\n"
        "• Float locations and trajectories\n\n"
        "You can reference specific ARGO float IDs (like 5906468) for detailed information."
    ),
}

TEMPERATURE_SUMMARY = (
    "I found temperature data from recent ARGO profiles. The data shows typical tropical Indian Ocean "
    "characteristics with warm surface waters (28-29°C) decreasing to about 4°C at 2000m depth. Would you "
    "like me to show you a specific float's temperature profile?"
)

SALINITY_SUMMARY = (
    "Salinity data from ARGO floats shows typical Arabian Sea characteristics with surface values around "
    "34.8-35.2 PSU. The salinity profile indicates the influence of high evaporation rates in this region, "
    "with a subsurface salinity maximum around 100-200m depth."
)

BGC_SUMMARY = (
    "Biogeochemical data shows interesting patterns:\n\n"
    "• Oxygen: High surface concentrations (220+ μmol/kg) decreasing to minimum values around 500m depth\n"
    "• Nitrate: Low surface values increasing with depth, typical of nutrient cycling\n"
    "• pH: Surface values around 8.1 decreasing slightly with depth\n"
    "• Chlorophyll: Maximum concentrations in the upper 100m where photosynthesis occurs\n\n"
    "This data reveals the complex biogeochemical processes in the Indian Ocean."
)

LOCATION_SUMMARY = (
    "I found location data for ARGO floats in the Indian Ocean region. These autonomous instruments drift "
    "with ocean currents while collecting temperature, salinity, and biogeochemical data."
)

COMPARISON_SUMMARY = (
    "Comparison analysis shows variations in oceanographic parameters across different locations and time "
    "periods. The data reveals spatial and temporal patterns that are important for understanding ocean "
    "dynamics and climate variability in the Indian Ocean region."
)


def _format_date(value: Optional[str]) -> str:
    return value[:10] if value else "an unknown date"


def _profiles_with(data: List[Dict[str, Any]], key: str) -> List[Dict[str, Any]]:
    return [d for d in data if d.get(key)]


def _float_id_of(row: Dict[str, Any]) -> Optional[str]:
    if row.get('float_id'):
        return row['float_id']
    nested = row.get('argo_floats') or {}
    return nested.get('float_id')


def generate_temperature_response(query: str, analysis: QueryAnalysis, data: List[Dict[str, Any]]) -> str:
    if not data:
        return NO_DATA_MESSAGES[TEMPERATURE_QUERY]

    float_id = analysis.parameters.get('floatId')
    if float_id:
        profile = next(
            (d for d in _profiles_with(data, 'depth_measurements') if _float_id_of(d) == float_id),
            None
        )
        if profile:
            measurements = profile['depth_measurements']
            surface = next((m for m in measurements if m['depth_meters'] <= 10), measurements[0])
            deep = measurements[-1]
            max_depth = max(m['depth_meters'] for m in measurements)
            region = get_ocean_region(profile['latitude'], profile['longitude'])

            return (
                f"Temperature profile for ARGO float {float_id}:\n\n"
                f"• Surface temperature: {surface['temperature_celsius']:.1f}°C\n"
                f"• Deep temperature: {deep['temperature_celsius']:.1f}°C at {max_depth:g}m\n"
                f"• Profile shows typical {region} thermal structure\n"
                f"• Data collected on {_format_date(profile['profile_date'])}\n\n"
                f"The temperature decreases with depth, showing the typical thermocline structure of tropical waters."
            )

    return TEMPERATURE_SUMMARY


def generate_salinity_response(query: str, analysis: QueryAnalysis, data: List[Dict[str, Any]]) -> str:
    if not data:
        return NO_DATA_MESSAGES[SALINITY_QUERY]

    profiles = _profiles_with(data, 'depth_measurements')
    if profiles:
        profile = profiles[0]
        values = [m['salinity_psu'] for m in profile['depth_measurements'] if m['salinity_psu'] is not None]
        if values:
            return (
                f"Salinity profile for ARGO float {_float_id_of(profile)} "
                f"({get_ocean_region(profile['latitude'], profile['longitude'])}):\n\n"
                f"• Surface salinity: {values[0]:.2f} PSU\n"
                f"• Deep salinity: {values[-1]:.2f} PSU\n"
                f"• Range: {min(values):.2f} to {max(values):.2f} PSU\n\n"
                f"Higher values below the surface reflect the high evaporation rates of the region."
            )

    return SALINITY_SUMMARY


def generate_bgc_response(query: str, analysis: QueryAnalysis, data: List[Dict[str, Any]]) -> str:
    if not data:
        return NO_DATA_MESSAGES[BGC_QUERY]

    profiles = _profiles_with(data, 'bgc_measurements')
    if profiles:
        profile = profiles[0]
        rows = profile['bgc_measurements']
        oxygen = [m['oxygen_umol_kg'] for m in rows if m['oxygen_umol_kg'] is not None]
        if oxygen:
            min_row = min(rows, key=lambda m: m['oxygen_umol_kg'] if m['oxygen_umol_kg'] is not None else float('inf'))
            return (
                f"Biogeochemical profile for ARGO float {_float_id_of(profile)}:\n\n"
                f"• Surface oxygen: {oxygen[0]:.1f} μmol/kg\n"
                f"• Minimum oxygen: {min(oxygen):.1f} μmol/kg at {min_row['depth_meters']:g}m\n"
                f"• Surface pH: {rows[0]['ph_total']:.2f}, nitrate {rows[0]['nitrate_umol_kg']:.1f} μmol/kg\n"
                f"• Deepest level sampled: {rows[-1]['depth_meters']:g}m\n\n"
                f"Oxygen declines with depth towards the oxygen minimum zone typical of the Arabian Sea."
            )

    return BGC_SUMMARY


def generate_location_response(query: str, analysis: QueryAnalysis, data: List[Dict[str, Any]]) -> str:
    if not data:
        return NO_DATA_MESSAGES[FLOAT_LOCATION_QUERY]

    float_data = next((d for d in data if d.get('float_id') or d.get('argo_floats')), None)
    if float_data:
        lat = float_data.get('latitude', float_data.get('deployment_latitude'))
        lon = float_data.get('longitude', float_data.get('deployment_longitude'))
        if lat is not None and lon is not None:
            region = get_ocean_region(lat, lon)
            last_seen = float_data.get('last_transmission') or float_data.get('profile_date')

            return (
                f"ARGO float location information:\n\n"
                f"• Current/Last position: {lat:.2f}°N, {lon:.2f}°E\n"
                f"• Region: {region}\n"
                f"• Status: {float_data.get('status') or 'Active'}\n"
                f"• Last transmission: {_format_date(last_seen)}\n\n"
                f"This float is operating in the {region}, providing valuable oceanographic data for climate research."
            )

    return LOCATION_SUMMARY


def generate_comparison_response(query: str, analysis: QueryAnalysis, data: List[Dict[str, Any]]) -> str:
    if not data:
        return NO_DATA_MESSAGES[COMPARISON_QUERY]

    surface = []
    for profile in _profiles_with(data, 'depth_measurements'):
        first = profile['depth_measurements'][0]
        if first['temperature_celsius'] is not None:
            surface.append((_float_id_of(profile), profile.get('cycle_number'), first['temperature_celsius']))

    if len(surface) >= 2:
        lines = [f"• Float {fid} (cycle {cycle}): {temp:.1f}°C" for fid, cycle, temp in surface]
        temps = [temp for _, _, temp in surface]
        return (
            "Surface temperature comparison across profiles:\n\n"
            + "\n".join(lines)
            + f"\n\nThe spread between the warmest and coolest profile is {max(temps) - min(temps):.2f}°C."
        )

    return COMPARISON_SUMMARY


def generate_general_response(query: str, analysis: QueryAnalysis, data: List[Dict[str, Any]]) -> str:
    if not data:
        return NO_DATA_MESSAGES[GENERAL_QUERY]

    return (
        f"I found {len(data)} relevant records in the ARGO database. The data includes temperature, salinity, "
        f"and biogeochemical measurements from autonomous floats in the Indian Ocean region. This information "
        f"is valuable for understanding ocean conditions and climate patterns. Would you like me to provide "
        f"more specific details about any particular aspect?"
    )


RESPONSE_GENERATORS = {
    TEMPERATURE_QUERY: generate_temperature_response,
    SALINITY_QUERY: generate_salinity_response,
    BGC_QUERY: generate_bgc_response,
    FLOAT_LOCATION_QUERY: generate_location_response,
    COMPARISON_QUERY: generate_comparison_response,
}


def generate_response(query: str, analysis: QueryAnalysis, data: List[Dict[str, Any]]) -> str:
    """Fill the template for the analysed query type"""
    generator = RESPONSE_GENERATORS.get(analysis.type, generate_general_response)
    return generator(query, analysis, data)
