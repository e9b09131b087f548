"""
Query classification for the chat assistant.

A query is lower-cased and checked against an ordered list of keyword rules;
the first rule with a matching keyword decides the query type. Float ids,
depths and dates are then pulled out with regular expressions.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

TEMPERATURE_QUERY = "temperature_query"
SALINITY_QUERY = "salinity_query"
BGC_QUERY = "bgc_query"
FLOAT_LOCATION_QUERY = "float_location_query"
COMPARISON_QUERY = "comparison_query"
GENERAL_QUERY = "general_query"

QUERY_TYPES = [
    TEMPERATURE_QUERY,
    SALINITY_QUERY,
    BGC_QUERY,
    FLOAT_LOCATION_QUERY,
    COMPARISON_QUERY,
    GENERAL_QUERY,
]

FLOAT_ID_PATTERNS = [
    re.compile(r"float\s+(\d+)", re.IGNORECASE),
    re.compile(r"(\d{7})"),
]
DEPTH_PATTERN = re.compile(r"(\d+)\s*(?:m|meter|metre)", re.IGNORECASE)
DATE_PATTERN = re.compile(r"(\d{4}[-/]\d{1,2}[-/]\d{1,2})")


@dataclass
class QueryAnalysis:
    """Result of classifying a user query"""
    type: str
    parameters: Dict[str, Any] = field(default_factory=dict)
    visualizations: List[str] = field(default_factory=list)
    data_needed: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class _Rule:
    query_type: str
    any_of: Tuple[str, ...]
    visualizations: Tuple[str, ...]
    data_needed: Tuple[str, ...]
    # Every keyword here must also be present
    requires: Tuple[str, ...] = ()

    def matches(self, text: str) -> bool:
        return all(word in text for word in self.requires) and any(word in text for word in self.any_of)


# Order matters: the first matching rule wins
RULES = [
    _Rule(TEMPERATURE_QUERY, ("temperature", "temp"),
          ("temperature_profile", "depth_chart"), ("depth_measurements",)),
    _Rule(SALINITY_QUERY, ("salinity", "salt"),
          ("salinity_profile", "depth_chart"), ("depth_measurements",)),
    _Rule(BGC_QUERY, ("oxygen", "nitrate", "ph", "chlorophyll"),
          ("bgc_profile", "oxygen_chart"), ("bgc_measurements",)),
    _Rule(FLOAT_LOCATION_QUERY, ("location", "position"),
          ("map", "trajectory"), ("argo_floats", "ocean_profiles"), requires=("float",)),
    _Rule(COMPARISON_QUERY, ("compare", "difference", "vs"),
          ("comparison_chart", "overlay_plot"), ("depth_measurements", "bgc_measurements")),
]

GENERAL_RULE = _Rule(GENERAL_QUERY, (), ("summary_chart",), ("ocean_profiles", "depth_measurements"))


def extract_parameters(query: str) -> Dict[str, Any]:
    """Extract float id, depth and date from a query; values are not validated"""
    params: Dict[str, Any] = {}

    float_id = _first_match(FLOAT_ID_PATTERNS, query)
    if float_id:
        params['floatId'] = float_id

    depth_match = DEPTH_PATTERN.search(query)
    if depth_match:
        params['depth'] = int(depth_match.group(1))

    date_match = DATE_PATTERN.search(query)
    if date_match:
        params['date'] = date_match.group(1)

    return params


def extract_float_ids(query: str) -> List[str]:
    """Every float id mentioned in a query, in order of appearance"""
    found = []
    for pattern in FLOAT_ID_PATTERNS:
        for match in pattern.finditer(query):
            found.append((match.start(1), match.group(1)))

    float_ids: List[str] = []
    for _, float_id in sorted(found):
        if float_id not in float_ids:
            float_ids.append(float_id)
    return float_ids


def _first_match(patterns, text: str) -> Optional[str]:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return match.group(1)
    return None


def analyze_query(query: str) -> QueryAnalysis:
    """Classify a query and extract its parameters"""
    lower_query = query.lower()

    rule = next((r for r in RULES if r.matches(lower_query)), GENERAL_RULE)

    return QueryAnalysis(
        type=rule.query_type,
        parameters=extract_parameters(query),
        visualizations=list(rule.visualizations),
        data_needed=list(rule.data_needed),
    )
