"""
Ocean region lookup for the northern Indian Ocean study area.
"""

# (name, lat_min, lat_max, lon_min, lon_max), checked in order
REGION_BOXES = [
    ("Arabian Sea", 0, 30, 40, 100),
    ("Bay of Bengal", -10, 30, 90, 120),
    ("Indian Ocean", -10, 30, 20, 120),
]

DEFAULT_REGION = "Indian Ocean region"


def get_ocean_region(lat: float, lon: float) -> str:
    """Determine ocean region based on coordinates"""
    if lat is None or lon is None:
        return DEFAULT_REGION

    for name, lat_min, lat_max, lon_min, lon_max in REGION_BOXES:
        if lat_min <= lat <= lat_max and lon_min <= lon <= lon_max:
            return name

    return DEFAULT_REGION
