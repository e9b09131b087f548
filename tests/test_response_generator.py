import pytest

from floatchat.rag import NO_DATA_MESSAGES, QUERY_TYPES, analyze_query, generate_response
from floatchat.utils import DEFAULT_REGION, get_ocean_region


def make_profile(float_id="5906468", cycle=245, surface_temp=28.4, lat=15.52, lon=68.18):
    return {
        'id': cycle,
        'float_id': float_id,
        'profile_date': "2024-12-20T10:30:00",
        'latitude': lat,
        'longitude': lon,
        'cycle_number': cycle,
        'depth_measurements': [
            {'depth_meters': 5.0, 'temperature_celsius': surface_temp, 'salinity_psu': 34.81},
            {'depth_meters': 200.0, 'temperature_celsius': 24.5, 'salinity_psu': 35.30},
            {'depth_meters': 2000.0, 'temperature_celsius': 2.2, 'salinity_psu': 35.10},
        ],
        'bgc_measurements': [
            {'depth_meters': 5.0, 'oxygen_umol_kg': 217.5, 'nitrate_umol_kg': 2.6, 'ph_total': 8.1},
            {'depth_meters': 500.0, 'oxygen_umol_kg': 125.0, 'nitrate_umol_kg': 13.5, 'ph_total': 7.65},
            {'depth_meters': 1000.0, 'oxygen_umol_kg': 100.0, 'nitrate_umol_kg': 30.2, 'ph_total': 7.7},
        ],
    }


class TestRegions:

    @pytest.mark.parametrize("lat,lon,region", [
        (15, 68, "Arabian Sea"),
        (15.5, 68.2, "Arabian Sea"),
        (5, 105, "Bay of Bengal"),
        (-5, 95, "Bay of Bengal"),
        (-5, 50, "Indian Ocean"),
        (-20, 60, "Indian Ocean region"),
        (45, -30, "Indian Ocean region"),
    ])
    def test_lookup(self, lat, lon, region):
        assert get_ocean_region(lat, lon) == region

    def test_missing_coordinates(self):
        assert get_ocean_region(None, 68.2) == DEFAULT_REGION


class TestNoDataMessages:

    @pytest.mark.parametrize("query_type", QUERY_TYPES)
    def test_every_type_has_a_message(self, query_type):
        assert NO_DATA_MESSAGES[query_type]

    @pytest.mark.parametrize("query,query_type", [
        ("temperature for float 5906468", "temperature_query"),
        ("salinity for float 5906468", "salinity_query"),
        ("oxygen for float 5906468", "bgc_query"),
        ("float 5906468 location", "float_location_query"),
        ("compare floats", "comparison_query"),
        ("hello", "general_query"),
    ])
    def test_empty_data(self, query, query_type):
        analysis = analyze_query(query)
        assert analysis.type == query_type
        assert generate_response(query, analysis, []) == NO_DATA_MESSAGES[query_type]

    def test_temperature_message_text(self):
        assert NO_DATA_MESSAGES["temperature_query"].startswith(
            "I don't have temperature data available for your query."
        )


class TestTemplates:

    def test_temperature_for_float(self):
        query = "temperature for float 5906468"
        response = generate_response(query, analyze_query(query), [make_profile()])

        assert response.startswith("Temperature profile for ARGO float 5906468:")
        assert "Surface temperature: 28.4°C" in response
        assert "Deep temperature: 2.2°C at 2000m" in response
        assert "typical Arabian Sea thermal structure" in response
        assert "Data collected on 2024-12-20" in response

    def test_temperature_without_float_gives_summary(self):
        query = "what is the temperature?"
        response = generate_response(query, analyze_query(query), [make_profile()])
        assert "warm surface waters (28-29°C)" in response

    def test_salinity(self):
        query = "salinity please"
        response = generate_response(query, analyze_query(query), [make_profile()])

        assert "Salinity profile for ARGO float 5906468 (Arabian Sea)" in response
        assert "Range: 34.81 to 35.30 PSU" in response

    def test_bgc(self):
        query = "oxygen levels"
        response = generate_response(query, analyze_query(query), [make_profile()])

        assert "Surface oxygen: 217.5 μmol/kg" in response
        assert "Minimum oxygen: 100.0 μmol/kg at 1000m" in response

    def test_location_uses_float_row(self):
        float_row = {
            'float_id': "5906470",
            'deployment_latitude': 18.2,
            'deployment_longitude': 65.8,
            'status': 'active',
            'last_transmission': "2024-12-18T09:45:00",
        }
        query = "float 5906470 location"
        response = generate_response(query, analyze_query(query), [float_row])

        assert "Current/Last position: 18.20°N, 65.80°E" in response
        assert "Region: Arabian Sea" in response
        assert "Last transmission: 2024-12-18" in response

    def test_comparison_of_two_profiles(self):
        query = "compare floats"
        data = [make_profile(), make_profile(float_id="5906469", cycle=189, surface_temp=27.9)]
        response = generate_response(query, analyze_query(query), data)

        assert "Float 5906468 (cycle 245): 28.4°C" in response
        assert "Float 5906469 (cycle 189): 27.9°C" in response
        assert "0.50°C" in response

    def test_general_counts_records(self):
        response = generate_response("hello", analyze_query("hello"), [make_profile(), make_profile(cycle=1)])
        assert response.startswith("I found 2 relevant records in the ARGO database.")
