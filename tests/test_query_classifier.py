import pytest

from floatchat.rag import analyze_query, extract_float_ids, extract_parameters


@pytest.mark.parametrize("query,expected", [
    ("What is the temperature profile for float 5906468?", "temperature_query"),
    ("Show me temp readings", "temperature_query"),
    ("Show salinity data for float 5906469", "salinity_query"),
    ("How salty is the Arabian Sea?", "salinity_query"),
    ("What are the oxygen levels at 500m depth?", "bgc_query"),
    ("Nitrate near the surface", "bgc_query"),
    ("Where is the float 5906470 location?", "float_location_query"),
    ("Current position of each float", "float_location_query"),
    ("Compare profiles between floats", "comparison_query"),
    ("What is the difference between cycles?", "comparison_query"),
    ("Show me recent ARGO profiles", "general_query"),
    ("Hello", "general_query"),
])
def test_classification(query, expected):
    assert analyze_query(query).type == expected


class TestPrecedence:

    def test_first_matching_rule_wins(self):
        assert analyze_query("Compare temperature and salinity").type == "temperature_query"
        assert analyze_query("salinity vs oxygen").type == "salinity_query"

    def test_location_requires_float(self):
        assert analyze_query("What is the location of the data?").type == "general_query"

    def test_keywords_match_inside_words(self):
        # "ph" is a substring of "graph"
        assert analyze_query("Show a graph of floats").type == "bgc_query"

    def test_case_insensitive(self):
        assert analyze_query("TEMPERATURE FOR FLOAT 5906468").type == "temperature_query"


class TestAnalysisDetails:

    def test_temperature_needs_depth_measurements(self):
        analysis = analyze_query("temperature for float 5906468")
        assert analysis.visualizations == ["temperature_profile", "depth_chart"]
        assert analysis.data_needed == ["depth_measurements"]

    def test_location_needs_floats_and_profiles(self):
        analysis = analyze_query("float 5906470 position")
        assert analysis.visualizations == ["map", "trajectory"]
        assert analysis.data_needed == ["argo_floats", "ocean_profiles"]

    def test_general_fallback(self):
        analysis = analyze_query("Hello")
        assert analysis.visualizations == ["summary_chart"]
        assert analysis.data_needed == ["ocean_profiles", "depth_measurements"]
        assert analysis.parameters == {}


class TestParameterExtraction:

    def test_float_keyword(self):
        assert extract_parameters("data for float 123")['floatId'] == "123"

    def test_bare_seven_digit_id(self):
        assert extract_parameters("profiles of 5906468 please")['floatId'] == "5906468"

    def test_float_keyword_preferred_over_bare_id(self):
        assert extract_parameters("5906468 or Float 42?")['floatId'] == "42"

    @pytest.mark.parametrize("query,depth", [
        ("oxygen at 500m", 500),
        ("temperature at 200 meters", 200),
        ("salinity at 1000 metre", 1000),
        ("readings at 50 M", 50),
    ])
    def test_depth(self, query, depth):
        assert extract_parameters(query)['depth'] == depth

    @pytest.mark.parametrize("query,value", [
        ("profiles on 2024-12-20", "2024-12-20"),
        ("profiles on 2024/1/5", "2024/1/5"),
    ])
    def test_date(self, query, value):
        assert extract_parameters(query)['date'] == value

    def test_nothing_to_extract(self):
        assert extract_parameters("How warm is the ocean?") == {}

    def test_all_float_ids_in_order(self):
        assert extract_float_ids("compare float 5906468 vs float 5906469") == ["5906468", "5906469"]
        assert extract_float_ids("5906470 or Float 42, then 5906470 again") == ["5906470", "42"]
        assert extract_float_ids("Compare profiles between floats") == []
