from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
import time

import pytest

from floatchat.database import DatabaseError, connection, initialize_sample_data
from floatchat.ingestion.sample_files import seed_sample_data


def add_profile(gateway, float_id="5906468", cycle=1, when=datetime(2024, 12, 20, 10, 30)):
    gateway.upsert_float(float_id, platform_number=float_id)
    profile_id = gateway.insert_profile(float_id, when, 15.5, 68.2, cycle)
    gateway.insert_depth_measurements(profile_id, [
        {'depth_meters': 5.0, 'pressure_dbar': 5.1, 'temperature_celsius': 28.4, 'salinity_psu': 34.8},
        {'depth_meters': 1000.0, 'pressure_dbar': 1020.0, 'temperature_celsius': 3.2, 'salinity_psu': 35.0},
    ])
    gateway.insert_bgc_measurements(profile_id, [
        {'depth_meters': 5.0, 'oxygen_umol_kg': 217.5, 'nitrate_umol_kg': 2.6, 'ph_total': 8.1,
         'chlorophyll_mg_m3': 0.78, 'backscatter_m1': 0.001},
    ])
    return profile_id


class TestDatabaseManager:

    def test_connection(self, db):
        assert db.test_connection() is True

    def test_raw_sql_returns_dicts(self, db, gateway):
        gateway.upsert_float("5906468", status='active')
        rows = db.execute_raw_sql("SELECT float_id, status FROM argo_floats WHERE float_id = :fid",
                                  {'fid': "5906468"})
        assert rows == [{'float_id': "5906468", 'status': 'active'}]

    def test_raw_sql_errors_are_wrapped(self, db):
        with pytest.raises(DatabaseError):
            db.execute_raw_sql("SELECT * FROM no_such_table")

    def test_global_manager_built_once_under_concurrency(self, monkeypatch):
        built = []

        def slow_manager():
            time.sleep(0.01)
            built.append(object())
            return built[-1]

        monkeypatch.setattr(connection, "db_manager", None)
        monkeypatch.setattr(connection, "DatabaseManager", slow_manager)

        with ThreadPoolExecutor(max_workers=8) as pool:
            managers = list(pool.map(lambda _: connection.get_db_manager(), range(8)))

        assert len(built) == 1
        assert all(m is built[0] for m in managers)

    def test_row_count_rejects_unknown_table(self, db):
        with pytest.raises(DatabaseError):
            db.get_table_row_count("argo_floats; DROP TABLE argo_floats")


class TestFloats:

    def test_upsert_inserts_then_updates(self, gateway):
        gateway.upsert_float("5906468", status='active', deployment_latitude=15.5)
        updated = gateway.upsert_float("5906468", status='inactive')

        assert updated['status'] == 'inactive'
        assert updated['deployment_latitude'] == 15.5
        assert len(gateway.list_floats()) == 1

    def test_missing_float(self, gateway):
        assert gateway.get_float("0000000") is None


class TestProfiles:

    def test_profile_includes_float_and_measurements(self, gateway):
        profile_id = add_profile(gateway)

        profile = gateway.get_profile(profile_id)

        assert profile['argo_floats']['float_id'] == "5906468"
        assert [m['depth_meters'] for m in profile['depth_measurements']] == [5.0, 1000.0]
        assert profile['bgc_measurements'][0]['oxygen_umol_kg'] == 217.5
        assert profile['profile_date'] == "2024-12-20T10:30:00"

    def test_delete_cascades_to_measurements(self, db, gateway):
        profile_id = add_profile(gateway)

        assert gateway.delete_profile(profile_id) is True

        assert gateway.get_profile(profile_id) is None
        assert db.get_table_row_count('depth_measurements') == 0
        assert db.get_table_row_count('bgc_measurements') == 0
        assert gateway.delete_profile(profile_id) is False

    def test_recent_profiles_newest_first(self, gateway):
        add_profile(gateway, cycle=1, when=datetime(2024, 12, 1))
        add_profile(gateway, cycle=2, when=datetime(2024, 12, 11))
        add_profile(gateway, float_id="5906469", cycle=7, when=datetime(2024, 12, 5))

        assert [p['cycle_number'] for p in gateway.get_recent_profiles(limit=5)] == [2, 7, 1]
        assert [p['cycle_number'] for p in gateway.get_recent_profiles(float_id="5906468")] == [2, 1]

    def test_latest_profile_caps_measurements(self, gateway):
        add_profile(gateway, cycle=1, when=datetime(2024, 12, 1))
        add_profile(gateway, cycle=2, when=datetime(2024, 12, 11))

        latest = gateway.get_latest_profile_for_float("5906468", measurement_limit=1)

        assert latest['cycle_number'] == 2
        assert len(latest['depth_measurements']) == 1
        assert gateway.get_latest_profile_for_float("0000000") is None

    def test_depth_measurements_across_profiles_by_depth(self, gateway):
        add_profile(gateway, cycle=1, when=datetime(2024, 12, 1))
        add_profile(gateway, cycle=2, when=datetime(2024, 12, 11))
        add_profile(gateway, float_id="5906469", cycle=1)

        rows = gateway.get_depth_measurements_for_float("5906468", limit=3)

        assert [r['depth_meters'] for r in rows] == [5.0, 5.0, 1000.0]
        assert len(gateway.get_depth_measurements_for_float("5906468")) == 4
        assert gateway.get_depth_measurements_for_float("0000000") == []


class TestFiles:

    def test_status_lifecycle(self, gateway):
        record = gateway.register_file("R5906468_245.nc", file_path="/data/R5906468_245.nc")
        assert record['processing_status'] == 'pending'
        assert record['processed_at'] is None

        gateway.update_file_status("R5906468_245.nc", 'processing')
        assert gateway.get_file("R5906468_245.nc")['processing_status'] == 'processing'

        gateway.update_file_status("R5906468_245.nc", 'completed')
        record = gateway.get_file("R5906468_245.nc")
        assert record['processing_status'] == 'completed'
        assert record['processed_at'] is not None

    def test_error_message_cleared_on_later_status(self, gateway):
        gateway.register_file("R5906468_245.nc")
        gateway.update_file_status("R5906468_245.nc", 'error', "db hiccup")
        assert gateway.get_file("R5906468_245.nc")['error_message'] == "db hiccup"

        gateway.update_file_status("R5906468_245.nc", 'completed')
        assert gateway.get_file("R5906468_245.nc")['error_message'] is None

    def test_register_is_idempotent(self, gateway):
        gateway.register_file("R5906468_245.nc", file_path="/a")
        gateway.register_file("R5906468_245.nc", file_path="/b", file_size_bytes=10)

        files = gateway.get_recent_files()
        assert len(files) == 1
        assert files[0]['file_path'] == "/b"
        assert files[0]['file_size_bytes'] == 10

    def test_update_unknown_file(self, gateway):
        assert gateway.update_file_status("missing.nc", 'completed') is False
        assert gateway.get_file("missing.nc") is None


class TestChatSessions:

    def test_session_id_is_not_unique(self, gateway):
        gateway.insert_chat_session("session_1", "first", "answer one", "general_query", 3)
        gateway.insert_chat_session("session_1", "second", "answer two", "general_query", 4)
        gateway.insert_chat_session("session_2", "other", "answer", "general_query", 1)

        rows = gateway.get_chat_sessions("session_1")

        assert [r['user_query'] for r in rows] == ["first", "second"]
        assert gateway.get_recent_chat_sessions(limit=1)[0]['user_query'] == "other"


class TestSampleData:

    def test_sample_records(self):
        floats, profiles = initialize_sample_data()

        assert [f.float_id for f in floats] == ["5906468", "5906469", "5906470", "5906471"]
        assert [f.status for f in floats].count('inactive') == 1
        assert len(profiles) == 6

    def test_seed_and_statistics(self, db, gateway, rng):
        assert seed_sample_data(db, rng=rng) is True
        assert seed_sample_data(db, rng=rng) is False

        stats = gateway.get_statistics()

        assert stats['total_floats'] == 4
        assert stats['active_floats'] == 3
        assert stats['total_profiles'] == 6
        assert stats['depth_measurements'] == 6 * 21
        assert stats['bgc_measurements'] == 6 * 17
        assert stats['data_points'] == 6 * (21 + 17)
        assert stats['embeddings'] == 6 * 4
        assert stats['chat_queries'] == 0
        assert stats['files_by_status'] == {}
