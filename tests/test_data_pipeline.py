import pytest

from floatchat.ingestion import NetCDFProcessor, ProfileSynthesizer
from floatchat.ingestion.sample_files import build_dataset, generate_sample_files, sample_filename
from floatchat.utils.data_pipeline import DataProcessor


@pytest.fixture
def pipeline(gateway, rng):
    return DataProcessor(NetCDFProcessor(gateway, rng=rng))


def test_process_directory(pipeline, gateway, tmp_path):
    for name in ["R5906468_001.nc", "R5906468_002.nc", "notes.nc", "README.txt"]:
        (tmp_path / name).write_bytes(b"")

    summary = pipeline.process_directory(str(tmp_path))

    assert summary['total_files'] == 3
    assert summary['successful_files'] == 2
    assert summary['failed_files'] == 1
    assert len(summary['profile_ids']) == 2
    assert summary['errors'] == ["notes.nc: Invalid NetCDF filename format: notes.nc"]

    stats = pipeline.get_processing_stats()
    assert stats['database_stats']['total_profiles'] == 2
    assert stats['database_stats']['files_by_status'] == {'completed': 2, 'error': 1}
    assert len(stats['recent_processing']) == 3


def test_empty_directory(pipeline, tmp_path):
    summary = pipeline.process_directory(str(tmp_path))

    assert summary['total_files'] == 0
    assert summary['errors'] == []


def test_missing_directory(pipeline, tmp_path):
    with pytest.raises(ValueError):
        pipeline.process_directory(str(tmp_path / "missing"))


def test_single_file_failure_returns_none(pipeline, tmp_path):
    assert pipeline.process_single_file(str(tmp_path / "garbage.nc")) is None


def test_sample_filename():
    assert sample_filename("5906468", 7) == "R5906468_007.nc"


def test_build_dataset(rng):
    profile = ProfileSynthesizer(rng).synthesize("R5906468_245.nc")

    dataset = build_dataset(profile)

    assert dataset.sizes['N_PROF'] == 1
    assert dataset.sizes['N_LEVELS'] == 21
    assert int(dataset['CYCLE_NUMBER'].values[0]) == 245
    assert str(dataset['PLATFORM_NUMBER'].values[0]) == "5906468"
    assert float(dataset['TEMP'].values[0, 0]) == pytest.approx(profile.measurements[0]['temperature_celsius'])
    # BGC levels stop at 1000 m, the deeper levels are NaN
    assert int(dataset['DOXY'].notnull().sum()) == 17
    assert float(dataset['JULD'].values[0]) > 0


def test_generated_files_can_be_processed(gateway, rng, tmp_path):
    files = generate_sample_files(str(tmp_path), ["5906468"], range(1, 3), rng=rng)

    assert sorted(p.split("/")[-1] for p in files) == ["R5906468_001.nc", "R5906468_002.nc"]

    summary = DataProcessor(NetCDFProcessor(gateway, rng=rng)).process_directory(str(tmp_path))
    assert summary['successful_files'] == 2
    assert gateway.get_file("R5906468_001.nc")['file_size_bytes'] > 0
