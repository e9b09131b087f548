"""
Sample ARGO Data Generator

Creates NetCDF files that mimic real ARGO profile files from synthesized
profiles, and seeds an empty database with the sample floats.
"""

import os
from datetime import datetime
from typing import Iterable, List, Optional
import logging

import numpy as np
import xarray as xr

from ..database.connection import DatabaseManager
from ..database.gateway import OceanDataGateway
from ..database.models import ArgoFloat, initialize_sample_data
from ..rag.vector_store import VectorEmbeddingsGenerator
from .netcdf_processor import ProfileSynthesizer, SyntheticProfile

logger = logging.getLogger(__name__)

REFERENCE_DATE = "19500101000000"  # ARGO reference for JULD


def build_dataset(profile: SyntheticProfile) -> xr.Dataset:
    """Lay a synthesized profile out as a single-profile ARGO dataset"""
    n_levels = len(profile.measurements)
    n_bgc = len(profile.bgc_data or [])

    def column(rows, key, length):
        values = np.full((1, n_levels), np.nan)
        values[0, :length] = [row[key] for row in rows]
        return (['N_PROF', 'N_LEVELS'], values)

    ref_datetime = datetime.strptime(REFERENCE_DATE, "%Y%m%d%H%M%S")
    juld = (profile.profile_date - ref_datetime).total_seconds() / 86400.0

    dataset = xr.Dataset(
        coords={
            'N_PROF': np.arange(1),
            'N_LEVELS': np.arange(n_levels)
        }
    )

    dataset['PLATFORM_NUMBER'] = (['N_PROF'], [profile.platform_number])
    dataset['CYCLE_NUMBER'] = (['N_PROF'], [profile.cycle_number])
    dataset['LATITUDE'] = (['N_PROF'], [profile.latitude])
    dataset['LONGITUDE'] = (['N_PROF'], [profile.longitude])
    dataset['REFERENCE_DATE_TIME'] = (['N_PROF'], [REFERENCE_DATE])
    dataset['JULD'] = (['N_PROF'], [juld])
    dataset['DATA_MODE'] = (['N_PROF'], ['R'])
    dataset['DIRECTION'] = (['N_PROF'], ['A'])

    dataset['PRES'] = column(profile.measurements, 'pressure_dbar', n_levels)
    dataset['TEMP'] = column(profile.measurements, 'temperature_celsius', n_levels)
    dataset['PSAL'] = column(profile.measurements, 'salinity_psu', n_levels)

    if n_bgc:
        dataset['DOXY'] = column(profile.bgc_data, 'oxygen_umol_kg', n_bgc)
        dataset['NITRATE'] = column(profile.bgc_data, 'nitrate_umol_kg', n_bgc)
        dataset['PH_IN_SITU_TOTAL'] = column(profile.bgc_data, 'ph_total', n_bgc)
        dataset['CHLA'] = column(profile.bgc_data, 'chlorophyll_mg_m3', n_bgc)
        dataset['BBP700'] = column(profile.bgc_data, 'backscatter_m1', n_bgc)

    dataset.attrs.update({
        'title': 'Synthetic ARGO profile data',
        'institution': 'FloatChat sample generator',
        'date_created': datetime.utcnow().strftime('%Y-%m-%dT%H:%M:%SZ'),
        'Conventions': 'Argo-3.1 CF-1.6',
        'format_version': '3.1'
    })

    return dataset


def sample_filename(float_id: str, cycle_number: int) -> str:
    return f"R{float_id}_{cycle_number:03d}.nc"


def generate_sample_files(output_dir: str, float_ids: Iterable[str], cycles: Iterable[int],
                          rng: Optional[np.random.Generator] = None) -> List[str]:
    """
    Write one NetCDF file per (float, cycle) pair

    Returns:
        Paths of the files written
    """
    os.makedirs(output_dir, exist_ok=True)
    synthesizer = ProfileSynthesizer(rng)

    cycles = list(cycles)
    generated_files = []
    for float_id in float_ids:
        for cycle in cycles:
            filename = sample_filename(float_id, cycle)
            filepath = os.path.join(output_dir, filename)
            dataset = build_dataset(synthesizer.synthesize(filename))
            try:
                dataset.to_netcdf(filepath)
                generated_files.append(filepath)
                logger.info(f"Generated: {filename}")
            except Exception as e:
                logger.error(f"Failed to save {filename}: {e}")
            finally:
                dataset.close()

    logger.info(f"Generated {len(generated_files)} sample ARGO files in {output_dir}")
    return generated_files


def seed_sample_data(db: DatabaseManager, rng: Optional[np.random.Generator] = None) -> bool:
    """
    Load the sample floats and profiles into an empty database

    Returns:
        True if data was inserted, False if floats already existed
    """
    with db.session_scope() as session:
        if session.query(ArgoFloat).count() > 0:
            logger.info("Database already holds floats, skipping sample data")
            return False

        floats, profiles = initialize_sample_data()
        session.add_all(floats)
        session.flush()
        session.add_all(profiles)
        session.flush()
        profile_ids = [p.id for p in profiles]

    gateway = OceanDataGateway(db)
    synthesizer = ProfileSynthesizer(rng)
    embeddings = VectorEmbeddingsGenerator(gateway, rng=rng)
    for profile_id in profile_ids:
        gateway.insert_depth_measurements(profile_id, synthesizer.generate_depth_measurements())
        gateway.insert_bgc_measurements(profile_id, synthesizer.generate_bgc_measurements())
        embeddings.generate_profile_embeddings(profile_id)

    logger.info(f"Seeded {len(floats)} floats and {len(profile_ids)} profiles")
    return True


if __name__ == "__main__":
    import sys
    from ..config import Config

    logging.basicConfig(level=Config.LOG_LEVEL)

    # Command line usage
    n_cycles = int(sys.argv[1]) if len(sys.argv) > 1 else 3
    output_dir = sys.argv[2] if len(sys.argv) > 2 else Config.SAMPLE_DATA_DIR

    files = generate_sample_files(output_dir, ['5906468', '5906469', '5906470'], range(1, n_cycles + 1))
    print(f"Successfully generated {len(files)} files in {output_dir}")
