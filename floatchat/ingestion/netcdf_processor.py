"""
NetCDF Processing Pipeline

Turns an ARGO NetCDF filename into a synthetic profile and stores it. The
float id and cycle number come from the filename; the measurements are
generated from piecewise depth formulas with a small random jitter, so no
file contents are read.
"""

import os
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Tuple
import logging

import numpy as np

from ..database.gateway import OceanDataGateway
from ..rag.vector_store import VectorEmbeddingsGenerator

logger = logging.getLogger(__name__)

FILENAME_PATTERN = re.compile(r"R(\d+)_(\d+)\.nc")

PHYSICAL_DEPTHS = [
    5, 10, 20, 30, 50, 75, 100, 125, 150, 200, 250, 300, 400, 500, 600, 750, 1000, 1250, 1500, 1750, 2000,
]
BGC_DEPTHS = PHYSICAL_DEPTHS[:17]

PRESSURE_FACTOR = 1.02  # dbar per meter, approximate

# Nominal float position in the Arabian Sea
BASE_LATITUDE = 15.5
BASE_LONGITUDE = 68.2
POSITION_JITTER = 0.1


class NetCDFFormatError(ValueError):
    """Raised when a filename does not follow the R<float>_<cycle>.nc convention"""
    pass


@dataclass
class SyntheticProfile:
    """Data class to represent a synthesized ARGO profile"""
    float_id: str
    platform_number: str
    profile_date: datetime
    latitude: float
    longitude: float
    cycle_number: int
    measurements: List[Dict[str, float]] = field(default_factory=list)
    bgc_data: Optional[List[Dict[str, float]]] = None


def parse_netcdf_filename(filename: str) -> Tuple[str, int]:
    """
    Extract the float id and cycle number from a NetCDF filename

    Args:
        filename: Name such as 'R5906468_245.nc'

    Returns:
        Tuple of (float_id, cycle_number)
    """
    match = FILENAME_PATTERN.search(filename or "")
    if not match:
        raise NetCDFFormatError(f"Invalid NetCDF filename format: {filename}")

    return match.group(1), int(match.group(2))


class ProfileSynthesizer:
    """Generates profile measurements from depth; the random source can be injected"""

    def __init__(self, rng: Optional[np.random.Generator] = None):
        self.rng = rng if rng is not None else np.random.default_rng()

    def _jitter(self, width: float) -> float:
        return (self.rng.random() - 0.5) * width

    def synthesize(self, filename: str) -> SyntheticProfile:
        """
        Build the profile a NetCDF file with this name would hold

        Raises:
            NetCDFFormatError: if the filename does not match R<digits>_<digits>.nc
        """
        float_id, cycle_number = parse_netcdf_filename(filename)

        profile = SyntheticProfile(
            float_id=float_id,
            platform_number=float_id,
            profile_date=datetime.utcnow(),
            latitude=BASE_LATITUDE + self._jitter(POSITION_JITTER),
            longitude=BASE_LONGITUDE + self._jitter(POSITION_JITTER),
            cycle_number=cycle_number,
            measurements=self.generate_depth_measurements(),
            bgc_data=self.generate_bgc_measurements(),
        )

        return profile

    def generate_depth_measurements(self) -> List[Dict[str, float]]:
        """Temperature and salinity at the standard physical levels"""
        return [
            {
                'depth_meters': float(depth),
                'pressure_dbar': depth * PRESSURE_FACTOR,
                'temperature_celsius': self.calculate_temperature(depth),
                'salinity_psu': self.calculate_salinity(depth),
            }
            for depth in PHYSICAL_DEPTHS
        ]

    def generate_bgc_measurements(self) -> List[Dict[str, float]]:
        """Biogeochemical readings at the standard BGC levels"""
        return [
            {
                'depth_meters': float(depth),
                'oxygen_umol_kg': self.calculate_oxygen(depth),
                'nitrate_umol_kg': self.calculate_nitrate(depth),
                'ph_total': self.calculate_ph(depth),
                'chlorophyll_mg_m3': self.calculate_chlorophyll(depth),
                'backscatter_m1': self.calculate_backscatter(depth),
            }
            for depth in BGC_DEPTHS
        ]

    # Tropical Indian Ocean profile shapes: mixed layer, thermocline, deep water

    def calculate_temperature(self, depth: float) -> float:
        if depth < 100:
            return 28.5 - depth * 0.02 + self._jitter(0.5)
        if depth < 500:
            return 26.5 - depth * 0.01 + self._jitter(0.3)
        return 4.2 - depth * 0.001 + self._jitter(0.2)

    def calculate_salinity(self, depth: float) -> float:
        if depth < 100:
            return 34.8 + depth * 0.001 + self._jitter(0.1)
        if depth < 500:
            return 35.2 + depth * 0.0005 + self._jitter(0.05)
        return 34.9 + depth * 0.0001 + self._jitter(0.03)

    def calculate_oxygen(self, depth: float) -> float:
        if depth < 100:
            return 220 - depth * 0.5 + self._jitter(10)
        if depth < 500:
            return 180 - depth * 0.2 + self._jitter(8)
        return 150 - depth * 0.05 + self._jitter(5)

    def calculate_nitrate(self, depth: float) -> float:
        if depth < 100:
            return 2.5 + depth * 0.02 + self._jitter(0.5)
        if depth < 500:
            return 8.5 + depth * 0.01 + self._jitter(1.0)
        return 25.2 + depth * 0.005 + self._jitter(2.0)

    def calculate_ph(self, depth: float) -> float:
        if depth < 100:
            return 8.1 - depth * 0.001 + self._jitter(0.05)
        if depth < 500:
            return 7.9 - depth * 0.0005 + self._jitter(0.03)
        return 7.8 - depth * 0.0001 + self._jitter(0.02)

    def calculate_chlorophyll(self, depth: float) -> float:
        if depth < 100:
            return max(0.0, 0.8 - depth * 0.005 + self._jitter(0.1))
        if depth < 200:
            return max(0.0, 0.3 - depth * 0.001 + self._jitter(0.05))
        return 0.05 + self._jitter(0.01)

    def calculate_backscatter(self, depth: float) -> float:
        if depth < 100:
            return 0.001 + depth * 0.00001 + self._jitter(0.0002)
        return 0.002 + depth * 0.000001 + self._jitter(0.0001)


class NetCDFProcessor:
    """Synthesizes profiles from NetCDF filenames and stores them"""

    def __init__(self, gateway: Optional[OceanDataGateway] = None,
                 embeddings: Optional[VectorEmbeddingsGenerator] = None,
                 rng: Optional[np.random.Generator] = None):
        self.gateway = gateway or OceanDataGateway()
        self.embeddings = embeddings or VectorEmbeddingsGenerator(self.gateway, rng=rng)
        self.synthesizer = ProfileSynthesizer(rng)

    def process_netcdf_file(self, filename: str, file_path: Optional[str] = None) -> SyntheticProfile:
        """
        Simulate reading a NetCDF file and extracting its ARGO profile

        Raises:
            NetCDFFormatError: if the filename does not match R<digits>_<digits>.nc
        """
        logger.info(f"Processing NetCDF file: {filename}")

        profile = self.synthesizer.synthesize(filename)

        logger.info(f"Extracted profile data for float {profile.float_id}, cycle {profile.cycle_number}")
        return profile

    def store_profile_data(self, profile: SyntheticProfile) -> int:
        """
        Store a synthesized profile and its measurements

        Returns:
            Database id of the new profile
        """
        logger.info(f"Storing profile data for float {profile.float_id}")

        try:
            float_fields = {
                'platform_number': profile.platform_number,
                'deployment_latitude': profile.latitude,
                'deployment_longitude': profile.longitude,
                'status': 'active',
                'last_transmission': profile.profile_date,
            }
            if self.gateway.get_float(profile.float_id) is None:
                float_fields['deployment_date'] = profile.profile_date.date()
            self.gateway.upsert_float(profile.float_id, **float_fields)

            profile_id = self.gateway.insert_profile(
                float_id=profile.float_id,
                profile_date=profile.profile_date,
                latitude=profile.latitude,
                longitude=profile.longitude,
                cycle_number=profile.cycle_number,
            )

            self.gateway.insert_depth_measurements(profile_id, profile.measurements)
            if profile.bgc_data:
                self.gateway.insert_bgc_measurements(profile_id, profile.bgc_data)

            logger.info(f"Successfully stored profile data for float {profile.float_id}")
            return profile_id

        except Exception as e:
            logger.error(f"Error storing profile data: {e}")
            raise

    def register_file(self, filename: str, file_path: Optional[str] = None) -> Dict:
        """Record the file in netcdf_files, with its size when it exists on disk"""
        file_size = None
        if file_path and os.path.isfile(file_path):
            file_size = os.path.getsize(file_path)
        return self.gateway.register_file(filename, file_path=file_path, file_size_bytes=file_size)

    def process_and_store(self, filename: str, file_path: Optional[str] = None) -> int:
        """
        Process a NetCDF file, store the profile and index it for chat

        Returns:
            Database id of the stored profile
        """
        self.register_file(filename, file_path)

        try:
            self.update_file_status(filename, 'processing')

            profile = self.process_netcdf_file(filename, file_path)
            profile_id = self.store_profile_data(profile)

            self.update_file_status(filename, 'completed')
            logger.info(f"Successfully processed and stored {filename}")

        except Exception as e:
            logger.error(f"Error processing {filename}: {e}")
            self.update_file_status(filename, 'error', str(e) or 'Unknown error')
            raise

        try:
            self.embeddings.generate_profile_embeddings(profile_id)
        except Exception as e:
            logger.error(f"Failed to create embeddings for profile {profile_id}: {e}")

        return profile_id

    def update_file_status(self, filename: str, status: str, error_message: Optional[str] = None):
        """Update NetCDF file processing status"""
        try:
            self.gateway.update_file_status(filename, status, error_message)
        except Exception as e:
            logger.error(f"Error updating file status: {e}")
