"""
Vector Embeddings for the Chat Assistant

Builds descriptive texts for stored ocean profiles and stores each text with
an embedding vector. Vectors are random placeholders of the configured
dimension; "similarity" search returns the most recent rows.
"""

from typing import Any, Dict, List, Optional
import logging

import numpy as np

from ..config import Config
from ..database.gateway import OceanDataGateway
from ..utils.regions import get_ocean_region

logger = logging.getLogger(__name__)


def _format_date(value: Optional[str]) -> str:
    return value[:10] if value else "unknown date"


class VectorEmbeddingsGenerator:
    """Creates and stores embedding records for ocean profile data"""

    def __init__(self, gateway: Optional[OceanDataGateway] = None,
                 dimension: int = Config.EMBEDDING_DIMENSION,
                 rng: Optional[np.random.Generator] = None):
        self.gateway = gateway or OceanDataGateway()
        self.dimension = dimension
        self.rng = rng if rng is not None else np.random.default_rng()

    def generate_profile_embeddings(self, profile_id: int) -> int:
        """
        Generate and store embeddings for one ocean profile

        Returns:
            Number of embedding records stored
        """
        logger.info(f"Generating embeddings for profile {profile_id}")

        profile = self.gateway.get_profile(profile_id)
        if profile is None:
            raise LookupError(f"Profile {profile_id} not found")

        records = [{
            'content_type': 'profile',
            'content_id': profile_id,
            'content_text': self.generate_profile_text(profile),
            'metadata': {
                'float_id': profile['float_id'],
                'latitude': profile['latitude'],
                'longitude': profile['longitude'],
                'profile_date': profile['profile_date'],
                'cycle_number': profile['cycle_number'],
            },
        }]

        for text in self.generate_measurement_texts(profile):
            records.append({
                'content_type': 'measurement',
                'content_id': profile_id,
                'content_text': text['content'],
                'metadata': dict(text['metadata'], profile_id=profile_id, float_id=profile['float_id']),
            })

        self.store_embeddings(records)
        logger.info(f"Generated {len(records)} embeddings for profile {profile_id}")
        return len(records)

    def generate_profile_text(self, profile: Dict[str, Any]) -> str:
        """Generate descriptive text for an ocean profile"""
        region = get_ocean_region(profile['latitude'], profile['longitude'])
        location = f"{profile['latitude']:.2f}°N, {profile['longitude']:.2f}°E"

        text = f"ARGO float {profile['float_id']} profile from {_format_date(profile['profile_date'])} at location {location}. "
        text += f"This is cycle {profile['cycle_number']} data from the {region}. "

        measurements = profile.get('depth_measurements') or []
        if measurements:
            max_depth = max(m['depth_meters'] for m in measurements)
            surface = next((m for m in measurements if m['depth_meters'] <= 10), None)
            deep = measurements[-1]

            text += f"Profile extends to {max_depth:g}m depth. "
            if surface and surface['temperature_celsius'] is not None:
                text += f"Surface temperature: {surface['temperature_celsius']:.1f}°C. "
            if deep['temperature_celsius'] is not None:
                text += f"Deep temperature: {deep['temperature_celsius']:.1f}°C. "

        if profile.get('bgc_measurements'):
            text += "Biogeochemical data available including oxygen, nitrate, pH, and chlorophyll measurements. "

        return text.strip()

    def generate_measurement_texts(self, profile: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Generate measurement-specific texts for embeddings"""
        texts = []
        float_id = profile['float_id']
        region = get_ocean_region(profile['latitude'], profile['longitude'])

        depth_rows = sorted(profile.get('depth_measurements') or [], key=lambda m: m['depth_meters'])

        temp_data = [m for m in depth_rows if m['temperature_celsius'] is not None]
        if temp_data:
            surface_temp = temp_data[0]['temperature_celsius']
            deep_temp = temp_data[-1]['temperature_celsius']
            max_depth = temp_data[-1]['depth_meters']
            texts.append({
                'content': (
                    f"Temperature profile for ARGO float {float_id}: Surface temperature {surface_temp:.1f}°C "
                    f"decreasing to {deep_temp:.1f}°C at {max_depth:g}m depth. Typical {region} thermal structure."
                ),
                'metadata': {
                    'measurement_type': 'temperature',
                    'surface_value': surface_temp,
                    'deep_value': deep_temp,
                    'max_depth': max_depth,
                },
            })

        sal_data = [m for m in depth_rows if m['salinity_psu'] is not None]
        if sal_data:
            surface_sal = sal_data[0]['salinity_psu']
            deep_sal = sal_data[-1]['salinity_psu']
            texts.append({
                'content': (
                    f"Salinity profile for ARGO float {float_id}: Surface salinity {surface_sal:.2f} PSU "
                    f"varying to {deep_sal:.2f} PSU at depth. Shows {region} water mass characteristics."
                ),
                'metadata': {
                    'measurement_type': 'salinity',
                    'surface_value': surface_sal,
                    'deep_value': deep_sal,
                },
            })

        bgc_rows = sorted(profile.get('bgc_measurements') or [], key=lambda m: m['depth_meters'])
        oxygen_data = [m for m in bgc_rows if m['oxygen_umol_kg'] is not None]
        if oxygen_data:
            surface_o2 = oxygen_data[0]['oxygen_umol_kg']
            min_o2 = min(m['oxygen_umol_kg'] for m in oxygen_data)
            texts.append({
                'content': (
                    f"Oxygen profile for ARGO float {float_id}: Surface oxygen {surface_o2:.1f} μmol/kg with minimum "
                    f"of {min_o2:.1f} μmol/kg indicating oxygen minimum zone presence."
                ),
                'metadata': {
                    'measurement_type': 'oxygen',
                    'surface_value': surface_o2,
                    'minimum_value': min_o2,
                },
            })

        return texts

    def generate_mock_embedding(self) -> List[float]:
        """Placeholder vector with components uniform in [-1, 1)"""
        return (self.rng.random(self.dimension) * 2 - 1).tolist()

    def store_embeddings(self, records: List[Dict[str, Any]]) -> int:
        """Attach a vector to each record and store them"""
        for record in records:
            record['embedding_vector'] = self.generate_mock_embedding()

        try:
            return self.gateway.insert_embeddings(records)
        except Exception as e:
            logger.error(f"Error storing embeddings: {e}")
            raise

    def search_similar_content(self, query: str, limit: int = Config.DEFAULT_SEARCH_LIMIT) -> List[Dict[str, Any]]:
        """Return the most recently stored content; the query text is not used for ranking"""
        logger.debug(f"Embedding search for '{query}' (limit {limit})")
        try:
            return self.gateway.get_recent_embeddings(limit)
        except Exception as e:
            logger.error(f"Error searching embeddings: {e}")
            return []

    def get_stats(self) -> Dict[str, Any]:
        return {
            'embedding_dimension': self.dimension,
            'embedding_count': self.gateway.get_statistics()['embeddings'],
        }
