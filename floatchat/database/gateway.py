"""
Persistence Gateway

Thin CRUD layer over the relational store. Every call opens its own session
scope and hands back plain dictionaries so callers never hold ORM objects
past the end of a session.
"""

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional
import logging

from sqlalchemy import func

from .connection import DatabaseManager, get_db_manager
from .models import (
    ArgoFloat, OceanProfile, DepthMeasurement, BGCMeasurement,
    NetCDFFile, ChatSession, DataEmbedding
)

logger = logging.getLogger(__name__)


def _isoformat(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


def float_to_dict(record: ArgoFloat) -> Dict[str, Any]:
    return {
        'id': record.id,
        'float_id': record.float_id,
        'platform_number': record.platform_number,
        'deployment_date': _isoformat(record.deployment_date),
        'deployment_latitude': record.deployment_latitude,
        'deployment_longitude': record.deployment_longitude,
        'status': record.status,
        'last_transmission': _isoformat(record.last_transmission),
        'created_at': _isoformat(record.created_at),
        'updated_at': _isoformat(record.updated_at),
    }


def depth_measurement_to_dict(record: DepthMeasurement) -> Dict[str, Any]:
    return {
        'id': record.id,
        'profile_id': record.profile_id,
        'depth_meters': record.depth_meters,
        'pressure_dbar': record.pressure_dbar,
        'temperature_celsius': record.temperature_celsius,
        'salinity_psu': record.salinity_psu,
    }


def bgc_measurement_to_dict(record: BGCMeasurement) -> Dict[str, Any]:
    return {
        'id': record.id,
        'profile_id': record.profile_id,
        'depth_meters': record.depth_meters,
        'oxygen_umol_kg': record.oxygen_umol_kg,
        'nitrate_umol_kg': record.nitrate_umol_kg,
        'ph_total': record.ph_total,
        'chlorophyll_mg_m3': record.chlorophyll_mg_m3,
        'backscatter_m1': record.backscatter_m1,
    }


def profile_to_dict(record: OceanProfile, include_measurements: bool = False) -> Dict[str, Any]:
    data = {
        'id': record.id,
        'float_id': record.float_id,
        'profile_date': _isoformat(record.profile_date),
        'latitude': record.latitude,
        'longitude': record.longitude,
        'cycle_number': record.cycle_number,
        'profile_type': record.profile_type,
        'created_at': _isoformat(record.created_at),
    }

    if include_measurements:
        data['argo_floats'] = float_to_dict(record.float) if record.float else None
        data['depth_measurements'] = [depth_measurement_to_dict(m) for m in record.depth_measurements]
        data['bgc_measurements'] = [bgc_measurement_to_dict(m) for m in record.bgc_measurements]

    return data


def file_to_dict(record: NetCDFFile) -> Dict[str, Any]:
    return {
        'id': record.id,
        'filename': record.filename,
        'file_path': record.file_path,
        'file_size_bytes': record.file_size_bytes,
        'processing_status': record.processing_status,
        'processed_at': _isoformat(record.processed_at),
        'error_message': record.error_message,
        'created_at': _isoformat(record.created_at),
    }


def chat_session_to_dict(record: ChatSession) -> Dict[str, Any]:
    return {
        'id': record.id,
        'session_id': record.session_id,
        'user_query': record.user_query,
        'ai_response': record.ai_response,
        'query_type': record.query_type,
        'execution_time_ms': record.execution_time_ms,
        'created_at': record.created_at,
    }


def embedding_to_dict(record: DataEmbedding, include_vector: bool = False) -> Dict[str, Any]:
    data = {
        'id': record.id,
        'content_type': record.content_type,
        'content_id': record.content_id,
        'content_text': record.content_text,
        'metadata': record.metadata_json or {},
        'created_at': _isoformat(record.created_at),
    }
    if include_vector:
        data['embedding_vector'] = record.embedding_vector
    return data


class OceanDataGateway:
    """CRUD operations for floats, profiles, measurements, files, chat and embeddings"""

    def __init__(self, db: Optional[DatabaseManager] = None):
        self.db = db or get_db_manager()

    # Floats

    def upsert_float(self, float_id: str, **fields) -> Dict[str, Any]:
        """Insert a float or update the existing row with the given fields"""
        with self.db.session_scope() as session:
            record = session.query(ArgoFloat).filter_by(float_id=float_id).first()

            if record is None:
                record = ArgoFloat(float_id=float_id, **fields)
                session.add(record)
                logger.info(f"Registered new float {float_id}")
            else:
                for key, value in fields.items():
                    setattr(record, key, value)
                logger.debug(f"Updated float {float_id}")

            session.flush()
            return float_to_dict(record)

    def get_float(self, float_id: str) -> Optional[Dict[str, Any]]:
        with self.db.session_scope() as session:
            record = session.query(ArgoFloat).filter_by(float_id=float_id).first()
            return float_to_dict(record) if record else None

    def list_floats(self) -> List[Dict[str, Any]]:
        """All floats, most recent transmission first"""
        with self.db.session_scope() as session:
            records = session.query(ArgoFloat)\
                .order_by(ArgoFloat.last_transmission.desc())\
                .all()
            return [float_to_dict(r) for r in records]

    # Profiles and measurements

    def insert_profile(self, float_id: str, profile_date: datetime, latitude: float,
                       longitude: float, cycle_number: int, profile_type: str = 'primary') -> int:
        with self.db.session_scope() as session:
            record = OceanProfile(
                float_id=float_id,
                profile_date=profile_date,
                latitude=latitude,
                longitude=longitude,
                cycle_number=cycle_number,
                profile_type=profile_type
            )
            session.add(record)
            session.flush()
            return record.id

    def insert_depth_measurements(self, profile_id: int, rows: List[Dict[str, float]]) -> int:
        with self.db.session_scope() as session:
            session.add_all([DepthMeasurement(profile_id=profile_id, **row) for row in rows])
        return len(rows)

    def insert_bgc_measurements(self, profile_id: int, rows: List[Dict[str, float]]) -> int:
        with self.db.session_scope() as session:
            session.add_all([BGCMeasurement(profile_id=profile_id, **row) for row in rows])
        return len(rows)

    def get_profile(self, profile_id: int) -> Optional[Dict[str, Any]]:
        """A profile with its float and both measurement series"""
        with self.db.session_scope() as session:
            record = session.get(OceanProfile, profile_id)
            return profile_to_dict(record, include_measurements=True) if record else None

    def delete_profile(self, profile_id: int) -> bool:
        with self.db.session_scope() as session:
            record = session.get(OceanProfile, profile_id)
            if record is None:
                return False
            session.delete(record)
            return True

    def get_recent_profiles(self, limit: int = 5, float_id: Optional[str] = None,
                            include_measurements: bool = True) -> List[Dict[str, Any]]:
        with self.db.session_scope() as session:
            query = session.query(OceanProfile)
            if float_id:
                query = query.filter(OceanProfile.float_id == float_id)

            records = query.order_by(OceanProfile.profile_date.desc(), OceanProfile.id.desc())\
                .limit(limit)\
                .all()
            return [profile_to_dict(r, include_measurements=include_measurements) for r in records]

    def get_latest_profile_for_float(self, float_id: str,
                                     measurement_limit: int = 50) -> Optional[Dict[str, Any]]:
        """The newest profile of a float, with measurement series capped at measurement_limit rows"""
        profiles = self.get_recent_profiles(limit=1, float_id=float_id)
        if not profiles:
            return None

        profile = profiles[0]
        profile['depth_measurements'] = profile['depth_measurements'][:measurement_limit]
        profile['bgc_measurements'] = profile['bgc_measurements'][:measurement_limit]
        return profile

    def get_depth_measurements_for_float(self, float_id: str, limit: int = 50) -> List[Dict[str, Any]]:
        """Depth measurements across a float's profiles, shallowest first"""
        with self.db.session_scope() as session:
            records = session.query(DepthMeasurement)\
                .join(OceanProfile)\
                .filter(OceanProfile.float_id == float_id)\
                .order_by(DepthMeasurement.depth_meters.asc())\
                .limit(limit)\
                .all()
            return [depth_measurement_to_dict(r) for r in records]

    # NetCDF files

    def register_file(self, filename: str, file_path: Optional[str] = None,
                      file_size_bytes: Optional[int] = None) -> Dict[str, Any]:
        with self.db.session_scope() as session:
            record = session.query(NetCDFFile).filter_by(filename=filename).first()
            if record is None:
                record = NetCDFFile(filename=filename, processing_status='pending')
                session.add(record)

            if file_path is not None:
                record.file_path = file_path
            if file_size_bytes is not None:
                record.file_size_bytes = file_size_bytes

            session.flush()
            return file_to_dict(record)

    def update_file_status(self, filename: str, status: str,
                           error_message: Optional[str] = None) -> bool:
        with self.db.session_scope() as session:
            record = session.query(NetCDFFile).filter_by(filename=filename).first()
            if record is None:
                logger.warning(f"No file record for {filename}, status '{status}' not saved")
                return False

            record.processing_status = status
            record.processed_at = datetime.utcnow()
            record.error_message = error_message
            return True

    def get_file(self, filename: str) -> Optional[Dict[str, Any]]:
        with self.db.session_scope() as session:
            record = session.query(NetCDFFile).filter_by(filename=filename).first()
            return file_to_dict(record) if record else None

    def get_recent_files(self, limit: int = 10) -> List[Dict[str, Any]]:
        with self.db.session_scope() as session:
            records = session.query(NetCDFFile)\
                .order_by(NetCDFFile.created_at.desc(), NetCDFFile.id.desc())\
                .limit(limit)\
                .all()
            return [file_to_dict(r) for r in records]

    # Chat sessions

    def insert_chat_session(self, session_id: str, user_query: str, ai_response: str,
                            query_type: str, execution_time_ms: int) -> int:
        with self.db.session_scope() as session:
            record = ChatSession(
                session_id=session_id,
                user_query=user_query,
                ai_response=ai_response,
                query_type=query_type,
                execution_time_ms=execution_time_ms
            )
            session.add(record)
            session.flush()
            return record.id

    def get_chat_sessions(self, session_id: str) -> List[Dict[str, Any]]:
        """All rows of a chat session, oldest first"""
        with self.db.session_scope() as session:
            records = session.query(ChatSession)\
                .filter_by(session_id=session_id)\
                .order_by(ChatSession.created_at.asc(), ChatSession.id.asc())\
                .all()
            return [chat_session_to_dict(r) for r in records]

    def get_recent_chat_sessions(self, limit: int = 10) -> List[Dict[str, Any]]:
        with self.db.session_scope() as session:
            records = session.query(ChatSession)\
                .order_by(ChatSession.created_at.desc(), ChatSession.id.desc())\
                .limit(limit)\
                .all()
            return [chat_session_to_dict(r) for r in records]

    # Embeddings

    def insert_embeddings(self, records: List[Dict[str, Any]]) -> int:
        with self.db.session_scope() as session:
            session.add_all([
                DataEmbedding(
                    content_type=r['content_type'],
                    content_id=str(r['content_id']),
                    content_text=r['content_text'],
                    metadata_json=r.get('metadata'),
                    embedding_vector=r.get('embedding_vector')
                )
                for r in records
            ])
        return len(records)

    def get_recent_embeddings(self, limit: int = 5) -> List[Dict[str, Any]]:
        with self.db.session_scope() as session:
            records = session.query(DataEmbedding)\
                .order_by(DataEmbedding.created_at.desc(), DataEmbedding.id.desc())\
                .limit(limit)\
                .all()
            return [embedding_to_dict(r) for r in records]

    # Statistics

    def get_statistics(self) -> Dict[str, Any]:
        """Counts shown on the dashboard overview"""
        week_ago = datetime.utcnow() - timedelta(days=7)

        with self.db.session_scope() as session:
            total_floats = session.query(ArgoFloat).count()
            active_floats = session.query(ArgoFloat).filter_by(status='active').count()
            total_profiles = session.query(OceanProfile).count()
            recent_profiles = session.query(OceanProfile)\
                .filter(OceanProfile.profile_date >= week_ago)\
                .count()
            depth_points = session.query(DepthMeasurement).count()
            bgc_points = session.query(BGCMeasurement).count()
            embeddings = session.query(DataEmbedding).count()
            chat_queries = session.query(ChatSession).count()
            files_by_status = dict(
                session.query(NetCDFFile.processing_status, func.count(NetCDFFile.id))
                .group_by(NetCDFFile.processing_status)
                .all()
            )

        return {
            'total_floats': total_floats,
            'active_floats': active_floats,
            'total_profiles': total_profiles,
            'recent_profiles': recent_profiles,
            'depth_measurements': depth_points,
            'bgc_measurements': bgc_points,
            'data_points': depth_points + bgc_points,
            'embeddings': embeddings,
            'chat_queries': chat_queries,
            'files_by_status': files_by_status,
        }
