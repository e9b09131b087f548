"""
Database package for FloatChat

This package provides database models, connections, and the persistence
gateway used by the ingestion, chat and dashboard layers.
"""

from .models import (
    Base,
    ArgoFloat,
    OceanProfile,
    DepthMeasurement,
    BGCMeasurement,
    NetCDFFile,
    ChatSession,
    DataEmbedding,
    initialize_sample_data
)

from .connection import (
    DatabaseManager,
    get_db_manager,
    init_database,
    test_db_connection,
    DatabaseError
)

from .gateway import OceanDataGateway

__all__ = [
    'Base',
    'ArgoFloat',
    'OceanProfile',
    'DepthMeasurement',
    'BGCMeasurement',
    'NetCDFFile',
    'ChatSession',
    'DataEmbedding',
    'initialize_sample_data',
    'DatabaseManager',
    'get_db_manager',
    'init_database',
    'test_db_connection',
    'DatabaseError',
    'OceanDataGateway'
]
