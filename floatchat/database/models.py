"""
Database Models for FloatChat

This module defines the SQLAlchemy models for storing ARGO float metadata,
synthetic profiles with their depth/BGC measurements, NetCDF file processing
status, chat history and the embedding records used by the chat assistant.
"""

from sqlalchemy import Column, Integer, String, Float, Date, DateTime, Text, JSON, BigInteger, ForeignKey, Index
from sqlalchemy.orm import declarative_base, relationship
from datetime import datetime, date

Base = declarative_base()


class ArgoFloat(Base):
    """Table to store ARGO float information"""
    __tablename__ = 'argo_floats'

    id = Column(Integer, primary_key=True, autoincrement=True)
    float_id = Column(String(20), unique=True, nullable=False, index=True)
    platform_number = Column(String(20))
    deployment_date = Column(Date)
    deployment_latitude = Column(Float)
    deployment_longitude = Column(Float)
    status = Column(String(20), default='active')  # 'active', 'inactive'
    last_transmission = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    profiles = relationship("OceanProfile", back_populates="float")

    def __repr__(self):
        return f"<ArgoFloat(float_id='{self.float_id}', status='{self.status}')>"


class OceanProfile(Base):
    """Table to store one vertical cast of a float"""
    __tablename__ = 'ocean_profiles'

    id = Column(Integer, primary_key=True, autoincrement=True)
    float_id = Column(String(20), ForeignKey('argo_floats.float_id'), nullable=False)
    profile_date = Column(DateTime, nullable=False, index=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    cycle_number = Column(Integer)
    profile_type = Column(String(20), default='primary')
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    float = relationship("ArgoFloat", back_populates="profiles")
    depth_measurements = relationship(
        "DepthMeasurement", back_populates="profile",
        cascade="all, delete-orphan", passive_deletes=True,
        order_by="DepthMeasurement.depth_meters"
    )
    bgc_measurements = relationship(
        "BGCMeasurement", back_populates="profile",
        cascade="all, delete-orphan", passive_deletes=True,
        order_by="BGCMeasurement.depth_meters"
    )

    __table_args__ = (
        Index('idx_ocean_profiles_float_id', 'float_id'),
        Index('idx_ocean_profiles_location', 'latitude', 'longitude'),
    )

    def __repr__(self):
        return f"<OceanProfile(float_id='{self.float_id}', cycle={self.cycle_number})>"


class DepthMeasurement(Base):
    """Temperature, salinity and pressure at one depth level"""
    __tablename__ = 'depth_measurements'

    id = Column(Integer, primary_key=True, autoincrement=True)
    profile_id = Column(Integer, ForeignKey('ocean_profiles.id', ondelete='CASCADE'), nullable=False)
    depth_meters = Column(Float, nullable=False)
    pressure_dbar = Column(Float)
    temperature_celsius = Column(Float)
    salinity_psu = Column(Float)
    created_at = Column(DateTime, default=datetime.utcnow)

    profile = relationship("OceanProfile", back_populates="depth_measurements")

    __table_args__ = (
        Index('idx_depth_measurements_profile_id', 'profile_id'),
        Index('idx_depth_measurements_depth', 'depth_meters'),
    )

    def __repr__(self):
        return f"<DepthMeasurement(profile_id={self.profile_id}, depth={self.depth_meters})>"


class BGCMeasurement(Base):
    """Biogeochemical readings at one depth level"""
    __tablename__ = 'bgc_measurements'

    id = Column(Integer, primary_key=True, autoincrement=True)
    profile_id = Column(Integer, ForeignKey('ocean_profiles.id', ondelete='CASCADE'), nullable=False)
    depth_meters = Column(Float, nullable=False)
    oxygen_umol_kg = Column(Float)
    nitrate_umol_kg = Column(Float)
    ph_total = Column(Float)
    chlorophyll_mg_m3 = Column(Float)
    backscatter_m1 = Column(Float)
    created_at = Column(DateTime, default=datetime.utcnow)

    profile = relationship("OceanProfile", back_populates="bgc_measurements")

    __table_args__ = (
        Index('idx_bgc_measurements_profile_id', 'profile_id'),
    )

    def __repr__(self):
        return f"<BGCMeasurement(profile_id={self.profile_id}, depth={self.depth_meters})>"


class NetCDFFile(Base):
    """Table to track NetCDF file processing"""
    __tablename__ = 'netcdf_files'

    id = Column(Integer, primary_key=True, autoincrement=True)
    filename = Column(String(255), unique=True, nullable=False, index=True)
    file_path = Column(Text)
    file_size_bytes = Column(BigInteger)
    processing_status = Column(String(20), default='pending')  # 'pending', 'processing', 'completed', 'error'
    processed_at = Column(DateTime)
    error_message = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<NetCDFFile(filename='{self.filename}', status='{self.processing_status}')>"


class ChatSession(Base):
    """Append-only log of chat queries and responses"""
    __tablename__ = 'chat_sessions'

    id = Column(Integer, primary_key=True, autoincrement=True)
    session_id = Column(String(100), nullable=False, index=True)
    user_query = Column(Text, nullable=False)
    ai_response = Column(Text)
    query_type = Column(String(50))
    execution_time_ms = Column(Integer)
    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<ChatSession(session_id='{self.session_id}', query_type='{self.query_type}')>"


class DataEmbedding(Base):
    """Summary text of stored data paired with its embedding vector"""
    __tablename__ = 'data_embeddings'

    id = Column(Integer, primary_key=True, autoincrement=True)
    content_type = Column(String(50), nullable=False)  # 'profile', 'measurement'
    content_id = Column(String(100), nullable=False)
    content_text = Column(Text, nullable=False)
    metadata_json = Column(JSON)
    embedding_vector = Column(JSON)
    created_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        Index('idx_data_embeddings_content', 'content_type', 'content_id'),
    )

    def __repr__(self):
        return f"<DataEmbedding(content_type='{self.content_type}', content_id='{self.content_id}')>"


# Sample floats and profiles for a fresh database
def initialize_sample_data():
    """Build the sample float and profile records used to seed a new database"""
    floats = [
        ArgoFloat(float_id='5906468', platform_number='5906468', deployment_date=date(2023, 1, 15),
                  deployment_latitude=15.5, deployment_longitude=68.2, status='active',
                  last_transmission=datetime(2024, 12, 20, 10, 30)),
        ArgoFloat(float_id='5906469', platform_number='5906469', deployment_date=date(2023, 2, 20),
                  deployment_latitude=12.8, deployment_longitude=70.5, status='active',
                  last_transmission=datetime(2024, 12, 19, 14, 15)),
        ArgoFloat(float_id='5906470', platform_number='5906470', deployment_date=date(2023, 3, 10),
                  deployment_latitude=18.2, deployment_longitude=65.8, status='active',
                  last_transmission=datetime(2024, 12, 18, 9, 45)),
        ArgoFloat(float_id='5906471', platform_number='5906471', deployment_date=date(2023, 4, 5),
                  deployment_latitude=20.1, deployment_longitude=72.3, status='inactive',
                  last_transmission=datetime(2024, 11, 15, 16, 20)),
    ]

    profiles = [
        OceanProfile(float_id='5906468', profile_date=datetime(2024, 12, 20, 10, 30),
                     latitude=15.52, longitude=68.18, cycle_number=245),
        OceanProfile(float_id='5906468', profile_date=datetime(2024, 12, 10, 11, 15),
                     latitude=15.48, longitude=68.25, cycle_number=244),
        OceanProfile(float_id='5906469', profile_date=datetime(2024, 12, 19, 14, 15),
                     latitude=12.85, longitude=70.52, cycle_number=189),
        OceanProfile(float_id='5906469', profile_date=datetime(2024, 12, 9, 13, 30),
                     latitude=12.82, longitude=70.48, cycle_number=188),
        OceanProfile(float_id='5906470', profile_date=datetime(2024, 12, 18, 9, 45),
                     latitude=18.25, longitude=65.82, cycle_number=156),
        OceanProfile(float_id='5906471', profile_date=datetime(2024, 11, 15, 16, 20),
                     latitude=20.08, longitude=72.35, cycle_number=98),
    ]

    return floats, profiles
