"""
ARGO Data Ingestion Module

This module turns ARGO NetCDF filenames into synthetic profiles, stores them,
and writes sample NetCDF files.
"""

from .netcdf_processor import (
    NetCDFProcessor,
    NetCDFFormatError,
    ProfileSynthesizer,
    SyntheticProfile,
    parse_netcdf_filename
)

__all__ = [
    'NetCDFProcessor',
    'NetCDFFormatError',
    'ProfileSynthesizer',
    'SyntheticProfile',
    'parse_netcdf_filename'
]
