"""
FloatChat

A platform for exploring ARGO oceanographic float data: synthetic NetCDF
processing, a relational store, a keyword-driven chat assistant, a REST API
and a Streamlit dashboard.
"""

__version__ = "1.0.0"
__author__ = "FloatChat Team"
__description__ = "ARGO ocean data explorer with a chat interface"
