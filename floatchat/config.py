"""
Configuration for the FloatChat platform.

Centralized settings for the database, API server, dashboard and the
synthetic data generators. Values come from the environment (optionally
loaded from a .env file).
"""

import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _build_database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url

    db_host = os.getenv('POSTGRES_HOST', 'localhost')
    db_port = os.getenv('POSTGRES_PORT', '5432')
    db_name = os.getenv('POSTGRES_DB', 'floatchat')
    db_user = os.getenv('POSTGRES_USER', 'postgres')
    db_password = os.getenv('POSTGRES_PASSWORD', '')
    return f"postgresql://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}"


class Config:
    DATABASE_URL = _build_database_url()
    SQL_ECHO = os.getenv('SQL_ECHO', 'false').lower() == 'true'

    EMBEDDING_DIMENSION = int(os.getenv("EMBEDDING_DIMENSION", "1536"))
    DEFAULT_SEARCH_LIMIT = 5

    API_HOST = os.getenv("API_HOST", "0.0.0.0")
    API_PORT = int(os.getenv("API_PORT", "8000"))
    API_TITLE = "FloatChat - ARGO Ocean Data Explorer"
    API_VERSION = "1.0.0"

    DASHBOARD_PORT = int(os.getenv("DASHBOARD_PORT", "8501"))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    SAMPLE_DATA_DIR = os.getenv("SAMPLE_DATA_DIR", "./data/sample_argo")
