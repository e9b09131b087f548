"""
Chat assistant package for FloatChat

This package provides query classification, templated response generation,
chat session handling and the embedding records behind the assistant.
"""

from .vector_store import VectorEmbeddingsGenerator

from .query_classifier import (
    QueryAnalysis,
    analyze_query,
    extract_parameters,
    extract_float_ids,
    QUERY_TYPES
)

from .response_generator import (
    NO_DATA_MESSAGES,
    generate_response
)

from .chat_processor import (
    ChatProcessor,
    QueryResult,
    get_chat_processor
)

__all__ = [
    'VectorEmbeddingsGenerator',
    'QueryAnalysis',
    'analyze_query',
    'extract_parameters',
    'extract_float_ids',
    'QUERY_TYPES',
    'NO_DATA_MESSAGES',
    'generate_response',
    'ChatProcessor',
    'QueryResult',
    'get_chat_processor'
]
