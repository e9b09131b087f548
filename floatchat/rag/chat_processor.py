"""
Chat Processor for FloatChat

Handles natural language queries about oceanographic data: classify the
query, retrieve matching rows, fill the response template and log the
exchange in the chat session store.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import logging

from ..database.gateway import OceanDataGateway
from .query_classifier import COMPARISON_QUERY, QueryAnalysis, analyze_query, extract_float_ids
from .response_generator import generate_response

logger = logging.getLogger(__name__)

MEASUREMENT_ROW_LIMIT = 50


@dataclass
class QueryResult:
    """Outcome of processing one chat query"""
    response: str
    query_type: str
    execution_time: int  # milliseconds
    data_used: List[Dict[str, Any]] = field(default_factory=list)
    visualizations: List[str] = field(default_factory=list)


class ChatProcessor:
    """Main class for processing chat queries"""

    def __init__(self, gateway: Optional[OceanDataGateway] = None):
        self.gateway = gateway or OceanDataGateway()

    def process_query(self, query: str, session_id: str) -> QueryResult:
        """
        Process a user query and generate a response

        Returns:
            QueryResult with the response text, query type and timing
        """
        start_time = time.perf_counter()
        logger.info(f"Processing query: {query}")

        try:
            analysis = analyze_query(query)
            relevant_data = self.retrieve_relevant_data(query, analysis)
            response = generate_response(query, analysis, relevant_data)

            execution_time = int((time.perf_counter() - start_time) * 1000)

            self.store_chat_session(session_id, query, response, analysis.type, execution_time)

            logger.info(f"Query processed in {execution_time}ms ({analysis.type})")

            return QueryResult(
                response=response,
                query_type=analysis.type,
                execution_time=execution_time,
                data_used=relevant_data,
                visualizations=analysis.visualizations,
            )

        except Exception as e:
            logger.error(f"Error processing query: {e}")
            raise

    def retrieve_relevant_data(self, query: str, analysis: QueryAnalysis) -> List[Dict[str, Any]]:
        """Retrieve rows for the query type; errors are logged and partial data returned"""
        data: List[Dict[str, Any]] = []
        seen_profiles = set()
        float_id = analysis.parameters.get('floatId')

        def add_profile(profile):
            if profile and profile['id'] not in seen_profiles:
                seen_profiles.add(profile['id'])
                data.append(profile)

        try:
            if float_id:
                float_row = self.gateway.get_float(float_id)
                if float_row:
                    data.append(float_row)

            if 'ocean_profiles' in analysis.data_needed:
                limit = 10 if float_id else 5
                for profile in self.gateway.get_recent_profiles(limit=limit, float_id=float_id):
                    add_profile(profile)

            needs_measurements = (
                'depth_measurements' in analysis.data_needed
                or 'bgc_measurements' in analysis.data_needed
            )
            if needs_measurements and float_id:
                add_profile(self.gateway.get_latest_profile_for_float(
                    float_id, measurement_limit=MEASUREMENT_ROW_LIMIT
                ))

            # Comparisons need a profile from each float named in the query
            if analysis.type == COMPARISON_QUERY:
                for other_id in extract_float_ids(query):
                    if other_id != float_id:
                        add_profile(self.gateway.get_latest_profile_for_float(
                            other_id, measurement_limit=MEASUREMENT_ROW_LIMIT
                        ))

        except Exception as e:
            logger.error(f"Error retrieving data: {e}")

        return data

    def store_chat_session(self, session_id: str, user_query: str, ai_response: str,
                           query_type: str, execution_time: int):
        """Append the exchange to the chat log; failures are logged only"""
        try:
            self.gateway.insert_chat_session(session_id, user_query, ai_response, query_type, execution_time)
        except Exception as e:
            logger.error(f"Error storing chat session: {e}")

    def get_chat_history(self, session_id: str) -> List[Dict[str, Any]]:
        """Replay a chat session as alternating user and assistant messages"""
        messages = []
        for row in self.gateway.get_chat_sessions(session_id):
            timestamp = row['created_at'].isoformat() if row['created_at'] else None
            for role, content in (('user', row['user_query']), ('assistant', row['ai_response'])):
                messages.append({
                    'id': f"{row['id']}-{role}",
                    'role': role,
                    'content': content,
                    'timestamp': timestamp,
                    'queryType': row['query_type'],
                    'executionTime': row['execution_time_ms'],
                })
        return messages

    def get_query_suggestions(self, partial_query: str = "") -> List[str]:
        """Example questions, filtered by a partial query when one is given"""
        base_suggestions = [
            "What is the temperature profile for float 5906468?",
            "Show salinity data for float 5906469",
            "What are the oxygen levels at 500m depth for float 5906468?",
            "Where is the float 5906470 location?",
            "Compare float 5906468 vs float 5906469",
            "Show me recent ARGO profiles",
        ]

        if not partial_query:
            return base_suggestions

        filtered = [s for s in base_suggestions if partial_query.lower() in s.lower()]
        return filtered if filtered else base_suggestions


# Global chat processor instance
chat_processor = None


def get_chat_processor() -> ChatProcessor:
    """Get the global chat processor instance"""
    global chat_processor
    if chat_processor is None:
        chat_processor = ChatProcessor()
    return chat_processor
