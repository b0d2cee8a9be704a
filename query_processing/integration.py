#!/usr/bin/env python3
"""
Query Processing Integration Module

This module provides the boundary between the query processing system and
the Flask application. It handles:
1. Pulling the user's message out of a chat request body
2. Running classification and dispatch for that message
3. Shaping the result into the chat response payload
"""

import logging
from typing import Dict, Any, List, Optional, Tuple

from query_processing.processor import process_query

logger = logging.getLogger("query-integration")


def handle_query(message: str, history: Optional[List[Dict[str, Any]]] = None, provider=None) -> Dict[str, Any]:
    """
    Answer one chat message

    Args:
        message: The natural language query from the user (non-empty)
        history: Prior conversation turns; accepted but not used
        provider: Optional DataProvider override

    Returns:
        Dict with success, content, data and queryType
    """
    result = process_query(message, provider)
    logger.info(f"Processed query: '{message}' as {result.query_type.value}")

    return {
        "success": True,
        "content": result.content,
        "data": result.data,
        "queryType": result.query_type.value,
    }


def extract_chat_request(request_data: Dict[str, Any]) -> Tuple[Optional[str], List[Dict[str, Any]]]:
    """
    Find the user's message and the conversation history in a request body

    Args:
        request_data: The request data from the client

    Returns:
        Tuple of (message, history)
        - message: The stripped message text, or None when missing or blank
        - history: The conversation history list (empty when absent)
    """
    message = None
    for field in ("message", "query", "question", "prompt"):
        value = request_data.get(field)
        if isinstance(value, str) and value.strip():
            message = value.strip()
            break

    history = request_data.get("conversationHistory")
    if not isinstance(history, list):
        history = []

    return message, history
