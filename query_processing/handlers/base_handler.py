#!/usr/bin/env python3
"""
Base Query Handler

This module defines the base class for all query handlers and the result
type they return.
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import project_config
from query_processing import QueryType

logger = logging.getLogger("query-handler")


@dataclass
class DispatchResult:
    """Formatted answer for one query; data is None when clarification was needed"""
    content: str
    data: Optional[Dict[str, Any]]
    query_type: QueryType


def money(value: Any) -> str:
    """Format a dollar amount with thousands separators"""
    return f"${int(round(float(value or 0))):,}"


def count(value: Any) -> str:
    return f"{int(value or 0):,}"


def table(headers: List[str], rows: List[List[Any]]) -> str:
    """Render a Markdown table"""
    lines = [
        "| " + " | ".join(headers) + " |",
        "|" + "---|" * len(headers),
    ]
    for row in rows:
        lines.append("| " + " | ".join(str(cell) for cell in row) + " |")
    return "\n".join(lines) + "\n"


class QueryHandler(ABC):
    """
    Abstract base class for query handlers.
    Each query type has a specialized handler that inherits from this class.

    A handler is stateless: it decides whether the extracted parameters are
    enough, builds the provider request, makes exactly one provider call and
    renders the response.
    """

    query_type: QueryType = QueryType.GENERAL

    # Parameters that must be present (truthy) before the provider is called
    required_params: Tuple[str, ...] = ()

    # Extracted parameter name -> outbound request field
    field_map: Dict[str, str] = {}

    # DataProvider method serving this category
    provider_method: Optional[str] = None

    # Sample query shown in clarifications
    example: str = ""

    def handle(self, params: Dict[str, Any], provider) -> DispatchResult:
        """
        Produce the answer for a classified query

        Args:
            params: Parameters extracted from the natural language query
            provider: DataProvider used when the parameters are sufficient

        Returns:
            DispatchResult with a clarification (data None) or formatted results
        """
        missing = self.missing_params(params)
        if missing:
            logger.info(f"{self.query_type.value}: awaiting {', '.join(missing)}")
            return DispatchResult(self.clarification(params), None, self.query_type)

        request = self.build_request(params)
        data = self.fetch(provider, request)
        return DispatchResult(self.format_results(data, params), data, self.query_type)

    def missing_params(self, params: Dict[str, Any]) -> List[str]:
        return [name for name in self.required_params if not params.get(name)]

    def clarification(self, params: Dict[str, Any]) -> str:
        """
        Fixed text describing what is needed, ending with an example query
        """
        needed = ", ".join(self.missing_params(params))
        return f"I need a bit more information ({needed}) to answer that.\n\nExample: \"{self.example}\""

    def build_request(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Translate extracted parameters into the provider request

        Explicit, non-empty parameters are merged over the category defaults
        from project_config. Authenticated categories also get a
        referenceIdentifier of the form "<prefix>-<epoch millis>".

        Args:
            params: Parameters extracted from the natural language query

        Returns:
            Dict containing the outbound request
        """
        request = project_config.get_request_defaults(self.query_type.value)
        for name, field in self.field_map.items():
            value = params.get(name)
            if value not in (None, "", 0):
                request[field] = value

        prefix = project_config.REFERENCE_PREFIXES.get(self.query_type.value)
        if prefix:
            request = {"referenceIdentifier": f"{prefix}-{int(time.time() * 1000)}", **request}
        return request

    def fetch(self, provider, request: Dict[str, Any]) -> Dict[str, Any]:
        """Make the single provider call for this category"""
        return getattr(provider, self.provider_method)(request)

    @abstractmethod
    def format_results(self, data: Dict[str, Any], params: Dict[str, Any]) -> str:
        """
        Format the provider response as Markdown

        Args:
            data: Provider response
            params: Original query parameters

        Returns:
            Markdown text for presentation
        """
        pass
