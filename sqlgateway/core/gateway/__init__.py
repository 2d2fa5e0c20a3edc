"""
Gateway request/response shaping: body parsing and the OK / ERROR envelopes.
"""

from sqlgateway.core.gateway.request_response import (
    build_statement_request,
    format_error,
    format_outcome,
    make_json_safe,
    parse_statement_request,
    utc_now_iso,
)

__all__ = [
    "build_statement_request",
    "format_error",
    "format_outcome",
    "make_json_safe",
    "parse_statement_request",
    "utc_now_iso",
]
