"""Network utilities for outbound HTTP.

Exports:
- ``send_with_retries``: request with timeout, retry budget and cancellation.
- ``get_json`` / ``post_json`` / ``get_text``: thin wrappers returning the body.
- ``check_cancelled``: raise ``OperationCancelled`` when a token is set.
"""

from airport_search.network.http import (
    check_cancelled,
    get_json,
    get_text,
    post_json,
    send_with_retries,
)

__all__ = [
    "check_cancelled",
    "get_json",
    "get_text",
    "post_json",
    "send_with_retries",
]
