"""
The uniform {success, message, data, count} envelope
"""
from typing import Any, Dict, Optional


def ok(data: Any = None, message: Optional[str] = None, count: Optional[int] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    if count is not None:
        body["count"] = count
    return body


def listing(records: list, message: Optional[str] = None) -> Dict[str, Any]:
    return ok(records, message=message, count=len(records))
