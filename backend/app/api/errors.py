"""HTTP error envelope shared by routers."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import HTTPException


def http_error(
    status_code: int,
    error_code: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail={
            "error_code": error_code,
            "message": message,
            "details": details or {},
        },
    )
