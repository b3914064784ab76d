from typing import Any, Mapping, Optional

from fastapi.responses import JSONResponse


class ErrorFormat:
    """Wrapper around the `{"error": message}` body every failure returns."""

    def __init__(self, message: str) -> None:
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message}


def json_response(status_code: int, body: Any, headers: Optional[Mapping[str, str]] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body, headers=dict(headers or {}))


def error_response(status_code: int, message: str, headers: Optional[Mapping[str, str]] = None) -> JSONResponse:
    return json_response(status_code, ErrorFormat(message).to_dict(), headers)
