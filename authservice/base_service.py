import logging
from typing import Any, Dict, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel

logger = logging.getLogger("authservice")

LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Set up root logging once for the process."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logger.setLevel(level)


class ApiResponse(BaseModel):
    """
    Uniform envelope for every JSON body the service returns.

    ``data`` and ``error`` are left out of the serialized body when unset.
    """
    success: bool
    message: str
    data: Optional[Any] = None
    error: Optional[Any] = None

    def to_content(self) -> Dict[str, Any]:
        content: Dict[str, Any] = {"success": self.success, "message": self.message}
        if self.data is not None:
            content["data"] = jsonable_encoder(self.data)
        if self.error is not None:
            content["error"] = jsonable_encoder(self.error)
        return content


class ApiJSONResponse(JSONResponse):
    """
    JSONResponse wrapping content in the ApiResponse envelope.
    """
    def __init__(
        self,
        data: Any = None,
        message: str = "success",
        success: bool = True,
        error: Any = None,
        **kwargs,
    ):
        envelope = ApiResponse(success=success, message=message, data=data, error=error)
        super().__init__(content=envelope.to_content(), **kwargs)


class BaseService:
    """
    Shared helpers for route modules:
    - Event logging
    - Envelope responses
    """
    def __init__(self, name: str = "authservice"):
        self.logger = logging.getLogger(name)

    def api_response(self, data: Any = None, message: str = "success", status_code: int = 200):
        """
        Return a successful envelope response.
        """
        return ApiJSONResponse(data=data, message=message, status_code=status_code)

    def log_event(self, event: str, details: Dict[str, Any] = None):
        self.logger.info(f"EVENT: {event} | Details: {details}")
