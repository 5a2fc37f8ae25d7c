"""
Request validation gate.

``validate_request(schema)`` builds a FastAPI dependency that parses the
JSON body against a schema and hands the normalized value to the route.
"""
import logging
from typing import Any, Dict

from fastapi import Request

from authservice.errors import ApiError
from authservice.validation.rules import ObjectSchema, SchemaError

logger = logging.getLogger(__name__)


def validate_request(schema: ObjectSchema):
    """
    Create a dependency validating the request body with ``schema``.

    Raises:
        ApiError: 400 "Validation failed" with the field errors, or 400
            "Invalid request data" when the body cannot be validated at all
    """
    async def dependency(request: Request) -> Dict[str, Any]:
        try:
            raw = await request.body()
            body = await request.json() if raw.strip() else {}
            validated = schema.parse(body)
        except SchemaError as e:
            raise ApiError(400, "Validation failed", [err.to_dict() for err in e.errors])
        except Exception as e:
            logger.debug("Unreadable request body on %s: %s", request.url.path, e)
            raise ApiError(400, "Invalid request data")
        request.state.body = validated
        return validated

    return dependency
