"""Shared FastAPI dependencies for normalizing JSON:API write requests."""

import json

from fastapi import HTTPException, Request

from payloadtree.config import get_settings
from payloadtree.deserializer import Deserializer


async def get_deserializer(request: Request) -> Deserializer:
    """Build a Deserializer from the request body and HTTP method.

    An empty body is treated as an empty document (e.g. a DELETE with no
    payload). A body that is not valid JSON is rejected with a 400; any
    well-formed JSON is accepted and normalized leniently.
    """
    payload = {}
    if (await request.body()).strip():
        try:
            payload = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise HTTPException(status_code=400, detail="Request body is not valid JSON") from exc
    return Deserializer(payload, request.method, settings=get_settings())
