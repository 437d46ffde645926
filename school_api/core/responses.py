# school_api/core/responses.py
from typing import Any, Optional, Type
from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from school_api.core.errors import BaseAPIError, error_envelope
from school_api.schemas.common import Envelope
from school_api.services.base_service import Page, ServiceResult


def _serialize(data: Any, schema: Optional[Type[BaseModel]]) -> Any:
    if data is None:
        return None
    if schema is None:
        return jsonable_encoder(data)
    return schema.model_validate(data).model_dump(by_alias=True, mode="json")


def serialize_page(page: Page, schema: Optional[Type[BaseModel]]) -> dict:
    return {
        page.key: [_serialize(item, schema) for item in page.items],
        "total": page.total,
        "page": page.page,
        "limit": page.limit,
    }


def error_response(error: BaseAPIError, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(
        status_code=error.status_code,
        content=error_envelope(error),
        headers=headers,
    )


def dispatch(
    result: ServiceResult,
    schema: Optional[Type[BaseModel]] = None,
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    """Turn a service outcome into the response envelope.

    ``schema`` shapes the payload; for a :class:`Page` it is applied to each
    item of the listing.
    """
    if not result.ok:
        return error_response(result.error)

    if isinstance(result.data, Page):
        data = serialize_page(result.data, schema)
    else:
        data = _serialize(result.data, schema)

    body = Envelope(ok=True, data=data, errors=None, message=result.message)
    return JSONResponse(status_code=status_code, content=body.model_dump())
