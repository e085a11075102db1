from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..config import Settings, get_settings
from ..errors import Cancelled, ErrorCode, LinkPreviewError
from ..provider import MetadataProvider
from ..schemas import LinkMetadata

router = APIRouter(prefix="/api", tags=["preview"])

SettingsDep = Annotated[Settings, Depends(get_settings)]

ERROR_STATUS = {
    ErrorCode.INVALID_URL: 422,
    ErrorCode.FETCH_FAILED: status.HTTP_502_BAD_GATEWAY,
    ErrorCode.TIMED_OUT: status.HTTP_504_GATEWAY_TIMEOUT,
    # Client closed request
    ErrorCode.CANCELLED: 499,
    ErrorCode.UNKNOWN: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def get_provider(settings: SettingsDep) -> MetadataProvider:
    # Providers are single-use, so every request gets its own
    return MetadataProvider(settings=settings)


ProviderDep = Annotated[MetadataProvider, Depends(get_provider)]


@router.get("/preview", response_model=LinkMetadata)
async def api_preview(
    url: str = Query(..., description="Page to build a link preview for"),
    *,
    provider: ProviderDep,
) -> LinkMetadata:
    try:
        return await provider.fetch(url)
    except Cancelled:
        raise
    except LinkPreviewError as e:
        raise HTTPException(
            status_code=ERROR_STATUS[e.code],
            detail={"code": e.code.value, "message": e.message},
        ) from e
