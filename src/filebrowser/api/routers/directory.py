"""Directory endpoints."""

from fastapi import APIRouter, Depends, Query, status

from ...container import ServiceContainer
from ..dependencies import get_container, get_user_id
from ..models import DirectoryListingResponse

router = APIRouter(prefix="/directory", tags=["Directory"])


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create the caller's directory")
async def create_directory(
    user_id: int = Depends(get_user_id),
    container: ServiceContainer = Depends(get_container),
) -> dict:
    await container.directories.create(user_id)
    return {}


@router.get("", response_model=DirectoryListingResponse, summary="List a directory level")
async def list_directory(
    path: str = Query("", description="Directory to list, the root when empty"),
    user_id: int = Depends(get_user_id),
    container: ServiceContainer = Depends(get_container),
) -> DirectoryListingResponse:
    files = await container.directories.list_by_path(user_id, path)
    return DirectoryListingResponse.from_entities(files)


@router.get("/search", response_model=DirectoryListingResponse, summary="Search files and directories by path")
async def search_directory(
    pattern: str = Query(..., description="Case-insensitive regular expression"),
    user_id: int = Depends(get_user_id),
    container: ServiceContainer = Depends(get_container),
) -> DirectoryListingResponse:
    matches = await container.directories.search(user_id, pattern)
    return DirectoryListingResponse.from_matches(matches)
