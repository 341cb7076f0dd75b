"""File endpoints.

``target`` is a path in the caller's directory or a file id.
"""

from fastapi import APIRouter, Depends, status

from ...container import ServiceContainer
from ..dependencies import get_container, get_user_id
from ..models import (
    CreateFileRequest,
    FileDescriptor,
    GrantRequest,
    UpdateFileRequest,
    decode_data,
    metadata_dict,
)

router = APIRouter(
    prefix="/files",
    tags=["Files"],
    responses={
        401: {"description": "Caller not identified or not allowed"},
        404: {"description": "File not found"},
    },
)


@router.post("", response_model=FileDescriptor, status_code=status.HTTP_201_CREATED, summary="Create a file")
async def create_file(
    request: CreateFileRequest,
    user_id: int = Depends(get_user_id),
    container: ServiceContainer = Depends(get_container),
) -> FileDescriptor:
    file = await container.files.create(
        user_id,
        request.path,
        data=decode_data(request.data) or b"",
        metadata=metadata_dict(request.metadata),
    )
    return FileDescriptor.from_entity(file)


@router.post("/{file_id}/permissions", response_model=FileDescriptor, summary="Grant permissions")
async def grant_permissions(
    file_id: str,
    request: GrantRequest,
    user_id: int = Depends(get_user_id),
    container: ServiceContainer = Depends(get_container),
) -> FileDescriptor:
    file = await container.files.grant(user_id, file_id, request.uid, request.permissions.to_permission())
    return FileDescriptor.from_entity(file)


@router.delete("/{file_id}/permissions/{uid}", response_model=FileDescriptor, summary="Revoke access")
async def revoke_permissions(
    file_id: str,
    uid: int,
    user_id: int = Depends(get_user_id),
    container: ServiceContainer = Depends(get_container),
) -> FileDescriptor:
    file = await container.files.revoke(user_id, file_id, uid)
    return FileDescriptor.from_entity(file)


@router.get("/{target:path}", response_model=FileDescriptor, summary="Retrieve a file")
async def retrieve_file(
    target: str,
    user_id: int = Depends(get_user_id),
    container: ServiceContainer = Depends(get_container),
) -> FileDescriptor:
    file = await container.files.retrieve(user_id, target)
    return FileDescriptor.from_entity(file)


@router.put("/{file_id}", response_model=FileDescriptor, summary="Update a file")
async def update_file(
    file_id: str,
    request: UpdateFileRequest,
    user_id: int = Depends(get_user_id),
    container: ServiceContainer = Depends(get_container),
) -> FileDescriptor:
    file = await container.files.update(
        user_id,
        file_id,
        name=request.name,
        data=decode_data(request.data),
        metadata=metadata_dict(request.metadata),
    )
    return FileDescriptor.from_entity(file)


@router.delete("/{target:path}", response_model=FileDescriptor, summary="Delete a file")
async def delete_file(
    target: str,
    user_id: int = Depends(get_user_id),
    container: ServiceContainer = Depends(get_container),
) -> FileDescriptor:
    file = await container.files.delete(user_id, target)
    return FileDescriptor.from_entity(file)
