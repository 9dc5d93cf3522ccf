import os
from datetime import datetime
from fastapi import APIRouter, Depends, File, Form, UploadFile
from typing import List, Optional
from ..schemas.resources import ResourceOut
from ..schemas.peers import ActionOkOut
from ..models.peers import Peer
from ..auth import get_current_peer, get_stores
from ..core import UPLOADS
from ..errors import OversizeFile
from ..library import ResourceMetadata, format_size
from ..stores import Stores

router = APIRouter()


@router.post('/', response_model=ResourceOut)
async def upload(
    file: UploadFile = File(...),
    title: str = Form(..., min_length=1),
    subject: str = Form(..., min_length=1),
    file_type: Optional[str] = Form(None),
    expires_at: Optional[datetime] = Form(None),
    current_peer: Peer = Depends(get_current_peer),
    stores: Stores = Depends(get_stores),
):
    """Store the bytes, then catalog them; a rejected upload leaves nothing behind"""
    if file.size and file.size > stores.library.max_size:
        UPLOADS.labels(outcome='oversize').inc()
        raise OversizeFile(f'File too large. Max size is {format_size(stores.library.max_size)}')
    content = await file.read()
    metadata = ResourceMetadata(
        title=title,
        subject=subject,
        file_type=file_type or os.path.splitext(file.filename or '')[1],
        size=len(content),
        expires_at=expires_at,
    )
    stores.library.check(metadata)
    metadata.uri = await stores.files.save(current_peer.id, file.filename, content)
    try:
        return await stores.library.upload(metadata, current_peer.id)
    except Exception:
        await stores.files.delete(metadata.uri)
        raise


@router.get('/', response_model=List[ResourceOut])
async def search(q: str = '', subject: Optional[str] = None, file_type: Optional[str] = None,
                 stores: Stores = Depends(get_stores)):
    results = await stores.library.search(q, subject=subject, file_type=file_type)
    return results.all()


@router.get('/mine', response_model=List[ResourceOut])
async def my_uploads(current_peer: Peer = Depends(get_current_peer), stores: Stores = Depends(get_stores)):
    return await stores.library.list_uploads(current_peer.id)


@router.get('/{resource_id}', response_model=ResourceOut)
async def get_resource(resource_id: int, stores: Stores = Depends(get_stores)):
    return await stores.library.get(resource_id)


@router.delete('/{resource_id}', response_model=ActionOkOut)
async def delete(resource_id: int, current_peer: Peer = Depends(get_current_peer),
                 stores: Stores = Depends(get_stores)):
    resource = await stores.library.delete(resource_id, current_peer.id)
    removed = await stores.files.delete(resource.uri) if resource.uri else False
    return ActionOkOut(message='Resource removed' if removed else 'Resource removed from the library')
