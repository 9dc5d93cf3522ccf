"""
Resource Library
Catalog of uploaded study resources. Bytes live in the file storage; the catalog keeps an opaque URI.
"""
import asyncio
import itertools
import logging
import os
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, FrozenSet, List, Optional

from .clock import MonotonicClock, as_utc
from .core import RESOURCES_PURGED, UPLOADS
from .errors import NotTheUploader, OversizeFile, ResourceNotFound, UnsupportedType
from .models.resources import Resource
from .query import AttributePredicate, Results, TextPredicate

logger = logging.getLogger('studyhub.library')

MAX_RESOURCE_SIZE = int(os.getenv('MAX_RESOURCE_SIZE_BYTES', str(10 * 1024 * 1024)))  # 10MB
ALLOWED_FILE_TYPES = frozenset({'PDF', 'DOC', 'DOCX', 'XLS', 'XLSX', 'PPT', 'PPTX', 'TXT', 'PNG', 'JPG'})


@dataclass
class ResourceMetadata:
    title: str
    subject: str
    file_type: str
    size: int
    expires_at: Optional[datetime] = None
    uri: Optional[str] = None


def format_size(size: int) -> str:
    """Human readable size, e.g. 800 KB or 2.4 MB"""
    if size >= 1024 * 1024:
        return f'{size / (1024 * 1024):.1f} MB'
    if size >= 1024:
        return f'{size // 1024} KB'
    return f'{size} B'


class ResourceLibrary:

    def __init__(self, max_size: int = MAX_RESOURCE_SIZE, allowed_types: FrozenSet[str] = ALLOWED_FILE_TYPES,
                 clock: MonotonicClock = None):
        self.max_size = max_size
        self.allowed_types = frozenset(t.upper() for t in allowed_types)
        self._clock = clock or MonotonicClock()
        self._resources: Dict[int, Resource] = {}
        self._ids = itertools.count(1)
        self._lock = asyncio.Lock()

    def check(self, metadata: ResourceMetadata) -> str:
        """Validate size and type; returns the normalized type tag"""
        file_type = (metadata.file_type or '').strip().lstrip('.').upper()
        if file_type not in self.allowed_types:
            UPLOADS.labels(outcome='unsupported_type').inc()
            raise UnsupportedType(f"Invalid file type {metadata.file_type!r}. Allowed: {', '.join(sorted(self.allowed_types))}")
        if metadata.size > self.max_size:
            UPLOADS.labels(outcome='oversize').inc()
            raise OversizeFile(f'File too large. Max size is {format_size(self.max_size)}')
        return file_type

    async def upload(self, metadata: ResourceMetadata, uploader_id: str) -> Resource:
        file_type = self.check(metadata)
        async with self._lock:
            resource = Resource(
                id=next(self._ids),
                title=metadata.title.strip(),
                subject=metadata.subject.strip(),
                file_type=file_type,
                size=metadata.size,
                uploader_id=uploader_id,
                uploaded_at=self._clock.now(),
                expires_at=as_utc(metadata.expires_at),
                uri=metadata.uri,
            )
            self._resources[resource.id] = resource
        UPLOADS.labels(outcome='accepted').inc()
        logger.info({'msg': 'resource_uploaded', 'resource_id': resource.id, 'uploader_id': uploader_id,
                     'file_type': file_type, 'size': resource.size})
        return resource

    async def get(self, resource_id: int) -> Resource:
        resource = self._resources.get(resource_id)
        if resource is None:
            raise ResourceNotFound(f'Resource {resource_id} not found')
        return resource

    async def search(self, query: str = '', subject: str = None, file_type: str = None) -> Results:
        predicates = [
            TextPredicate(query, 'title'),
            AttributePredicate('subject', subject),
            AttributePredicate('file_type', file_type.upper() if file_type else None),
        ]
        return Results(list(self._resources.values()), predicates)

    async def list_uploads(self, uploader_id: str) -> List[Resource]:
        return [r for r in self._resources.values() if r.uploader_id == uploader_id]

    async def delete(self, resource_id: int, peer_id: str) -> Resource:
        async with self._lock:
            resource = await self.get(resource_id)
            if resource.uploader_id != peer_id:
                raise NotTheUploader(f'Resource {resource_id} belongs to another peer')
            del self._resources[resource_id]
        logger.info({'msg': 'resource_deleted', 'resource_id': resource_id, 'peer_id': peer_id})
        return resource

    async def purge_expired(self, now: datetime) -> List[Resource]:
        """Remove every resource whose expiry lies before `now`"""
        now = as_utc(now)
        async with self._lock:
            expired = [r for r in self._resources.values() if r.is_expired(now)]
            for r in expired:
                del self._resources[r.id]
        if expired:
            RESOURCES_PURGED.inc(len(expired))
            logger.info({'msg': 'resources_purged', 'count': len(expired), 'ids': [r.id for r in expired]})
        return expired
