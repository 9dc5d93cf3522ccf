"""
File Storage for study resources
Writes uploaded bytes to disk and hands back an opaque URI the library can keep
"""

import os
import uuid
import logging
import aiofiles
from typing import Optional

logger = logging.getLogger('studyhub.file_storage')

# Configuration
UPLOAD_DIR = os.getenv('RESOURCE_UPLOAD_DIR', 'static/resources')
URI_PREFIX = '/static/resources/'


class FileStorageManager:
    """Manages resource file writes and deletions"""

    def __init__(self, upload_dir: str = UPLOAD_DIR):
        self.upload_dir = upload_dir

    @staticmethod
    def generate_filename(uploader_id: str, original_filename: str) -> str:
        """Generate unique filename for an uploaded resource"""
        file_ext = os.path.splitext(original_filename)[1].lower()
        unique_id = uuid.uuid4().hex[:12]
        return f"{uploader_id}_{unique_id}{file_ext}"

    def get_file_path(self, filename: str) -> str:
        return os.path.join(self.upload_dir, filename)

    @staticmethod
    def get_uri(filename: str) -> str:
        return f"{URI_PREFIX}{filename}"

    def path_for_uri(self, uri: str) -> Optional[str]:
        if not uri or not uri.startswith(URI_PREFIX):
            return None
        filename = os.path.basename(uri[len(URI_PREFIX):])
        return self.get_file_path(filename) if filename else None

    async def save(self, uploader_id: str, original_filename: str, content: bytes) -> str:
        """Save resource bytes and return the URI"""
        os.makedirs(self.upload_dir, exist_ok=True)
        filename = self.generate_filename(uploader_id, original_filename or 'resource')
        file_path = self.get_file_path(filename)
        try:
            async with aiofiles.open(file_path, 'wb') as f:
                await f.write(content)
        except OSError:
            # Clean up file if it was created
            if os.path.exists(file_path):
                os.remove(file_path)
            raise
        logger.info({'msg': 'file_saved', 'uri': self.get_uri(filename), 'size': len(content)})
        return self.get_uri(filename)

    async def delete(self, uri: str) -> bool:
        """Delete stored bytes; False when nothing was there"""
        file_path = self.path_for_uri(uri)
        if not file_path or not os.path.exists(file_path):
            return False
        try:
            os.remove(file_path)
        except OSError as e:
            logger.warning({'msg': 'file_delete_failed', 'uri': uri, 'error': str(e)})
            return False
        return True
