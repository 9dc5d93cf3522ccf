"""
Background workers
Periodic housekeeping that runs next to the API
"""
import asyncio
import logging
import os
from typing import List

from .clock import utcnow
from .file_storage import FileStorageManager
from .library import ResourceLibrary
from .models.resources import Resource

logger = logging.getLogger('studyhub.workers')

PURGE_INTERVAL_SECONDS = float(os.getenv('PURGE_INTERVAL_SECONDS', '3600'))


class PurgeWorker:
    """Removes expired resources from the library and their stored bytes"""

    def __init__(self, library: ResourceLibrary, files: FileStorageManager, delay: float = PURGE_INTERVAL_SECONDS):
        self.library = library
        self.files = files
        self.delay = delay
        self.running = False
        self.processed_count = 0
        self.error_count = 0
        self._task = None

    async def run_once(self, now=None) -> List[Resource]:
        expired = await self.library.purge_expired(now or utcnow())
        for resource in expired:
            if resource.uri:
                await self.files.delete(resource.uri)
        self.processed_count += len(expired)
        return expired

    async def start(self):
        """Loop until stopped"""
        self.running = True
        logger.info(f"Starting {self.__class__.__name__} every {self.delay}s")
        while self.running:
            try:
                await self.run_once()
            except Exception as e:
                logger.error(f"Worker {self.__class__.__name__} error: {str(e)}")
                self.error_count += 1
            await asyncio.sleep(self.delay)

    def spawn(self) -> asyncio.Task:
        self._task = asyncio.create_task(self.start())
        return self._task

    async def stop(self):
        self.running = False
        if self._task:
            self._task.cancel()
            await asyncio.gather(self._task, return_exceptions=True)
            self._task = None
        logger.info(f"Stopping {self.__class__.__name__}")

    def get_stats(self) -> dict:
        return {
            "processed": self.processed_count,
            "errors": self.error_count,
            "running": self.running,
        }
