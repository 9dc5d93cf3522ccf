from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class Resource:
    id: int
    title: str
    subject: str
    file_type: str
    size: int
    uploader_id: str
    uploaded_at: datetime
    expires_at: Optional[datetime] = None
    uri: Optional[str] = None

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at < now
