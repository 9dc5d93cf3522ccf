from datetime import datetime
from pydantic import BaseModel, ConfigDict, computed_field
from typing import Optional

from ..library import format_size


class ResourceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    subject: str
    file_type: str
    size: int
    uploader_id: str
    uploaded_at: datetime
    expires_at: Optional[datetime] = None
    uri: Optional[str] = None

    @computed_field
    @property
    def size_label(self) -> str:
        return format_size(self.size)
