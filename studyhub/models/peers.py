from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class Peer:
    id: str
    display_name: str
    university_id: str
    course: str = ""
    year_of_study: str = ""
    initials: str = ""
    avatar_color: str = ""
    bio: Optional[str] = None
    email: Optional[str] = None
    online: bool = False
    last_seen: Optional[datetime] = None
    active: bool = True

    def __post_init__(self):
        if not self.initials:
            self.initials = make_initials(self.display_name)


@dataclass
class University:
    id: str
    name: str
    full_name: str = ""
    color: str = ""


def make_initials(name: str) -> str:
    parts = [p for p in name.replace('.', ' ').split() if p]
    return ''.join(p[0] for p in parts[:2]).upper()
