from pydantic import BaseModel, Field
from typing import Annotated, List, Literal, Optional, Union


class UserProfile(BaseModel):
    kind: Literal['user'] = 'user'
    id: str
    name: str
    initials: str
    color: str
    role: str
    bio: Optional[str] = None
    email: Optional[str] = None
    online: bool = False
    common_groups: List[str] = []


class GroupMember(BaseModel):
    id: str
    name: str
    role: Literal['Admin', 'Member']
    you: bool = False


class GroupProfile(BaseModel):
    kind: Literal['group'] = 'group'
    id: int
    name: str
    initials: str
    color: str
    description: Optional[str] = None
    members: List[GroupMember]
    online_count: int = 0


Profile = Annotated[Union[UserProfile, GroupProfile], Field(discriminator='kind')]
