from dataclasses import dataclass, field

from advisornet.domain.entities import Profile, User


@dataclass
class BrowseInput:
    viewer: User
    user_type: str
    search: str | None = None
    location: str | None = None


@dataclass
class DirectoryOutput:
    profiles: list[Profile] = field(default_factory=list)
    locations: list[str] = field(default_factory=list)
    total: int = 0  # approved profiles of the type before filtering
    success: bool = False
    error: str | None = None
    code: str | None = None
