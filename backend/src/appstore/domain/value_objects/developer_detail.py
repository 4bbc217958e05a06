from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class DeveloperApp:
    name: str
    url: str
    category: str = ""
    rating: Optional[float] = None


@dataclass(frozen=True)
class SocialLink:
    platform: str
    url: str


@dataclass(frozen=True)
class DeveloperDetail:
    name: str = ""
    description: str = ""
    website: str = ""
    location: str = ""
    url: str = ""
    app_count: int = 0
    apps: List[DeveloperApp] = field(default_factory=list)
    social_links: List[SocialLink] = field(default_factory=list)
