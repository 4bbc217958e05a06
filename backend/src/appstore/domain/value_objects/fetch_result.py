from dataclasses import dataclass, field
from typing import Optional, Dict


@dataclass(frozen=True)
class FetchResult:
    url: str
    html: str
    status: int
    headers: Dict[str, str] = field(default_factory=dict)
    method: str = "GET"
    error_message: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.status == 200
