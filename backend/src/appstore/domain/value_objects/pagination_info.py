from dataclasses import dataclass


@dataclass(frozen=True)
class PaginationInfo:
    has_next_page: bool = False
    total_pages: int = 1
    current_page: int = 1

    def __post_init__(self):
        # 页码从1开始，避免解析出0或负数
        if self.total_pages < 1:
            object.__setattr__(self, 'total_pages', 1)
        if self.current_page < 1:
            object.__setattr__(self, 'current_page', 1)
