from abc import ABC, abstractmethod
from bs4 import BeautifulSoup


class IHtmlParser(ABC):
    """只负责把HTML字符串变成可查询的文档，不包含字段提取逻辑"""

    @abstractmethod
    def parse(self, html: str) -> BeautifulSoup:
        """解析HTML，返回支持CSS选择器查询的文档对象"""
        pass
