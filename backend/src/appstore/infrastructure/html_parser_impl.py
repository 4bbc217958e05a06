from bs4 import BeautifulSoup

from ..domain.demand_interface.i_html_parser import IHtmlParser


class HtmlParserImpl(IHtmlParser):
    """基于BeautifulSoup的HTML解析器实现"""

    def __init__(self, parser: str = 'html.parser'):
        """
        参数:
            parser: 解析器类型，可选值:
                   'html.parser' (Python内置，默认)
                   'lxml' (更快，需安装lxml)
                   'html5lib' (最宽容，需安装html5lib)
        """
        self._parser = parser

    def parse(self, html: str) -> BeautifulSoup:
        return BeautifulSoup(html or "", self._parser)
