"""
搜索页的局部片段（partial page）定位

首次响应可能直接内联结果片段（<turbo-frame id="search_page">...</turbo-frame>），
也可能只给出一个带 src 的懒加载片段引用，需要二次请求该地址。
这里只做纯解析：找内联内容、找片段地址、改写 page 参数；二次请求由应用服务完成。
"""

from typing import Optional
from urllib.parse import urljoin
from bs4 import BeautifulSoup

from .dom import first_attr, select_first
from .url_normalizer import APP_STORE_BASE_URL, absolute_url, set_query_param

FRAGMENT_TAG = 'turbo-frame'
SEARCH_FRAGMENT_ID = 'search_page'


def find_inline_fragment(doc: BeautifulSoup, fragment_id: str = SEARCH_FRAGMENT_ID) -> Optional[str]:
    """返回内联片段的 HTML 内容；片段不存在或为空时返回 None"""
    frame = select_first(doc, f'{FRAGMENT_TAG}#{fragment_id}')
    if frame is None:
        return None
    content = frame.decode_contents()
    return content if content.strip() else None


def find_fragment_source(doc: BeautifulSoup) -> Optional[str]:
    return first_attr(doc, f'{FRAGMENT_TAG}[src]', 'src') or None


def fragment_url(src: str, page: int = 1, base_url: str = APP_STORE_BASE_URL) -> str:
    """
    片段的绝对地址
    page > 1 时把 src 中的 page 参数改写为请求的页码
    """
    if page > 1:
        src = set_query_param(urljoin(base_url.rstrip('/') + '/', src), 'page', str(page))
    return absolute_url(src, base_url)
