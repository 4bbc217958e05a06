"""
URL 规范化与去重

- 相对链接补全为应用商店域名下的绝对地址；
- 从 URL 路径推导稳定的 handle（去掉查询串后的最后一个非空路径段）；
- 按 handle 去重：后出现的条目覆盖先出现的，但保留首次出现的位置。
"""

from typing import Dict, Iterable, List, Optional
from urllib.parse import urljoin, urlparse, urlunparse, parse_qs, parse_qsl, urlencode

from ..value_objects.app_summary import AppSummary

APP_STORE_HOST = "apps.shopify.com"
APP_STORE_BASE_URL = f"https://{APP_STORE_HOST}"


def absolute_url(url: Optional[str], base_url: str = APP_STORE_BASE_URL) -> str:
    url = (url or "").strip()
    if not url:
        return ""
    if url.startswith("http"):
        return url
    return urljoin(base_url.rstrip('/') + '/', url)


def host_of(base_url: str) -> str:
    """https://apps.example.com -> apps.example.com"""
    return urlparse(base_url).netloc or APP_STORE_HOST


def path_segments(url: str) -> List[str]:
    return [segment for segment in urlparse(url).path.split('/') if segment]


def handle_from_url(url: str) -> str:
    """最后一个非空路径段，例如 https://apps.shopify.com/klaviyo?x=1 -> klaviyo"""
    segments = path_segments(url)
    return segments[-1] if segments else ""


def category_handle_from_url(url: str) -> str:
    """分类链接形如 /categories/<handle>/all，取倒数第二段"""
    segments = path_segments(url)
    return segments[-2] if len(segments) >= 2 else ""


def query_param(url: str, name: str) -> Optional[str]:
    values = parse_qs(urlparse(url).query).get(name)
    return values[0] if values else None


def page_from_url(url: str, default: int = 1) -> int:
    value = query_param(url, 'page')
    try:
        return int(value) if value else default
    except ValueError:
        return default


def set_query_param(url: str, name: str, value: str) -> str:
    """替换（或添加）查询参数，保留其余参数的顺序"""
    parsed = urlparse(url)
    params = parse_qsl(parsed.query, keep_blank_values=True)
    if any(k == name for k, _ in params):
        params = [(k, value if k == name else v) for k, v in params]
    else:
        params.append((name, value))
    return urlunparse(parsed._replace(query=urlencode(params)))


def dedup_by_handle(items: Iterable[AppSummary]) -> List[AppSummary]:
    deduped: Dict[str, AppSummary] = {}
    for item in items:
        # dict 更新已有键时位置不变，值被最后一次出现的条目覆盖
        deduped[item.handle] = item
    return list(deduped.values())
