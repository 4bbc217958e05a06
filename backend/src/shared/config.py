"""
应用商店抓取配置

从 backend/.env 加载环境变量，未设置或取值非法时使用默认值：
    APPSTORE_BASE_URL         应用商店根地址
    APPSTORE_USER_AGENT       请求使用的 User-Agent
    APPSTORE_FETCH_TIMEOUT    单次请求超时（秒）
    APPSTORE_MAX_RETRIES      传输层重试次数
    APPSTORE_MAX_CONCURRENCY  批量抓取的最大并发数
    APPSTORE_LOG_DIR          日志根目录
"""

import os
import logging
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# .env 位于 backend 根目录 (../../)
backend_dir = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
env_path = os.path.join(backend_dir, '.env')

APP_STORE_BASE_URL = "https://apps.shopify.com"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)

DEFAULT_FETCH_TIMEOUT = 30.0
DEFAULT_MAX_RETRIES = 0
DEFAULT_MAX_CONCURRENCY = 5


@dataclass(frozen=True)
class AppStoreSettings:
    base_url: str = APP_STORE_BASE_URL
    user_agent: str = DEFAULT_USER_AGENT
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    log_dir: Optional[str] = None

    def __post_init__(self):
        base_url = (self.base_url or APP_STORE_BASE_URL).strip().rstrip('/')
        if not base_url.startswith(('http://', 'https://')):
            base_url = f"https://{base_url}"
        object.__setattr__(self, 'base_url', base_url)
        # 线程池至少需要一个工作线程
        if self.max_concurrency < 1:
            object.__setattr__(self, 'max_concurrency', 1)


def _env_number(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = cast(raw.strip())
    except ValueError:
        logger.warning(f"环境变量 {name}={raw!r} 不是合法数值，使用默认值 {default}")
        return default
    return value if value >= 0 else default


def load_settings(env_file: Optional[str] = None) -> AppStoreSettings:
    """
    读取 .env 与环境变量，构造 AppStoreSettings

    参数:
        env_file: .env 文件路径，缺省为 backend/.env
    """
    load_dotenv(env_file or env_path)

    return AppStoreSettings(
        base_url=os.getenv("APPSTORE_BASE_URL") or APP_STORE_BASE_URL,
        user_agent=os.getenv("APPSTORE_USER_AGENT") or DEFAULT_USER_AGENT,
        fetch_timeout=_env_number("APPSTORE_FETCH_TIMEOUT", DEFAULT_FETCH_TIMEOUT, float),
        max_retries=_env_number("APPSTORE_MAX_RETRIES", DEFAULT_MAX_RETRIES, int),
        max_concurrency=_env_number("APPSTORE_MAX_CONCURRENCY", DEFAULT_MAX_CONCURRENCY, int),
        log_dir=os.getenv("APPSTORE_LOG_DIR") or None
    )
