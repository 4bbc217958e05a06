from typing import Optional

from .appstore.infrastructure.app_store_parser_impl import AppStoreParserImpl
from .appstore.infrastructure.html_parser_impl import HtmlParserImpl
from .appstore.infrastructure.http_client_impl import HttpClientImpl
from .appstore.services.app_store_service import AppStoreService
from .shared.config import AppStoreSettings, load_settings


def create_app_store_service(settings: Optional[AppStoreSettings] = None) -> AppStoreService:
    """组装应用服务：配置 -> HTTP客户端 / HTML解析器 / 页面解析领域服务"""
    settings = settings or load_settings()
    http_client = HttpClientImpl(
        user_agent=settings.user_agent,
        timeout=settings.fetch_timeout,
        max_retries=settings.max_retries
    )
    return AppStoreService(http_client, HtmlParserImpl(), AppStoreParserImpl(settings.base_url), settings)
