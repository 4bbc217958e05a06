from abc import ABC, abstractmethod
from typing import Dict, Optional
from ..value_objects.fetch_result import FetchResult


class IHttpClient(ABC):
    @abstractmethod
    def fetch(
        self,
        url: str,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        body: Optional[str] = None,
        timeout: Optional[float] = None
    ) -> FetchResult:
        """
        执行一次HTTP请求
        返回: FetchResult(html, status, headers, method)
        处理: 超时中断、网络异常转为 status=0 的结果，不抛出异常
        非200状态码由调用方分类处理
        """
        pass
