import logging
import time
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry
from typing import Dict, Optional

from ..domain.demand_interface.i_http_client import IHttpClient
from ..domain.value_objects.fetch_result import FetchResult
from src.shared.config import DEFAULT_USER_AGENT

error_logger = logging.getLogger('infrastructure.error')
perf_logger = logging.getLogger('infrastructure.perf')

class HttpClientImpl(IHttpClient):
    """基于requests库的HTTP客户端实现"""

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 30,
        max_retries: int = 0,
        retry_backoff: float = 0.3
    ):
        """
        初始化HTTP客户端

        参数:
            user_agent: User-Agent标识
            timeout: 默认请求超时时间(秒)
            max_retries: 传输层最大重试次数（默认不重试，重试只属于传输层）
            retry_backoff: 重试间隔倍数
        """
        self._timeout = timeout
        self._session = requests.Session()
        self._max_retries = max_retries

        self._session.headers.update({
            'User-Agent': user_agent,
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
            'Accept-Language': 'en-US,en;q=0.5',
            'Accept-Encoding': 'gzip, deflate',
            'Connection': 'keep-alive'
        })

        retry_strategy = Retry(
            total=max_retries,
            backoff_factor=retry_backoff,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["HEAD", "GET", "OPTIONS"],
            raise_on_status=False,
            connect=max_retries,
            read=max_retries,
            redirect=5,
        )

        adapter = HTTPAdapter(max_retries=retry_strategy)
        self._session.mount("http://", adapter)
        self._session.mount("https://", adapter)

    def fetch(
        self,
        url: str,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        body: Optional[str] = None,
        timeout: Optional[float] = None
    ) -> FetchResult:
        """
        执行HTTP请求

        参数:
            url: 目标URL
            method: 请求方法
            headers: 自定义请求头(可选)，与会话头合并
            body: 请求体(可选)
            timeout: 本次请求的超时(秒)，缺省使用构造时的超时

        返回:
            FetchResult；网络层异常转换为 status=0 并带 error_message，不抛出异常
        """
        timeout = timeout if timeout is not None else self._timeout
        start = time.perf_counter()

        try:
            response = self._session.request(
                method,
                url,
                headers=headers,
                data=body,
                timeout=timeout,
                allow_redirects=True
            )

            # 响应头没有声明编码时 requests 默认 ISO-8859-1
            if response.encoding == 'ISO-8859-1':
                response.encoding = response.apparent_encoding
            if not response.encoding:
                response.encoding = 'utf-8'

            content = response.text
            elapsed_ms = (time.perf_counter() - start) * 1000

            perf_logger.info(
                f"{method} {url} - {response.status_code} - {len(content)} chars - {elapsed_ms:.2f}ms",
                extra={
                    'url': url,
                    'method': method,
                    'status_code': response.status_code,
                    'content_length': len(content),
                    'elapsed_ms': round(elapsed_ms, 2),
                    'component': 'HttpClientImpl'
                }
            )

            return FetchResult(
                url=response.url,
                html=content,
                status=response.status_code,
                headers=dict(response.headers),
                method=method,
                error_message=None if response.status_code == 200 else f"HTTP {response.status_code}"
            )

        except requests.exceptions.Timeout:
            return self._create_error_result(url, method, 'Timeout', f"请求超过{timeout}秒未响应")

        except requests.exceptions.ConnectionError as e:
            return self._create_error_result(url, method, 'ConnectionError', f"无法连接到服务器: {str(e)}")

        except requests.exceptions.TooManyRedirects:
            return self._create_error_result(url, method, 'TooManyRedirects', "重定向次数超过限制")

        except requests.exceptions.RequestException as e:
            return self._create_error_result(url, method, 'RequestException', f"请求失败: {str(e)}")

    def _create_error_result(self, url: str, method: str, error_type: str, error_detail: str) -> FetchResult:
        """创建表示网络层失败的结果（status=0）"""
        error_logger.error(
            f"HTTP {error_type}: {url} - {error_detail}",
            extra={'url': url, 'error_type': error_type, 'component': 'HttpClientImpl'}
        )
        return FetchResult(
            url=url,
            html='',
            status=0,
            headers={},
            method=method,
            error_message=f"{error_type}: {error_detail}"
        )

    def close(self):
        """关闭会话，释放连接"""
        self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
