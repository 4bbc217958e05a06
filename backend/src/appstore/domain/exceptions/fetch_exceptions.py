"""
抓取异常类模块

定义跨越提取边界的唯一一类异常：上游 HTTP 状态码不是 200。
字段"未找到"从不抛异常，而是返回空值。
"""

from typing import Optional


class FetchError(Exception):
    """
    抓取失败异常

    当上游响应状态码不是 200（或网络层失败，status 为 0）时抛出，
    调用方据此映射为合适的响应码。

    Attributes:
        message: 错误描述信息
        status: 上游返回的状态码
        cause: 原始异常（可选）
    """

    def __init__(self, message: str, status: int, cause: Optional[Exception] = None):
        self.message = message
        self.status = status
        self.cause = cause
        super().__init__(self.message)
