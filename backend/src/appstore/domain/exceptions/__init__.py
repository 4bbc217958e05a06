# Fetch Exceptions module
from .fetch_exceptions import FetchError

__all__ = ['FetchError']
