"""
多策略回退链

同一个语义字段在不同版本的页面上以不同的 DOM 形态出现，因此每个字段都被建模为
一组按优先级排列的纯函数策略 (document) -> Optional[T]：
- 按顺序执行，第一个返回非空值的策略胜出；
- 全部落空时返回字段声明的默认值（""、0、[]、False），落空不是错误。
"""

import logging
from typing import Callable, Optional, Sequence, TypeVar

logger = logging.getLogger('domain.extraction')

T = TypeVar('T')
Strategy = Callable[..., Optional[T]]


def first_match(strategies: Sequence[Strategy], *args, default: T) -> T:
    for strategy in strategies:
        value = strategy(*args)
        if value:
            logger.debug(f"策略命中: {getattr(strategy, '__name__', repr(strategy))}")
            return value
    return default
