"""
文本归一化：空白清理、价格、计数与日期
"""

import logging
import re
from datetime import datetime
from typing import Optional
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

logger = logging.getLogger('domain.extraction')

_WHITESPACE_RE = re.compile(r'\s+')

# 第一个金额，允许千分位，例如 "$19.90/month or $190.80/year" -> 19.90
_PRICE_RE = re.compile(r'\$?((?:\d{1,3}(?:,\d{3})+|\d+)(?:\.\d{1,2})?)')
_NON_PRICE_CHARS_RE = re.compile(r'[^0-9.]')

_COUNT_RE = re.compile(r'\d[\d,]*')

MONTH_DATE_RE = re.compile(
    r'\b(January|February|March|April|May|June|July|August|September|October|November|December)'
    r'\s+\d{1,2},\s+\d{4}\b'
)
ISO_DATE_RE = re.compile(r'\d{4}-\d{2}-\d{2}')
SLASH_DATE_RE = re.compile(r'\d{1,2}/\d{1,2}/\d{4}')
RELATIVE_DATE_RE = re.compile(r'(\d+)\s+(day|week|month|year)s?\s+ago')

DATE_PATTERNS = (MONTH_DATE_RE, ISO_DATE_RE, SLASH_DATE_RE, RELATIVE_DATE_RE)


def clean_text(text: Optional[str]) -> str:
    """折叠连续空白与换行并去除首尾空白"""
    if not text:
        return ""
    return _WHITESPACE_RE.sub(' ', text).strip()


def clean_price(price: Optional[str]) -> str:
    """
    价格归一化为纯数字字符串

    规则:
        1. 取第一个金额（可带 $ 与千分位）
        2. 否则去掉所有非 [0-9.] 字符
        3. 结果不含数字时返回 "0"
    """
    if not price:
        return "0"

    match = _PRICE_RE.search(price)
    if match:
        return match.group(1).replace(',', '')

    stripped = _NON_PRICE_CHARS_RE.sub('', price)
    return stripped if any(ch.isdigit() for ch in stripped) else "0"


def parse_count(text: Optional[str]) -> int:
    """'1,234' -> 1234，找不到数字时返回 0"""
    if not text:
        return 0
    match = _COUNT_RE.search(text)
    if not match:
        return 0
    return int(match.group(0).replace(',', ''))


def looks_like_date(text: str) -> bool:
    return any(pattern.search(text) for pattern in DATE_PATTERNS)


def parse_date(text: Optional[str], now: Optional[datetime] = None) -> str:
    """
    把页面上的日期文本转成 ISO-8601 字符串（带本地时区偏移）

    - "March 31, 2025" / "2025-03-31" / "3/31/2025" 交给 dateutil 解析；
    - "3 days ago" 这类相对日期以当前时间为基准换算；
    - 无法解析时原样返回清理后的文本，空输入返回 ""。
    """
    text = clean_text(text)
    if not text:
        return ""

    relative = RELATIVE_DATE_RE.search(text)
    if relative:
        amount = int(relative.group(1))
        unit = relative.group(2) + 's'
        base = now or datetime.now().astimezone()
        return (base - relativedelta(**{unit: amount})).isoformat(timespec='seconds')

    try:
        parsed = date_parser.parse(text, fuzzy=True)
        if parsed.tzinfo is None:
            parsed = parsed.astimezone()
    except (ValueError, OverflowError, OSError) as e:
        logger.debug(f"日期解析失败，保留原文: {text} - {str(e)}")
        return text

    return parsed.isoformat(timespec='seconds')
