"""
文档查询辅助函数

对 BeautifulSoup / soupsieve 做一层薄封装，让字段提取代码读起来像"选中一组元素再取值"：
- 多个元素的文本按文档顺序拼接；
- 属性只取第一个匹配元素；
- 未匹配时一律返回空字符串，不返回 None，也不抛异常。
"""

import json
import logging
from typing import Any, Dict, Iterable, List, Optional, Union
from bs4 import BeautifulSoup, Tag

logger = logging.getLogger('domain.extraction')

Node = Union[BeautifulSoup, Tag]

JSON_LD_SELECTOR = 'script[type="application/ld+json"]'


def select_all(node: Optional[Node], selector: str) -> List[Tag]:
    if node is None:
        return []
    return node.select(selector)


def select_first(node: Optional[Node], selector: str) -> Optional[Tag]:
    if node is None:
        return None
    return node.select_one(selector)


def text_of(elements: Iterable[Tag]) -> str:
    """多个元素的文本拼接（不做清理）"""
    return "".join(el.get_text() for el in elements)


def select_text(node: Optional[Node], selector: str) -> str:
    """所有匹配元素的文本拼接后去除首尾空白"""
    return text_of(select_all(node, selector)).strip()


def first_text(node: Optional[Node], selector: str) -> str:
    el = select_first(node, selector)
    return el.get_text().strip() if el is not None else ""


def attr_of(el: Optional[Tag], attr: str) -> str:
    if el is None:
        return ""
    value = el.get(attr)
    if value is None:
        return ""
    # class / rel 等多值属性在 bs4 中是列表
    if isinstance(value, list):
        value = " ".join(value)
    return value.strip()


def first_attr(node: Optional[Node], selector: str, attr: str) -> str:
    return attr_of(select_first(node, selector), attr)


def meta_content(doc: Node, selector: str) -> str:
    return first_attr(doc, selector, 'content')


def canonical_url(doc: Node) -> str:
    return first_attr(doc, 'link[rel="canonical"]', 'href')


def document_title(doc: Node) -> str:
    title = select_first(doc, 'title')
    return title.get_text() if title is not None else ""


def body_text(doc: Node) -> str:
    """
    页面正文文本
    片段文档（没有 <body>）时退回整个文档的文本
    """
    body = doc.find('body')
    return (body or doc).get_text()


def unique_parents(elements: Iterable[Tag]) -> List[Tag]:
    """按出现顺序返回去重后的父元素"""
    parents: List[Tag] = []
    for el in elements:
        parent = el.parent
        if isinstance(parent, Tag) and not any(parent is seen for seen in parents):
            parents.append(parent)
    return parents


def unique_elements(elements: Iterable[Tag]) -> List[Tag]:
    result: List[Tag] = []
    for el in elements:
        if not any(el is seen for seen in result):
            result.append(el)
    return result


def closest(el: Tag, selector: str) -> Optional[Tag]:
    """包含自身在内，向上查找第一个匹配选择器的祖先"""
    return el.css.closest(selector)


def child_elements(elements: Iterable[Tag]) -> List[Tag]:
    """所有元素的直接子元素（仅标签），按顺序拼接"""
    children: List[Tag] = []
    for el in elements:
        children.extend(child for child in el.children if isinstance(child, Tag))
    return children


def parse_json_ld(doc: Node) -> Dict[str, Any]:
    """
    读取第一个 JSON-LD 结构化数据块

    返回:
        解析后的字典；不存在、格式错误或不是对象时返回空字典。
        格式错误在这里被吞掉，调用方继续走 DOM 策略。
    """
    script = select_first(doc, JSON_LD_SELECTOR)
    if script is None:
        return {}

    raw = script.get_text().strip() or "{}"
    try:
        data = json.loads(raw)
    except ValueError as e:
        logger.debug(f"JSON-LD 解析失败，回退到 DOM 策略: {str(e)}")
        return {}

    return data if isinstance(data, dict) else {}
