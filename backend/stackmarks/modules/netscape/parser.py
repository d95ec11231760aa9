"""
Netscape 书签 HTML 解析

结构：
    <DL><p>
        <DT><H3>文件夹</H3>
        <DL><p>
            <DT><A HREF="https://..." ADD_DATE="...">标题</A>
            <DD>描述
        </DL><p>
    </DL><p>

文件夹可无限嵌套，因此用显式深度计数寻找匹配的 </DL>，而不是贪婪正则；
逐层下降用显式栈完成，嵌套深度不受 Python 递归限制。
无法识别的片段直接跳过，不抛异常。
"""

import html
import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

_COMMENT_RE = re.compile(r"<!--.*?-->", re.S)
_DL_OPEN_RE = re.compile(r"<DL\b[^>]*>", re.I)
_DL_CLOSE_RE = re.compile(r"</DL\s*>", re.I)
_DL_TAG_RE = re.compile(r"<DL\b[^>]*>|</DL\s*>", re.I)
_DT_RE = re.compile(r"<DT\b[^>]*>", re.I)
_H3_RE = re.compile(r"\s*<H3\b([^>]*)>(.*?)</H3\s*>", re.I | re.S)
_A_RE = re.compile(r"\s*<A\s+([^>]*)>(.*?)</A\s*>", re.I | re.S)
_DD_RE = re.compile(r"\s*<DD\b[^>]*>(.*?)(?=<DT\b|</DL|$)", re.I | re.S)
_TAG_RE = re.compile(r"<[^>]+>")

_PAGE_ATTR_RE = re.compile(r"\bPAGE\s*=\s*[\"']true[\"']", re.I)
_BOOKMARKS_ATTR_RE = re.compile(r"\bBOOKMARKS\s*=\s*[\"']true[\"']", re.I)


@dataclass
class ParsedBookmark:
    """书签叶子节点"""
    url: str
    title: str
    add_date: Optional[int] = None
    icon: Optional[str] = None


@dataclass
class ParsedFolder:
    """文件夹节点

    is_page: H3 带 PAGE="true"（独立页面，导入时透明展开）
    is_tab_book: H3 带 BOOKMARKS="true"（标签集合）
    """
    title: str
    children: List[Union["ParsedFolder", ParsedBookmark]] = field(default_factory=list)
    is_page: bool = False
    is_tab_book: bool = False


ParsedNode = Union[ParsedFolder, ParsedBookmark]


def decode_html(text: str) -> str:
    """HTML 实体解码（命名实体与数字实体）"""
    return html.unescape(text)


def _text(fragment: str) -> str:
    """去掉内嵌标签后解码"""
    return decode_html(_TAG_RE.sub("", fragment)).strip()


def _attr(attrs: str, name: str) -> Optional[str]:
    """读取属性值，支持双引号 / 单引号 / 无引号"""
    match = re.search(
        rf"\b{name}\s*=\s*(?:\"([^\"]*)\"|'([^']*)'|([^\s>]+))",
        attrs,
        re.I,
    )
    if not match:
        return None
    return next(g for g in match.groups() if g is not None)


def parse_netscape_html(content: str) -> List[ParsedNode]:
    """解析 Netscape 书签 HTML，返回顶层节点列表"""
    if not content:
        return []

    # 去掉注释
    content = _COMMENT_RE.sub("", content)

    # 最外层 <DL>
    first_open = _DL_OPEN_RE.search(content)
    if not first_open:
        logger.info("[Netscape] 未找到 <DL>，没有可解析的内容")
        return []

    closes = _match_dl_pairs(content)
    start = first_open.end()
    end = closes.get(start)
    if end is None:
        # 缺少结束标签时解析到文档末尾
        end = len(content)

    return _parse_dl_content(content, start, end, closes)


def _match_dl_pairs(content: str) -> Dict[int, int]:
    """一次扫描，为每个 <DL> 找到与之匹配的 </DL>

    用栈做深度计数：遇到 <DL> 深度 +1（入栈），遇到 </DL> 深度 -1（出栈配对）。
    返回 {<DL> 结束位置: 匹配的 </DL> 起始位置}，未闭合的 <DL> 不在结果中。
    """
    closes: Dict[int, int] = {}
    open_ends: List[int] = []
    for tag in _DL_TAG_RE.finditer(content):
        if tag.group(0).startswith("</"):
            # 多余的 </DL> 忽略
            if open_ends:
                closes[open_ends.pop()] = tag.start()
        else:
            open_ends.append(tag.end())
    return closes


def _parse_dl_content(content: str, start: int, end: int, closes: Dict[int, int]) -> List[ParsedNode]:
    """解析 content[start:end]（一个 <DL> 的内部内容）

    嵌套层级用显式栈展开，不占用 Python 调用栈，深度不受递归限制。
    栈中每一帧为 (子节点列表, 当前位置, 结束位置)。
    """
    root: List[ParsedNode] = []
    stack = [(root, start, end)]

    while stack:
        items, pos, end = stack.pop()

        while pos < end:
            dt = _DT_RE.search(content, pos, end)
            if dt is None:
                break
            pos = dt.end()

            h3 = _H3_RE.match(content, pos, end)
            if h3:
                folder = _new_folder(h3)
                items.append(folder)
                pos = h3.end()
                span = _child_list_span(content, pos, end, closes)
                if span is None:
                    continue
                inner_start, inner_end, resume = span
                # 先解析子 <DL>，结束后回到本层 resume 处继续
                stack.append((items, resume, end))
                stack.append((folder.children, inner_start, inner_end))
                break

            anchor = _A_RE.match(content, pos, end)
            if anchor:
                bookmark = _parse_bookmark(anchor)
                if bookmark is not None:
                    items.append(bookmark)
                pos = anchor.end()

                # 书签描述 <DD>：跳过
                dd = _DD_RE.match(content, pos, end)
                if dd:
                    pos = dd.end()
                continue

            # 既不是文件夹也不是书签：跳到下一个 <DT>

    return root


def _new_folder(h3: re.Match) -> ParsedFolder:
    attrs = h3.group(1)
    return ParsedFolder(
        title=_text(h3.group(2)),
        is_page=bool(_PAGE_ATTR_RE.search(attrs)),
        is_tab_book=bool(_BOOKMARKS_ATTR_RE.search(attrs)),
    )


def _child_list_span(content: str, pos: int, end: int, closes: Dict[int, int]) -> Optional[Tuple[int, int, int]]:
    """定位 <H3> 之后紧随的子 <DL>

    Returns:
        (内容起点, 内容终点, 父层继续解析的位置)；没有子 <DL> 时返回 None
    """
    # 子 <DL> 必须出现在下一个 <DT> 之前，否则是空文件夹
    next_dt = _DT_RE.search(content, pos, end)
    dl_open = _DL_OPEN_RE.search(content, pos, next_dt.start() if next_dt else end)
    if dl_open is None:
        return None

    inner_start = dl_open.end()
    inner_end = closes.get(inner_start)
    if inner_end is None or inner_end > end:
        # 未闭合：剩余内容都属于该文件夹
        return inner_start, end, end

    close = _DL_CLOSE_RE.match(content, inner_end, end)
    return inner_start, inner_end, close.end() if close else inner_end


def _parse_bookmark(anchor: re.Match) -> Optional[ParsedBookmark]:
    """解析 <A>，没有 HREF 时返回 None"""
    attrs = anchor.group(1)
    href = _attr(attrs, "HREF")
    if not href:
        return None

    add_date = None
    raw_date = _attr(attrs, "ADD_DATE")
    if raw_date and raw_date.isdigit():
        add_date = int(raw_date)

    icon = _attr(attrs, "ICON")
    return ParsedBookmark(
        url=decode_html(href).strip(),
        title=_text(anchor.group(2)),
        add_date=add_date,
        icon=decode_html(icon) if icon else None,
    )
def flatten_bookmarks(folder: ParsedFolder) -> List[ParsedBookmark]:
    """深度优先收集文件夹下所有书签（忽略中间文件夹），用迭代器栈代替递归"""
    bookmarks: List[ParsedBookmark] = []
    pending = [iter(folder.children)]
    while pending:
        child = next(pending[-1], None)
        if child is None:
            pending.pop()
        elif isinstance(child, ParsedBookmark):
            bookmarks.append(child)
        else:
            pending.append(iter(child.children))
    return bookmarks


def count_bookmarks(folder: ParsedFolder) -> int:
    """统计文件夹下（任意深度）的书签数"""
    return len(flatten_bookmarks(folder))
