"""
排序引擎

纯逻辑，不依赖数据库。负责同一父级范围（用户的工作区、工作区的文件夹、
文件夹的分组、分组的书签）内 position 的计算与校验：

- position 从 0 开始连续编号：{0, 1, ..., n-1}
- 新建项追加到末尾：max(position) + 1，空范围为 0
- 重排必须提供范围内全部成员 id 的一个排列，否则整体拒绝
"""
from collections import Counter
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from ...exceptions import InvalidReorderSet


def next_position(positions: Iterable[Optional[int]]) -> int:
    """新成员的 position：当前最大值 + 1，空范围返回 0"""
    current = [p for p in positions if p is not None]
    return max(current) + 1 if current else 0


def diff_reorder_set(
    current_ids: Iterable[str], ordered_ids: Sequence[str]
) -> Tuple[set, set, set]:
    """对比当前成员与请求的排序列表

    Returns:
        (missing, unexpected, duplicates)
    """
    current = set(current_ids)
    counts = Counter(ordered_ids)
    duplicates = {i for i, n in counts.items() if n > 1}
    requested = set(counts)
    return current - requested, requested - current, duplicates


def validate_reorder_set(current_ids: Iterable[str], ordered_ids: Sequence[str], kind: str = "item") -> None:
    """严格校验：ordered_ids 必须恰好是 current_ids 的一个排列"""
    current = list(current_ids)
    missing, unexpected, duplicates = diff_reorder_set(current, ordered_ids)
    if missing or unexpected or duplicates or len(ordered_ids) != len(set(current)):
        raise InvalidReorderSet(
            kind,
            missing=missing,
            unexpected=unexpected,
            duplicates=duplicates,
            expected_count=len(set(current)),
            received_count=len(ordered_ids),
        )


def assign_positions(ordered_ids: Sequence[str]) -> Dict[str, int]:
    """position = 列表下标"""
    return {item_id: idx for idx, item_id in enumerate(ordered_ids)}


def sort_by_position(items: Iterable[Any]) -> List[Any]:
    """按 position 升序（稳定排序），position 相同时保留原顺序"""
    return sorted(items, key=lambda item: item.position)


def compact_positions(items: Iterable[Any]) -> Dict[str, int]:
    """重新编号为 0..n-1（保持当前相对顺序），只返回需要变化的项"""
    changes = {}
    for idx, item in enumerate(sort_by_position(items)):
        if item.position != idx:
            changes[item.id] = idx
    return changes


def is_dense(positions: Iterable[int]) -> bool:
    """positions 是否恰好为 {0, ..., n-1}"""
    values = list(positions)
    return sorted(values) == list(range(len(values)))


def insert_id(ordered_ids: Sequence[str], item_id: str, index: Optional[int] = None) -> List[str]:
    """构造移动目标范围的完整排序列表：将 item_id 插入 index（默认追加到末尾）"""
    result = [i for i in ordered_ids if i != item_id]
    if index is None or index >= len(result):
        result.append(item_id)
    else:
        result.insert(max(index, 0), item_id)
    return result
