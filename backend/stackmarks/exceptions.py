"""领域异常"""
from typing import Iterable, Optional


class StoreError(Exception):
    """存储层错误基类"""
    pass


class NotFound(StoreError):
    """记录不存在，或不属于当前用户"""

    def __init__(self, kind: str, item_id: Optional[str] = None):
        self.kind = kind
        self.item_id = item_id
        super().__init__(f"{kind} not found" + (f": {item_id}" if item_id else ""))


class ParentNotFound(NotFound):
    """父级不存在或不属于当前用户"""
    pass


class InvalidReorderSet(StoreError):
    """排序 id 列表不是当前范围成员的一个排列"""

    def __init__(
        self,
        kind: str,
        missing: Iterable[str] = (),
        unexpected: Iterable[str] = (),
        duplicates: Iterable[str] = (),
        expected_count: int = 0,
        received_count: int = 0,
    ):
        self.kind = kind
        self.missing = sorted(missing)
        self.unexpected = sorted(unexpected)
        self.duplicates = sorted(duplicates)
        self.expected_count = expected_count
        self.received_count = received_count

        parts = [f"orderedIds must include all {kind}s in scope exactly once"]
        if expected_count != received_count:
            parts.append(f"expected {expected_count} ids, got {received_count}")
        if self.missing:
            parts.append(f"missing: {', '.join(self.missing)}")
        if self.unexpected:
            parts.append(f"unexpected: {', '.join(self.unexpected)}")
        if self.duplicates:
            parts.append(f"duplicated: {', '.join(self.duplicates)}")
        super().__init__("; ".join(parts))


class UnsupportedVersion(StoreError):
    """JSON 导出格式版本不受支持"""

    def __init__(self, version):
        self.version = version
        super().__init__(f"Unsupported JSON export version: {version}")


class ValidationFailed(StoreError):
    """存储层字段校验失败"""
    pass


class DuplicateUsername(StoreError):
    """用户名已存在"""
    pass
