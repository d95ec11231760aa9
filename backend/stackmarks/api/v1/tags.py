"""标签路由"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from ...database import get_db
from ...models import User
from ...schemas import TagResponse
from ...services import HierarchyStore
from ..deps import get_current_user

router = APIRouter()


@router.get("", response_model=List[TagResponse])
async def get_tags(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """获取标签列表（含使用次数）"""
    rows = await HierarchyStore(db, current_user.id).list_tags()
    return [TagResponse(id=tag.id, name=tag.name, bookmark_count=count) for tag, count in rows]
