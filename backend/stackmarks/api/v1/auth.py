"""认证路由"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...database import get_db, get_write_db
from ...schemas import UserCreate, UserLogin, UserResponse, Token
from ...services.users import create_user, find_user_by_username
from ...utils.security import hash_password, verify_password, create_access_token
from .users import user_response

router = APIRouter()


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(user_in: UserCreate, db: AsyncSession = Depends(get_write_db)):
    """用户注册（同时创建默认工作区 / 文件夹 / 分组）"""
    user = await create_user(db, user_in.username, hash_password(user_in.password))
    return user_response(user)


@router.post("/login", response_model=Token)
async def login(user_in: UserLogin, db: AsyncSession = Depends(get_db)):
    """用户登录"""
    user = await find_user_by_username(db, user_in.username)

    if not user or not verify_password(user_in.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="用户名或密码错误"
        )

    return Token(access_token=create_access_token(user.id))
