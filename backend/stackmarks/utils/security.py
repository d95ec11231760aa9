"""认证工具：bcrypt 密码哈希 + JWT 访问令牌"""
from datetime import datetime, timedelta, timezone
from typing import Optional
import logging

from jose import jwt, JWTError
from passlib.context import CryptContext

from ..config import settings

logger = logging.getLogger(__name__)

TOKEN_TYPE = "access"

# 10 轮与旧数据的哈希成本一致
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=10)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """校验密码；存储的哈希无法识别时视为不匹配"""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        logger.warning("[Auth] 无法识别的密码哈希格式")
        return False


def create_access_token(user_id: str, expires_minutes: Optional[int] = None) -> str:
    """签发访问令牌，sub 为用户 id"""
    now = datetime.now(timezone.utc)
    minutes = expires_minutes if expires_minutes is not None else settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES
    payload = {
        "sub": user_id,
        "iat": now,
        "exp": now + timedelta(minutes=minutes),
        "type": TOKEN_TYPE,
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[str]:
    """解析访问令牌，返回用户 id；签名错误、过期或类型不符时返回 None"""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None
    if payload.get("type") != TOKEN_TYPE:
        return None
    return payload.get("sub")
