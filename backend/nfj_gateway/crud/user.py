"""用户 CRUD 操作"""
import uuid

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from nfj_gateway.models import User, utc_now


def get_by_email(*, session: Session, email: str) -> User | None:
    """根据邮箱查询用户"""
    statement = select(User).where(User.email == email)
    return session.exec(statement).first()


def get(*, session: Session, user_id: uuid.UUID) -> User | None:
    """根据 ID 查询用户"""
    return session.get(User, user_id)


def register_by_email(*, session: Session, email: str) -> User:
    """
    按邮箱注册用户（幂等）

    直接插入，邮箱唯一约束冲突时回滚并返回已存在的用户。
    两个并发注册同一邮箱时，后提交的一方会走冲突分支。
    """
    user = User(email=email)
    try:
        session.add(user)
        session.commit()
    except IntegrityError:
        session.rollback()
        existing = get_by_email(session=session, email=email)
        if existing is None:
            raise
        return existing
    session.refresh(user)
    return user


def grant_premium(*, session: Session, user: User) -> None:
    """
    开通高级版（不提交事务）

    重复设置为 True 不会产生副作用，调用方负责提交。
    """
    if user.is_premium:
        return
    user.is_premium = True
    user.updated_at = utc_now()
    session.add(user)
