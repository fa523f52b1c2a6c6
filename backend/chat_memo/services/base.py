"""服务层通用工具"""
from typing import Iterable

from pydantic import BaseModel


def collect_changes(data: BaseModel, nullable: Iterable[str] = ()) -> dict:
    """提取部分更新的字段

    只返回请求中显式给出的字段；对不可为空的列，显式传入 null 视为未给出。
    """
    nullable = set(nullable)
    changes = data.model_dump(exclude_unset=True)
    return {
        key: value
        for key, value in changes.items()
        if value is not None or key in nullable
    }


def apply_changes(obj, changes: dict) -> None:
    """把字段写回 ORM 对象"""
    for key, value in changes.items():
        setattr(obj, key, value)
