"""标识符生成."""

import re
from uuid import UUID, uuid4

from ksuid import Ksuid

# KSUID 的 base62 文本表示固定为 27 个字符
_UID_PATTERN = re.compile(r"^[0-9A-Za-z]{27}$")


def new_uuid() -> UUID:
    """生成随机 UUID."""
    return uuid4()


def new_entry_uid() -> str:
    """生成按时间排序的条目 UID（KSUID，20 字节）."""
    return str(Ksuid())


def new_job_id() -> str:
    """生成同步任务 ID."""
    return str(Ksuid())


def is_valid_uid(value: str) -> bool:
    """检查 UID 是否为合法 KSUID 文本."""
    return bool(value) and _UID_PATTERN.match(value) is not None
