import time
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


def now_ms() -> int:
    """当前时间，Unix 毫秒"""
    return int(time.time() * 1000)


class Timer(BaseModel):
    """计时器的存储形式

    progress / duration 为派生字段，只在读取时计算，不写入数据库。
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    user_id: str = Field(alias="userId")
    description: str
    start: int  # 毫秒
    is_active: bool = Field(alias="isActive")
    end: Optional[int] = None  # 仅在已停止时存在

    def progress(self, now: Optional[int] = None) -> int:
        if now is None:
            now = now_ms()
        return max(0, now - self.start)

    @property
    def duration(self) -> Optional[int]:
        if self.end is None:
            return None
        return self.end - self.start

    def to_public(self, now: Optional[int] = None) -> dict:
        data = {
            "id": self.id,
            "description": self.description,
            "start": self.start,
            "isActive": self.is_active,
        }
        if self.is_active:
            data["progress"] = self.progress(now)
        else:
            data["end"] = self.end
            data["duration"] = self.duration
        return data


class TimerCreateRequest(BaseModel):
    description: str
