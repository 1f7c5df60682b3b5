# Models package
from .user import User, UserInDB
from .session import Session
from .timer import Timer, TimerCreateRequest, now_ms
