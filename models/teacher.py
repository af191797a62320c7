# models/teacher.py
from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Literal

DEFAULT_PERMISSIONS = ["view_dashboard", "view_students"]
ADMIN_PERMISSIONS = ["view_all", "manage_students", "view_dashboard"]


class Teacher(BaseModel):
    id: str
    name: str
    lineUserId: str
    role: Literal["admin", "teacher"] = "teacher"
    permissions: List[str] = Field(default_factory=lambda: list(DEFAULT_PERMISSIONS))
    createdAt: datetime
    isActive: bool = True
