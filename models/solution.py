# models/solution.py
from pydantic import BaseModel, Field, AliasChoices
from datetime import datetime
from typing import Optional


class SolutionCreate(BaseModel):
    question: Optional[str] = None
    answer: Optional[str] = None
    lineUserId: Optional[str] = Field(None, validation_alias=AliasChoices("lineUserId", "externalUserId"))


class Solution(BaseModel):
    id: str
    question: str
    answer: str
    studentId: Optional[str] = None  # Student.id, backfilled after the student upsert
    studentName: str
    subject: str
    topic: str
    createdAt: datetime
    expiresAt: datetime
    viewCount: int = Field(0, ge=0)


class SolutionCreated(BaseModel):
    success: bool = True
    id: str
    url: str
    message: str = "數學解題網頁創建成功"
