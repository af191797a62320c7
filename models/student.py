# models/student.py
from pydantic import BaseModel, Field
from datetime import datetime
from typing import List


class Student(BaseModel):
    id: str
    name: str
    lineUserId: str
    firstQuestionDate: datetime
    lastQuestionDate: datetime
    totalQuestions: int = Field(0, ge=0)
    subjects: List[str] = []
    topics: List[str] = []
    createdAt: datetime
    isActive: bool = True
