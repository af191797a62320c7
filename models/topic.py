# models/topic.py
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Literal, Optional


class Topic(BaseModel):
    id: str
    name: str
    subject: str
    description: Optional[str] = None
    difficulty: Literal["easy", "medium", "hard"] = "medium"
    questionCount: int = Field(0, ge=0)
    createdAt: datetime
