from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


# Request bodies keep every field optional: a missing field is reported as a
# 400 with the endpoint's own message rather than a generic validation error.

class Credentials(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class MoodIn(BaseModel):
    email: Optional[str] = None
    mood: Optional[str] = Field(None, description="mood label, e.g. happy, sad")
    triggers: Optional[List[str]] = Field(None, description="trigger tags, order not significant")

    @field_validator("triggers")
    @classmethod
    def dedupe_triggers(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return v
        return list(dict.fromkeys(v))


class Message(BaseModel):
    message: str


class MoodHistoryItem(BaseModel):
    mood: str
    triggers: List[str] = []
    created_at: datetime


class MoodHistory(BaseModel):
    moodHistory: List[MoodHistoryItem]
    triggerCounts: Dict[str, int]


class Quote(BaseModel):
    id: str
    content: str
    author: str
