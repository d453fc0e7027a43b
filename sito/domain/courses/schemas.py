"""Course domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class CourseCreate(BaseModel):
    """Schema for creating a course with its lesson outline"""

    title: str
    description: Optional[str] = None
    price: float = Field(default=0, ge=0)
    is_free: bool = True
    is_published: bool = False
    lessons: list[str] = []

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        if not v or not v.strip():
            raise ValueError("Course title is required")
        return v.strip()

    @model_validator(mode="after")
    def validate_price(self):
        if self.is_free:
            self.price = 0
        elif self.price <= 0:
            raise ValueError("Paid courses need a price")
        return self


class LessonResponse(BaseModel):
    id: str
    title: str
    order_index: int

    class Config:
        from_attributes = True


class CourseResponse(BaseModel):
    id: str
    owner_id: str
    title: str
    description: Optional[str] = None
    price: float
    is_free: bool
    is_published: bool
    created_at: Optional[datetime] = None
    lessons: list[LessonResponse] = []

    class Config:
        from_attributes = True
