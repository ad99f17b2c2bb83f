# after8/validators.py
"""
Request schemas.

Each route validates its JSON body (or query string) with one of these
pydantic models before calling into the service layer. Field names follow
the camelCase keys the frontend sends.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

Role = Literal['USER', 'ADMIN', 'MARKETING']
Plan = Literal['BASIC', 'GOLD', 'PLATINUM']


# --- Users ---

class CreateUserSchema(BaseModel):
    name: Optional[str] = None
    email: EmailStr
    password: str = Field(min_length=6)
    location: Optional[str] = None
    phone: Optional[str] = None
    role: Role = 'USER'


class UpdateUserSchema(CreateUserSchema):
    pass


class UpdateProfileSchema(BaseModel):
    name: Optional[str] = None
    location: Optional[str] = None
    phone: Optional[str] = None


# --- Events ---

class CreateEventSchema(BaseModel):
    name: str = Field(min_length=1)
    maxSeats: int = Field(gt=0)
    scheduled: datetime
    price: float = Field(gt=0)
    venue: str = Field(min_length=1)
    city: Optional[str] = None
    keywords: List[str] = Field(default_factory=list)
    plan: Plan = 'BASIC'


class UpdateEventSchema(CreateEventSchema):
    pass


class FilterEventSchema(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    city: Optional[str] = Field(default=None, min_length=1)
    price: Optional[int] = None
    keywords: Optional[List[str]] = None

    @field_validator('price', mode='before')
    @classmethod
    def price_digits_only(cls, value):
        if value is None or isinstance(value, int):
            return value
        if not str(value).isdigit():
            raise ValueError("Price must be a valid number")
        return int(value)

    @field_validator('keywords', mode='before')
    @classmethod
    def split_keywords(cls, value):
        if value is None or isinstance(value, list):
            return value
        return [k.strip() for k in str(value).split(',') if k.strip()]


class SearchEventSchema(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)


class InvitationSchema(BaseModel):
    """Send/reject payload. 'recieverId' is the spelling the frontend sends."""
    model_config = ConfigDict(populate_by_name=True)

    eventId: str = Field(min_length=1)
    receiverId: str = Field(min_length=1, alias='recieverId')


class AcceptInvitationSchema(BaseModel):
    eventId: str = Field(min_length=1)


class ReviewItemSchema(BaseModel):
    id: str = Field(min_length=1)
    rating: int = Field(ge=1, le=5)
    message: Optional[str] = None


class SubmitReviewSchema(BaseModel):
    eventId: str = Field(min_length=1)
    reviews: List[ReviewItemSchema] = Field(min_length=1)


# --- Matchmaking ---

class AnswerSchema(BaseModel):
    questionId: str = Field(min_length=1)
    optionId: Optional[str] = None
    scaledValue: Optional[float] = None

    @model_validator(mode='after')
    def option_or_scaled(self):
        if not self.optionId and self.scaledValue is None:
            raise ValueError("Either optionId or scaledValue is required")
        return self


class UserAnswersSchema(BaseModel):
    answers: List[AnswerSchema] = Field(min_length=1)


# --- Game ---

class CreateLevelSchema(BaseModel):
    name: str = Field(min_length=1)
    minScore: int = Field(ge=0)
    maxScore: int
    dinners: int
    hosted: int
    reviews: int
    avgRating: float
    minReferals: int
    minTagCount: int
    commentFeedLength: int
    totalBadges: int
    plan: Plan = 'BASIC'


class UpdateLevelSchema(BaseModel):
    """
    Partial update: only the keys present in the body are applied.
    name, minScore and plan may be omitted but never sent as null.
    """
    name: str = Field(default=None, min_length=1)
    minScore: int = Field(default=None, ge=0)
    maxScore: Optional[int] = None
    dinners: Optional[int] = None
    hosted: Optional[int] = None
    reviews: Optional[int] = None
    avgRating: Optional[float] = None
    minReferals: Optional[int] = None
    minTagCount: Optional[int] = None
    commentFeedLength: Optional[int] = None
    totalBadges: Optional[int] = None
    plan: Plan = None
