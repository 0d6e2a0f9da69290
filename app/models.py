"""Pydantic request/response schemas for the Movie Finder Agent API."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Confidence(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Request

class ConversationTurn(CamelModel):
    role: str = "user"
    content: str = ""


class MovieRequest(CamelModel):
    conversation_id: str | None = None
    description: str | None = Field(None, examples=[
        "A hacker learns reality is a simulation and joins a rebellion",
        "Dream heists inside dreams, spinning top at the end",
    ])
    history: list[ConversationTurn] = Field(default_factory=list)

    @field_validator("history", mode="before")
    @classmethod
    def _null_history(cls, value):
        return [] if value is None else value


# Result / Response

class MovieResult(CamelModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    title: str = ""
    release_year: str = ""
    director: str = ""
    cast: list[str] = Field(default_factory=list)
    imdb_rating: str = ""
    confidence: str = ""
    notes: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def _null_as_missing(cls, value, info):
        if value is None:
            return [] if info.field_name == "cast" else ""
        return value

    def is_empty(self) -> bool:
        return not any(getattr(self, name) for name in type(self).model_fields)


class MovieResponse(CamelModel):
    conversation_id: str
    result: MovieResult
    raw_answer: str


# System

class ServiceInfo(BaseModel):
    service: str
    version: str
    status: str
    endpoints: list[str]


class HealthResponse(BaseModel):
    status: str
    llm: dict
