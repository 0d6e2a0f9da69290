"""Builds the chat message sequence sent to the model for a movie request."""

from dataclasses import dataclass
from enum import Enum

from app.models import MovieRequest

DEFAULT_INSTRUCTIONS = """\
You are a movie identification expert. Your task is to identify movies based on user descriptions.

When given a movie description, you must respond with a JSON object containing:
- title: The movie title
- releaseYear: The year or date the movie was released
- director: The director's name
- cast: An array of main actors/actresses
- imdbRating: The IMDb rating (or approximate if uncertain)
- confidence: One of "low", "medium", or "high" based on how certain you are
- notes: Any relevant notes about accuracy or uncertainty

IMPORTANT:
- Always respond with valid JSON matching this schema
- If uncertain about IMDb ratings or cast, mark confidence as "low" or "medium"
- In notes, mention if information may be approximate or outdated
- Be honest about uncertainty rather than inventing information

Example response format:
{
  "title": "The Matrix",
  "releaseYear": "1999",
  "director": "The Wachowskis",
  "cast": ["Keanu Reeves", "Laurence Fishburne", "Carrie-Anne Moss"],
  "imdbRating": "8.7",
  "confidence": "high",
  "notes": "IMDb rating is approximate and may have changed since training data."
}
"""


class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    content: str

    def to_dict(self) -> dict:
        return {"role": self.role.value, "content": self.content}


def map_role(role: str | None) -> Role:
    """Only "assistant" (any case) is kept; every other caller role is a user turn."""
    if role and role.lower() == Role.ASSISTANT.value:
        return Role.ASSISTANT
    return Role.USER


def resolve_instructions(override: str | None) -> str:
    if override and override.strip():
        return override
    return DEFAULT_INSTRUCTIONS


def build_messages(request: MovieRequest, instructions: str) -> list[ChatMessage]:
    messages = [ChatMessage(Role.SYSTEM, instructions)]
    for turn in request.history:
        messages.append(ChatMessage(map_role(turn.role), turn.content))
    messages.append(ChatMessage(Role.USER, request.description or ""))
    return messages
