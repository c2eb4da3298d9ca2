"""
Pydantic data models for API requests and responses.
"""
from typing import List
from pydantic import BaseModel, Field, field_validator


class Message(BaseModel):
    """Chat message model."""
    role: str  # "user" or "assistant"; anything else is dropped before a provider sees it
    content: str


class ChatRequest(BaseModel):
    """Chat request model: the whole conversation, oldest turn first."""
    messages: List[Message] = Field(..., min_length=1)

    @field_validator("messages")
    @classmethod
    def last_message_from_user(cls, messages: List[Message]) -> List[Message]:
        """The conversation must end with the user prompt being answered."""
        last = messages[-1]
        if last.role != "user":
            raise ValueError("the last message must come from the user")
        return messages

    @property
    def prompt(self) -> str:
        """Content of the latest user message."""
        return self.messages[-1].content

    @property
    def history(self) -> List[Message]:
        """Every message before the latest one."""
        return self.messages[:-1]


class ChatReply(BaseModel):
    """Successful chat response."""
    text: str


class ErrorReply(BaseModel):
    """Error envelope returned for 4xx/5xx responses."""
    error: str
