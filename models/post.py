from datetime import datetime
from pathlib import Path
from typing import List, Literal, Optional

from openai.types.chat import ChatCompletion
from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator


class Post(BaseModel):
    """
    Represents a generated blog post before it is published.
    """

    title: str
    slug: str
    body: str
    tags: List[str] = Field(default_factory=list)
    created_at: datetime


class FrontMatter(BaseModel):
    """
    The YAML front matter block at the top of a post file.
    """

    model_config = ConfigDict(extra="allow")

    title: StrictStr
    date: datetime
    tags: List[StrictStr]
    authors: Optional[List[StrictStr]] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("title must not be empty")
        return value


class PostFile(BaseModel):
    path: Path
    front_matter: FrontMatter
    body: str


class ManifestEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    tags: List[str]
    created_at: datetime = Field(alias="createdAt")


class Manifest(BaseModel):
    """
    Ordered record of every published post, oldest first.
    """

    model_config = ConfigDict(populate_by_name=True)

    posts: List[ManifestEntry] = Field(default_factory=list)
    updated_at: datetime = Field(alias="updatedAt")


class Message(BaseModel):
    role: Literal["system", "user"]
    content: str


class GenerateResult(BaseModel):
    prompt: List[Message]
    completion: ChatCompletion
    model: str
    post: Post


class ContentIssue(BaseModel):
    """
    A single problem found while checking a post file.
    """

    path: Path
    code: str
    message: str
    severity: Literal["error", "warning"] = "error"

    def __str__(self) -> str:
        return f"{self.path}: {self.severity}: {self.message} [{self.code}]"
