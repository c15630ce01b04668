from typing import Optional

from pydantic import BaseModel, Field


class Settings(BaseModel):
    """
    Runtime switches for the post generator.
    """

    mock: bool = False
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-3.5-turbo-0301"
    openai_base_url: Optional[str] = None
    openai_max_retries: int = Field(default=2, ge=0)
