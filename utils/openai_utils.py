import json
from pathlib import Path
from typing import List, Optional, Union

from openai import AsyncOpenAI
from openai.types.chat import ChatCompletion

from models.post import Message
from models.settings import Settings
from utils.errors import ConfigurationError

FIXTURE_PATH = Path(__file__).parent / "fixtures" / "chat-completion.json"


class MockOpenAIClient:
    """
    Returns a canned chat completion instead of calling the API.
    """

    def __init__(self, model: str, fixture_path: Path = FIXTURE_PATH):
        self.model = model
        self.fixture_path = fixture_path

    async def chat_completion(self, messages: List[Message]) -> ChatCompletion:
        with open(self.fixture_path, mode="r", encoding="utf-8") as file:
            return ChatCompletion.model_validate(json.load(file))


class OpenAIChatClient:
    """
    Requests chat completions from the OpenAI API.
    """

    def __init__(
        self,
        model: str,
        api_key: Optional[str],
        base_url: Optional[str] = None,
        max_retries: int = 2,
    ):
        if not api_key:
            raise ConfigurationError("OPENAI_API_KEY is not set (set MOCK=true to use the fixture)")
        self.model = model
        self.client = AsyncOpenAI(api_key=api_key, base_url=base_url, max_retries=max_retries)

    async def chat_completion(self, messages: List[Message]) -> ChatCompletion:
        return await self.client.chat.completions.create(
            model=self.model,
            messages=[message.model_dump() for message in messages],
        )


ChatClient = Union[MockOpenAIClient, OpenAIChatClient]


def get_chat_client(settings: Settings) -> ChatClient:
    """
    Returns the chat client selected by the settings.

    Args:
        settings (Settings): Runtime settings.

    Returns:
        ChatClient: A mock client when settings.mock is set, the OpenAI client otherwise.
    """
    if settings.mock:
        return MockOpenAIClient(settings.openai_model)
    return OpenAIChatClient(
        settings.openai_model,
        settings.openai_api_key,
        base_url=settings.openai_base_url,
        max_retries=settings.openai_max_retries,
    )
