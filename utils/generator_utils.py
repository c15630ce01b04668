import re
from datetime import datetime, timezone
from typing import List, Optional

from models.post import GenerateResult, Post
from utils.errors import CompletionParseError
from utils.openai_utils import ChatClient
from utils.prompt_utils import get_chat_prompt

TITLE_LABEL_PATTERN = re.compile(r"^title:\**\s*", re.IGNORECASE)
EMPHASIS_PATTERN = re.compile(r"^\*+|\*+$")
TAGS_LINE_PATTERN = re.compile(r"^\s*tags:\s*(.+)$", re.IGNORECASE)


def slugify(title: str) -> str:
    """
    Derives the kebab-case path segment used as a post's filename stem.

    Args:
        title (str): The post title.

    Returns:
        str: Lowercase ASCII letters and digits separated by single hyphens.
    """
    return re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")


def clean_title(line: str) -> str:
    """
    Strips heading marks, quotes, surrounding emphasis and a "Title:" label from the first line.
    """
    title = EMPHASIS_PATTERN.sub("", line.replace("#", "").replace('"', "").strip()).strip()
    title = TITLE_LABEL_PATTERN.sub("", title)
    return EMPHASIS_PATTERN.sub("", title.strip()).strip()


def trim_blank_lines(lines: List[str]) -> List[str]:
    start, end = 0, len(lines)
    while start < end and not lines[start].strip():
        start += 1
    while end > start and not lines[end - 1].strip():
        end -= 1
    return lines[start:end]


def parse_tags(line: str) -> List[str]:
    """
    Extracts tags from a "Tags: a, b" line.

    Args:
        line (str): A single line of the completion.

    Returns:
        List[str]: Lowercased, de-duplicated tags in their original order.
    """
    match = TAGS_LINE_PATTERN.match(line.replace("*", "").lower().replace(".", ""))
    if not match:
        return []

    tags = []
    for tag in match.group(1).split(","):
        tag = tag.strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def find_tags_line(lines: List[str]) -> Optional[int]:
    """
    Locates the tags line among the lines following the title.

    The prompt asks for tags on the second line, but models sometimes put
    them at the very end instead, so both positions are tried.

    Args:
        lines (List[str]): Completion lines after the title.

    Returns:
        Optional[int]: Index of the tags line, or None if there is none.
    """
    non_blank = [i for i, line in enumerate(lines) if line.strip()]
    for index in non_blank[:1] + non_blank[-1:]:
        if TAGS_LINE_PATTERN.match(lines[index].replace("*", "")):
            return index
    return None


def parse_completion(text: str, now: Optional[datetime] = None) -> Post:
    """
    Turns the text of a chat completion into a post.

    Args:
        text (str): Completion text: title on the first line, then a tags line and the markdown body.
        now (Optional[datetime]): Creation time, defaults to the current UTC time.

    Returns:
        Post: The parsed post.

    Raises:
        CompletionParseError: If the completion is empty or has no usable title.
    """
    lines = text.strip().splitlines()
    if not lines:
        raise CompletionParseError("Completion is empty")

    title = clean_title(lines[0])
    slug = slugify(title)
    if not title or not slug:
        raise CompletionParseError(f"Completion has no usable title: {lines[0]!r}")

    body = lines[1:]
    tags: List[str] = []
    tags_index = find_tags_line(body)
    if tags_index is not None:
        tags = parse_tags(body.pop(tags_index))

    return Post(
        title=title,
        slug=slug,
        body="\n".join(trim_blank_lines(body)),
        tags=tags,
        created_at=now or datetime.now(timezone.utc),
    )


async def generate_post(
    client: ChatClient,
    resume: str,
    previous_posts: List[str],
) -> GenerateResult:
    """
    Asks the model for a new post and parses its answer.

    Args:
        client (ChatClient): The chat completion client.
        resume (str): The author's resume.
        previous_posts (List[str]): Titles of already published posts, oldest first.

    Returns:
        GenerateResult: The prompt, the raw completion and the parsed post.
    """
    prompt = get_chat_prompt(resume, previous_posts)
    completion = await client.chat_completion(prompt)

    if not completion.choices or not completion.choices[0].message.content:
        raise CompletionParseError("Chat completion returned no content")

    post = parse_completion(completion.choices[0].message.content)
    return GenerateResult(prompt=prompt, completion=completion, model=client.model, post=post)
