import re
from pathlib import Path
from typing import Dict, List, Tuple, Union

import yaml
from pydantic import ValidationError

from config import KNOWN_CODE_LANGUAGES, REQUIRED_FRONT_MATTER_KEYS
from models.post import ContentIssue, FrontMatter, PostFile
from utils.errors import FrontMatterError
from utils.generator_utils import slugify

PathLike = Union[str, Path]

FRONT_MATTER_DELIMITER = "---"
FENCE_PATTERN = re.compile(r"^\s{0,3}(`{3,}|~{3,})\s*([^\s`]*)")


def split_front_matter(text: str) -> Tuple[Dict, str]:
    """
    Splits a post file into its front matter mapping and markdown body.

    Args:
        text (str): Full contents of the post file.

    Returns:
        Tuple[Dict, str]: The parsed YAML front matter and the body.

    Raises:
        FrontMatterError: If the delimiters are missing or the block is not a YAML mapping.
    """
    lines = text.splitlines()
    if not lines or lines[0].strip() != FRONT_MATTER_DELIMITER:
        raise FrontMatterError("File does not start with a '---' front matter delimiter")

    try:
        end = next(i for i, line in enumerate(lines[1:], start=1) if line.strip() == FRONT_MATTER_DELIMITER)
    except StopIteration:
        raise FrontMatterError("Front matter is not closed by a '---' line") from None

    try:
        data = yaml.safe_load("\n".join(lines[1:end]))
    except yaml.YAMLError as e:
        raise FrontMatterError(f"Front matter is not valid YAML: {e}") from e

    if not isinstance(data, dict):
        raise FrontMatterError("Front matter must be a YAML mapping")

    return data, "\n".join(lines[end + 1:])


def describe_validation_error(error: ValidationError) -> str:
    parts = []
    for detail in error.errors():
        location = ".".join(str(item) for item in detail["loc"])
        parts.append(f"{location}: {detail['msg']}")
    return "; ".join(parts)


def load_post_file(path: PathLike) -> PostFile:
    """
    Reads and validates a single post file.

    Raises:
        FrontMatterError: If the front matter is missing, malformed or fails validation.
        OSError: If the file cannot be read.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise FrontMatterError(f"File is not valid UTF-8: {e}") from e

    data, body = split_front_matter(text)

    missing = [key for key in REQUIRED_FRONT_MATTER_KEYS if key not in data]
    if missing:
        raise FrontMatterError(f"Front matter is missing required keys: {', '.join(missing)}")

    try:
        front_matter = FrontMatter.model_validate(data)
    except ValidationError as e:
        raise FrontMatterError(describe_validation_error(e)) from e

    return PostFile(path=path, front_matter=front_matter, body=body)


def find_code_languages(body: str) -> List[str]:
    """
    Lists the language tags of the fenced code blocks in a markdown body.

    Args:
        body (str): Markdown text.

    Returns:
        List[str]: Lowercased language identifiers, in order; untagged blocks are skipped.
    """
    languages = []
    open_fence = None

    for line in body.splitlines():
        match = FENCE_PATTERN.match(line)
        if not match:
            continue

        fence, info = match.groups()
        if open_fence is None:
            open_fence = fence
            if info:
                languages.append(info.lower())
        elif fence[0] == open_fence[0] and len(fence) >= len(open_fence) and not info:
            # Closing fence: same character, at least as long, no info string
            open_fence = None

    return languages


def check_post_file(path: PathLike) -> List[ContentIssue]:
    """
    Check a post file for content problems.

    Args:
        path (PathLike): Path to the markdown post

    Returns:
        List[ContentIssue]: Problems found, empty if the post is clean
    """
    path = Path(path)
    try:
        post_file = load_post_file(path)
    except FrontMatterError as e:
        return [ContentIssue(path=path, code="front_matter_invalid", message=str(e))]
    except OSError as e:
        return [ContentIssue(path=path, code="read_error", message=f"Could not read file: {e}")]

    return check_post_content(post_file)


def check_post_content(post_file: PostFile) -> List[ContentIssue]:
    path = post_file.path
    issues = []
    for language in find_code_languages(post_file.body):
        if language not in KNOWN_CODE_LANGUAGES:
            issues.append(
                ContentIssue(
                    path=path,
                    code="unknown_code_language",
                    message=f"Unrecognized code block language '{language}'",
                    severity="warning",
                )
            )

    expected_slug = slugify(post_file.front_matter.title)
    if path.stem != expected_slug:
        issues.append(
            ContentIssue(
                path=path,
                code="slug_mismatch",
                message=f"File name '{path.stem}' does not match title slug '{expected_slug}'",
                severity="warning",
            )
        )

    return issues


def check_posts(posts_directory: PathLike) -> List[ContentIssue]:
    """
    Check every post in a directory, including titles duplicated across posts.

    Args:
        posts_directory (PathLike): Directory holding the *.md post files

    Returns:
        List[ContentIssue]: All problems found, grouped by file in name order
    """
    issues = []
    seen_titles: Dict[str, Path] = {}

    paths = sorted(Path(posts_directory).glob("*.md"))
    print(f"Checking {len(paths)} posts in {posts_directory}")

    for path in paths:
        try:
            post_file = load_post_file(path)
        except FrontMatterError as e:
            issues.append(ContentIssue(path=path, code="front_matter_invalid", message=str(e)))
            continue
        except OSError as e:
            issues.append(ContentIssue(path=path, code="read_error", message=f"Could not read file: {e}"))
            continue

        issues.extend(check_post_content(post_file))

        title = post_file.front_matter.title.strip().lower()
        if title in seen_titles:
            issues.append(
                ContentIssue(
                    path=path,
                    code="duplicate_title",
                    message=f"Title duplicates {seen_titles[title].name}",
                )
            )
        else:
            seen_titles[title] = path

    return issues
