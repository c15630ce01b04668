import json
import os
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Union

from pydantic import ValidationError

from models.post import GenerateResult, Manifest, ManifestEntry, Post
from utils.errors import ManifestError, PublishError

PathLike = Union[str, Path]

# Characters outside the YAML printable set, plus line separators that would split the front matter line
NON_PRINTABLE_PATTERN = re.compile(r"[^\x09\x0A\x0D\x20-\x7E\xA0-\u2027\u202A-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]")


def format_date(value: datetime) -> str:
    """
    Formats a timestamp the way post front matter stores it: ISO-8601, UTC, millisecond precision.
    """
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def read_manifest(manifest_file: PathLike) -> Manifest:
    """
    Load the site manifest.

    Args:
        manifest_file (PathLike): Path to the manifest JSON file

    Returns:
        Manifest: The parsed manifest, or an empty one if the file does not exist yet
    """
    if not os.path.exists(manifest_file):
        print(f"No existing manifest found at {manifest_file}")
        return Manifest(posts=[], updated_at=datetime.now(timezone.utc))

    try:
        with open(manifest_file, mode="r", encoding="utf-8") as file:
            return Manifest.model_validate(json.load(file))
    except (json.JSONDecodeError, ValidationError) as e:
        raise ManifestError(f"Invalid manifest {manifest_file}: {e}") from e


def write_manifest(manifest_file: PathLike, manifest: Manifest):
    Path(manifest_file).parent.mkdir(parents=True, exist_ok=True)
    with open(manifest_file, mode="w", encoding="utf-8") as file:
        file.write(manifest.model_dump_json(by_alias=True, indent=2))


def get_previous_posts(manifest_file: PathLike) -> List[str]:
    """
    Titles of every published post, oldest first.
    """
    return [entry.title for entry in read_manifest(manifest_file).posts]


def to_flow_scalar(value) -> str:
    """
    Writes a string or list of strings as a JSON literal that YAML reads back unchanged.
    """
    text = json.dumps(value, ensure_ascii=False)
    return NON_PRINTABLE_PATTERN.sub(lambda match: f"\\u{ord(match.group()):04x}", text)


def render_post(post: Post, authors: Optional[List[str]] = None) -> str:
    """
    Renders a post as markdown with a YAML front matter header.

    Title and lists are written as JSON literals, which are valid YAML flow
    scalars and keep quotes and colons in titles intact.

    Args:
        post (Post): The post to render.
        authors (Optional[List[str]]): Model identifiers credited as authors.

    Returns:
        str: The full file contents.
    """
    header = [
        "---",
        f"title: {to_flow_scalar(post.title)}",
        f"date: {format_date(post.created_at)}",
        f"tags: {to_flow_scalar(post.tags)}",
    ]
    if authors:
        header.append(f"authors: {to_flow_scalar(authors)}")
    header.append("---")

    return "\n".join(header) + "\n" + post.body + "\n"


def write_post(posts_directory: PathLike, post: Post, authors: Optional[List[str]] = None) -> Path:
    """
    Write a post to <posts_directory>/<slug>.md.

    Raises:
        PublishError: If a post with the same slug already exists.
    """
    directory = Path(posts_directory)
    directory.mkdir(parents=True, exist_ok=True)
    filename = directory / f"{post.slug}.md"

    try:
        with open(filename, mode="x", encoding="utf-8") as file:
            file.write(render_post(post, authors))
    except FileExistsError as e:
        raise PublishError(f"A post already exists at {filename}") from e

    return filename


def add_post(
    posts_directory: PathLike,
    manifest_file: PathLike,
    post: Post,
    authors: Optional[List[str]] = None,
) -> Path:
    """
    Publish a post: write its markdown file and record it in the manifest.

    Args:
        posts_directory (PathLike): Directory holding the post files
        manifest_file (PathLike): Path to the manifest JSON file
        post (Post): The post to publish
        authors (Optional[List[str]]): Model identifiers credited as authors

    Returns:
        Path: The written post file
    """
    manifest = read_manifest(manifest_file)
    filename = write_post(posts_directory, post, authors)

    manifest.posts.append(ManifestEntry(title=post.title, tags=post.tags, created_at=post.created_at))
    manifest.updated_at = post.created_at
    write_manifest(manifest_file, manifest)

    print(f"Added '{post.title}' to '{manifest_file}' ({len(manifest.posts)} posts).")
    return filename


def save_completion(completions_directory: PathLike, result: GenerateResult) -> Path:
    """
    Save the prompt and raw chat completion next to the site data.

    An existing record for the same slug is never replaced.

    Args:
        completions_directory (PathLike): Directory for completion records
        result (GenerateResult): The generation result

    Returns:
        Path: The written <slug>.json file
    """
    directory = Path(completions_directory)
    directory.mkdir(parents=True, exist_ok=True)
    filename = directory / f"{result.post.slug}.json"

    record = {
        "model": result.model,
        "prompt": [message.model_dump() for message in result.prompt],
        "completion": result.completion.model_dump(mode="json", exclude_unset=True),
    }
    try:
        with open(filename, mode="x", encoding="utf-8") as file:
            json.dump(record, file, indent=1, ensure_ascii=False)
    except FileExistsError as e:
        raise PublishError(f"A completion record already exists at {filename}") from e

    return filename
