import asyncio
import argparse
import os
import sys

from dotenv import load_dotenv
from openai import OpenAIError

from config import (
    COMPLETIONS_DIRECTORY,
    MANIFEST_FILE,
    POSTS_DIRECTORY,
    RESUME_FILE,
    get_settings,
)
from models.settings import Settings
from utils.content_utils import check_posts
from utils.errors import PostGenerationError
from utils.generator_utils import generate_post
from utils.openai_utils import get_chat_client
from utils.site_utils import (
    add_post,
    get_previous_posts,
    save_completion,
)

load_dotenv()


async def run(
    settings: Settings,
    posts_directory: str = POSTS_DIRECTORY,
    manifest_file: str = MANIFEST_FILE,
    completions_directory: str = COMPLETIONS_DIRECTORY,
    resume_file: str = RESUME_FILE,
):
    """
    Generate one new blog post and publish it to the site.

    Args:
        settings (Settings): Model, API key and mock switch
        posts_directory (str): Directory holding the post markdown files
        manifest_file (str): Path to the site manifest JSON file
        completions_directory (str): Directory for raw completion records
        resume_file (str): Markdown resume the topics are based on
    """
    client = get_chat_client(settings)

    previous_posts = get_previous_posts(manifest_file)
    with open(resume_file, mode="r", encoding="utf-8") as file:
        resume = file.read()

    print("Generating post...")
    result = await generate_post(client, resume, previous_posts)
    print(f'Generated post:\n"{result.post.title}"')

    print("Saving raw chat completion...")
    save_completion(completions_directory, result)

    print("Publishing post...")
    add_post(posts_directory, manifest_file, result.post, authors=[result.model])

    print("Complete.")
    return result


def check(posts_directory: str = POSTS_DIRECTORY, strict: bool = False) -> bool:
    """
    Check every post's front matter and code blocks.

    Args:
        posts_directory (str): Directory holding the post markdown files
        strict (bool): Treat warnings as failures

    Returns:
        bool: True if the posts pass
    """
    if not os.path.isdir(posts_directory):
        print(f"No posts directory found at {posts_directory}")
        return False

    issues = check_posts(posts_directory)
    for issue in issues:
        print(issue)

    errors = sum(1 for issue in issues if issue.severity == "error")
    warnings = len(issues) - errors
    print(f"Summary: {errors} errors, {warnings} warnings.")

    return errors == 0 and (not strict or warnings == 0)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate and check posts for the technical blog")
    subparsers = parser.add_subparsers(dest="command")

    generate_parser = subparsers.add_parser("generate", help="Generate and publish a new post (default)")
    generate_parser.add_argument('--posts', type=str, default=POSTS_DIRECTORY, help=f'Posts directory (default: {POSTS_DIRECTORY})')
    generate_parser.add_argument('--manifest', type=str, default=MANIFEST_FILE, help=f'Manifest file (default: {MANIFEST_FILE})')
    generate_parser.add_argument('--completions', type=str, default=COMPLETIONS_DIRECTORY, help=f'Completions directory (default: {COMPLETIONS_DIRECTORY})')
    generate_parser.add_argument('--resume', type=str, default=RESUME_FILE, help=f'Resume file (default: {RESUME_FILE})')
    generate_parser.add_argument('--mock', action='store_true', help='Use the bundled completion fixture instead of the OpenAI API')

    check_parser = subparsers.add_parser("check", help="Check post front matter and code blocks")
    check_parser.add_argument('--posts', type=str, default=POSTS_DIRECTORY, help=f'Posts directory (default: {POSTS_DIRECTORY})')
    check_parser.add_argument('--strict', action='store_true', help='Fail on warnings as well as errors')

    return parser


async def main(argv=None) -> int:
    """
    Entry point of the script.
    """
    parser = build_parser()
    argv = sys.argv[1:] if argv is None else argv
    # Running without a command generates a post, as the scheduled job does
    if not argv or (argv[0].startswith("-") and argv[0] not in ("-h", "--help")):
        argv = ["generate", *argv]
    args = parser.parse_args(argv)

    if args.command == "check":
        return 0 if check(args.posts, strict=args.strict) else 1

    try:
        settings = get_settings()
        if args.mock:
            settings = settings.model_copy(update={"mock": True})

        await run(
            settings,
            posts_directory=args.posts,
            manifest_file=args.manifest,
            completions_directory=args.completions,
            resume_file=args.resume,
        )
    except (PostGenerationError, OpenAIError, OSError) as e:
        print(f"Error during post generation: {str(e)}")
        return 1

    return 0


def cli():
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
