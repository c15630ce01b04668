from typing import List

from config import PREVIOUS_POST_COUNT
from models.post import Message

INSTRUCTIONS = [
    "Come up with an advanced topic for an expert level reader that is about a particular single feature, fact, pattern, paradigm, convention, theory, framework, library, or best practice.",
    "Write a post about the chosen topic following the instructions given below:",
    "Your writing style is academic, informative, and focused on detailed technical information.",
    "The topic should not be related to a previous post.",
    "Use computer code snippets (in the relevant programming language) in order to illustrate the information presented.",
    "Format the body of the post in the markdown markup language.",
    "Come up with a title for the post and include it on the first line.",
    'Include one to three tags for the post on the second line formatted as a comma separated list, for example: "Tags: <tag1>, <tag2>".',
    "The post should be multiple sections in length.",
    "Do not include links to images in the post.",
    "Do not include contact information in the post.",
    "Do not add extra whitespace around lists.",
]


def format_previous_posts(previous_posts: List[str], count: int = PREVIOUS_POST_COUNT) -> str:
    """
    Quote the most recent post titles, newest first.

    Args:
        previous_posts (List[str]): Titles in publication order (oldest first).
        count (int): Maximum number of titles to include.

    Returns:
        str: Titles wrapped in double quotes, joined with ", ".
    """
    recent = previous_posts[-count:] if count > 0 else []
    return ", ".join(f'"{title}"' for title in reversed(recent))


def get_chat_prompt(resume: str, previous_posts: List[str]) -> List[Message]:
    """
    Builds the chat messages asking the model for a new blog post.

    Args:
        resume (str): The author's resume, used to pick topics.
        previous_posts (List[str]): Titles of already published posts, oldest first.

    Returns:
        List[Message]: The prompt, one user message per instruction.
    """
    contents = [
        "You are the author of a personal technical blog about software engineering and computer science subjects.",
        f"New topics for blog posts should be based off of the technical skills, experience, and interests presented in the following resume:\n{resume}",
        f"Your previous {PREVIOUS_POST_COUNT} posts include: {format_previous_posts(previous_posts)}",
        *INSTRUCTIONS,
    ]
    return [Message(role="user", content=content) for content in contents]
