import pytest

from utils.content_utils import (
    check_post_file,
    check_posts,
    find_code_languages,
    load_post_file,
    split_front_matter,
)
from utils.errors import FrontMatterError

VALID_FRONT_MATTER = 'title: "Zero-Cost Futures in Rust"\ndate: 2023-04-03T17:00:57.296Z\ntags: ["rust"]'


def test_split_front_matter():
    data, body = split_front_matter("---\ntitle: A\ntags: []\n---\n# Heading\n\nText")

    assert data == {"title": "A", "tags": []}
    assert body == "# Heading\n\nText"


@pytest.mark.parametrize(
    "text",
    [
        "title: A\n---\nBody",
        "---\ntitle: A\nBody without closing delimiter",
        "---\ntitle: [unclosed\n---\nBody",
        "---\n- just\n- a list\n---\nBody",
        "---\n---\nBody",
    ],
)
def test_split_front_matter_rejects_malformed(text):
    with pytest.raises(FrontMatterError):
        split_front_matter(text)


def test_load_post_file(make_post_file):
    path = make_post_file(
        "zero-cost-futures-in-rust.md",
        VALID_FRONT_MATTER + '\nauthors: ["gpt-4"]\ndraft: false',
    )

    post_file = load_post_file(path)

    assert post_file.front_matter.title == "Zero-Cost Futures in Rust"
    assert post_file.front_matter.date.year == 2023
    assert post_file.front_matter.tags == ["rust"]
    assert post_file.front_matter.authors == ["gpt-4"]
    assert post_file.body == "Body text."


@pytest.mark.parametrize(
    "front_matter, message",
    [
        ('date: 2023-04-03T17:00:57Z\ntags: []', "missing required keys: title"),
        ('title: "A"\ntags: []', "missing required keys: date"),
        ('title: "   "\ndate: 2023-04-03T17:00:57Z\ntags: []', "title must not be empty"),
        ('title: "A"\ndate: someday\ntags: []', "date"),
        ('title: "A"\ndate: 2023-04-03T17:00:57Z\ntags: rust', "tags"),
        ('title: "A"\ndate: 2023-04-03T17:00:57Z\ntags: [rust, 2023]', "tags.1"),
        ('title: "A"\ndate: 2023-04-03T17:00:57Z\ntags: []\nauthors: gpt-4', "authors"),
    ],
)
def test_load_post_file_rejects_invalid_front_matter(make_post_file, front_matter, message):
    path = make_post_file("a.md", front_matter)

    with pytest.raises(FrontMatterError, match=message):
        load_post_file(path)


def test_find_code_languages():
    body = "\n".join(
        [
            "```rust",
            "fn main() {}",
            "```",
            "~~~~",
            "```python",
            "~~~~",
            "```",
            "plain",
            "```",
            "```Kotlin",
            "val x = 1",
            "```",
        ]
    )

    assert find_code_languages(body) == ["rust", "kotlin"]


def test_check_post_file_clean(make_post_file):
    path = make_post_file("zero-cost-futures-in-rust.md", VALID_FRONT_MATTER, "```rust\nlet x = 1;\n```\n")

    assert check_post_file(path) == []


def test_check_post_file_warnings(make_post_file):
    path = make_post_file("futures.md", VALID_FRONT_MATTER, "```brainfuck\n+++\n```\n")

    issues = check_post_file(path)

    assert [issue.code for issue in issues] == ["unknown_code_language", "slug_mismatch"]
    assert all(issue.severity == "warning" for issue in issues)
    assert "brainfuck" in issues[0].message


def test_check_post_file_invalid(make_post_file):
    path = make_post_file("broken.md", "title: [unclosed")

    issues = check_post_file(path)

    assert len(issues) == 1
    assert issues[0].code == "front_matter_invalid"
    assert issues[0].severity == "error"
    assert str(issues[0]).startswith(f"{path}: error:")


def test_check_posts_reports_duplicates(posts_dir, make_post_file):
    make_post_file("zero-cost-futures-in-rust.md", VALID_FRONT_MATTER)
    make_post_file("zero-cost-futures-in-rust-2.md", VALID_FRONT_MATTER.replace("Rust", "rust", 1))
    make_post_file("broken.md", "tags: []")
    (posts_dir / "notes.txt").write_text("not a post")

    issues = check_posts(posts_dir)

    codes = sorted(issue.code for issue in issues)
    assert codes == ["duplicate_title", "front_matter_invalid", "slug_mismatch"]
    duplicate = next(issue for issue in issues if issue.code == "duplicate_title")
    assert duplicate.path.name == "zero-cost-futures-in-rust.md"
    assert "zero-cost-futures-in-rust-2.md" in duplicate.message


def test_check_post_file_accepts_chroma_aliases(make_post_file):
    body = "```c#\nvar x = 1;\n```\n```fsharp\nlet x = 1\n```\n```objective-c\n@end\n```\n"
    path = make_post_file("zero-cost-futures-in-rust.md", VALID_FRONT_MATTER, body)

    assert check_post_file(path) == []


def test_check_posts_reports_unreadable_entries(posts_dir, make_post_file):
    make_post_file("zero-cost-futures-in-rust.md", VALID_FRONT_MATTER)
    (posts_dir / "folder.md").mkdir()

    issues = check_posts(posts_dir)

    assert [(issue.path.name, issue.code) for issue in issues] == [("folder.md", "read_error")]
    assert check_post_file(posts_dir / "folder.md")[0].code == "read_error"
