from datetime import datetime, timezone

import pytest

from models.post import Post


@pytest.fixture
def sample_completion():
    return """Title: Zero-Cost Futures in Rust
Tags: Rust, Async.

Rust futures are state machines generated by the compiler.

## Polling

```rust
fn poll(self: Pin<&mut Self>, cx: &mut Context<'_>) -> Poll<Self::Output>;
```
"""


@pytest.fixture
def created_at():
    return datetime(2023, 4, 3, 17, 0, 57, 296000, tzinfo=timezone.utc)


@pytest.fixture
def post(created_at):
    return Post(
        title="Zero-Cost Futures in Rust",
        slug="zero-cost-futures-in-rust",
        body="Rust futures are state machines.\n\n```rust\nasync fn run() {}\n```",
        tags=["rust", "async"],
        created_at=created_at,
    )


@pytest.fixture
def posts_dir(tmp_path):
    directory = tmp_path / "site" / "content" / "posts"
    directory.mkdir(parents=True)
    return directory


@pytest.fixture
def make_post_file(posts_dir):
    def _make(name, front_matter, body="Body text.\n"):
        path = posts_dir / name
        path.write_text(f"---\n{front_matter}\n---\n{body}", encoding="utf-8")
        return path

    return _make
