# config.py

import os

from pydantic import ValidationError

from models.settings import Settings
from utils.errors import ConfigurationError

POSTS_DIRECTORY = "./site/content/posts"
MANIFEST_FILE = "./site/data/manifest.json"
COMPLETIONS_DIRECTORY = "./site/data/completions"
RESUME_FILE = "./site/content/resume.md"

DEFAULT_MODEL = "gpt-3.5-turbo-0301"
PREVIOUS_POST_COUNT = 60

REQUIRED_FRONT_MATTER_KEYS = [
    "title",
    "date",
    "tags",
]

# Language identifiers accepted on fenced code blocks (Hugo/Chroma lexer names and aliases)
KNOWN_CODE_LANGUAGES = {
    "asm", "bash", "c", "c#", "c++", "clojure", "cmake", "coffee", "coffeescript",
    "console", "cpp", "cs", "csharp", "css", "cuda", "dart", "diff", "docker",
    "dockerfile", "elixir", "elm", "erlang", "ex", "exs", "f#", "fortran",
    "fsharp", "go", "golang", "gradle", "graphql", "groovy", "haskell", "hcl",
    "hs", "html", "ini", "java", "javascript", "js", "json", "jsx", "julia",
    "kotlin", "kt", "latex", "less", "lisp", "lua", "makefile", "markdown",
    "matlab", "md", "nasm", "nginx", "nim", "nix", "objc", "objective-c",
    "objectivec", "ocaml", "perl", "php", "plaintext", "powershell", "proto",
    "protobuf", "ps1", "py", "python", "r", "rb", "rs", "ruby", "rust", "sass",
    "scala", "scheme", "scss", "sh", "shell", "sol", "solidity", "sql", "swift",
    "terraform", "tex", "text", "tf", "toml", "ts", "tsx", "typescript", "vb",
    "vbnet", "vim", "xml", "yaml", "yml", "zig", "zsh",
}


def get_settings() -> Settings:
    """
    Build the runtime settings from environment variables.

    Call after load_dotenv() so values from a .env file are visible.

    Returns:
        Settings: Model, API key and mock switch for the post generator.

    Raises:
        ConfigurationError: If a variable holds a value the settings reject.
    """
    max_retries = os.getenv("OPENAI_MAX_RETRIES") or "2"
    try:
        return Settings(
            mock=os.getenv("MOCK", "false").lower() == "true",
            openai_api_key=os.getenv("OPENAI_API_KEY") or None,
            openai_model=os.getenv("OPENAI_MODEL") or DEFAULT_MODEL,
            openai_base_url=os.getenv("OPENAI_BASE_URL") or None,
            openai_max_retries=int(max_retries),
        )
    except (ValueError, ValidationError) as e:
        raise ConfigurationError(f"OPENAI_MAX_RETRIES must be a non-negative integer, got {max_retries!r}") from e
