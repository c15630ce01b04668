class PostGenerationError(Exception):
    """Base class for errors raised while generating, publishing or checking posts."""


class ConfigurationError(PostGenerationError):
    pass


class CompletionParseError(PostGenerationError):
    """The chat completion could not be turned into a post."""


class ManifestError(PostGenerationError):
    pass


class PublishError(PostGenerationError):
    pass


class FrontMatterError(PostGenerationError):
    """A post file has missing or malformed front matter."""
