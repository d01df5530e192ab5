"""Exception hierarchy shared by the pipeline stages."""


class DocAgentError(Exception):
    """Base class for all api-doc-agent failures."""


class InputError(DocAgentError):
    """The repository identifier is malformed or the repository cannot be listed.

    Fatal for a whole run.
    """


class ParseFailure(DocAgentError):
    """A single file's source text could not be parsed as a module."""


class ServiceError(DocAgentError):
    """The text generation service failed or returned unusable content."""


class ContentSourceError(DocAgentError):
    """Listing or reading repository content failed."""


class NotFoundError(ContentSourceError):
    """The repository, ref or file does not exist (or is not visible)."""


class RateLimitedError(ContentSourceError):
    """The content source refused the request because of rate limiting."""
