"""Custom exceptions for gitbook2epub."""


class Gitbook2epubError(Exception):
    """Base exception for gitbook2epub operations."""


class ConfigurationError(Gitbook2epubError):
    """The conversion cannot start with the given environment or inputs."""


class BookDirectoryNotFoundError(ConfigurationError):
    """The book directory does not exist."""


class ManifestNotFoundError(ConfigurationError):
    """The book directory has no SUMMARY.md manifest."""


class RendererNotAvailableError(ConfigurationError):
    """pandoc is not installed or cannot be executed."""


class OutputNotWritableError(ConfigurationError):
    """An output file or its directory cannot be created."""


class ParseError(Gitbook2epubError):
    """Error during manifest parsing."""


class EmptyManifestError(ParseError):
    """The manifest contains no usable chapter links."""


class RenderError(Gitbook2epubError):
    """pandoc failed to produce the output document."""


class MetadataError(Gitbook2epubError):
    """The metadata file could not be parsed."""
