"""gitbook2epub: convert GitBook directories into EPUB with pandoc."""

from gitbook2epub.assembler import assemble_document, toc_depth
from gitbook2epub.conversion import ConversionOptions, convert_book
from gitbook2epub.exceptions import (
    BookDirectoryNotFoundError,
    ConfigurationError,
    EmptyManifestError,
    Gitbook2epubError,
    ManifestNotFoundError,
    MetadataError,
    OutputNotWritableError,
    ParseError,
    RenderError,
    RendererNotAvailableError,
)
from gitbook2epub.headings import demote, normalize_headings
from gitbook2epub.manifest_parser import parse_manifest, parse_manifest_file
from gitbook2epub.materializer import FragmentWorkspace, materialize
from gitbook2epub.schemas import ChapterTree, ConversionResult, Fragment, MaterializedBook

__all__ = [
    "BookDirectoryNotFoundError",
    "ChapterTree",
    "ConfigurationError",
    "ConversionOptions",
    "ConversionResult",
    "EmptyManifestError",
    "Fragment",
    "FragmentWorkspace",
    "Gitbook2epubError",
    "ManifestNotFoundError",
    "MaterializedBook",
    "MetadataError",
    "OutputNotWritableError",
    "ParseError",
    "RenderError",
    "RendererNotAvailableError",
    "assemble_document",
    "convert_book",
    "demote",
    "materialize",
    "normalize_headings",
    "parse_manifest",
    "parse_manifest_file",
    "toc_depth",
]
