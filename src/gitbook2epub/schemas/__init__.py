"""Shared schemas for gitbook2epub."""

from gitbook2epub.schemas.chapters import Chapter, ChapterTree, Item, SubChapter
from gitbook2epub.schemas.conversion import ConversionResult, RenderPlan
from gitbook2epub.schemas.fragments import Fragment, MaterializedBook
from gitbook2epub.schemas.metadata import BookMetadata, MetadataSource

__all__ = [
    "BookMetadata",
    "Chapter",
    "ChapterTree",
    "ConversionResult",
    "Fragment",
    "Item",
    "MaterializedBook",
    "MetadataSource",
    "RenderPlan",
    "SubChapter",
]
