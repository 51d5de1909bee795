from .base import CalendarProvider, ContentProvider, LibraryContent, StaticTags, TagProvider

__all__ = ["CalendarProvider", "ContentProvider", "LibraryContent", "StaticTags", "TagProvider"]
