"""Abstract interfaces for infrastructure dependencies."""

from .extraction_tool import ExtractionTool, ToolResult
from .feed_source import ChannelPreferenceStore, FeedSource

__all__ = ["ChannelPreferenceStore", "ExtractionTool", "FeedSource", "ToolResult"]
