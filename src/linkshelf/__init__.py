"""Bookmark (link) domain library: URL keys, duplicate search, archive dispatch."""
