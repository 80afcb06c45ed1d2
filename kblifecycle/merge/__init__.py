"""Scoped config merging."""

from kblifecycle.merge.scoped import APPENDABLE_LIST_PATHS, merge_scopes

__all__ = ["APPENDABLE_LIST_PATHS", "merge_scopes"]
