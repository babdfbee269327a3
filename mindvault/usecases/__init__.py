"""Application use cases built on top of the store and annotator."""

from .lifecycle import ConfirmFn, ResourceLifecycle, SubmissionForm
from .search import filter_resources

__all__ = ["ConfirmFn", "ResourceLifecycle", "SubmissionForm", "filter_resources"]
