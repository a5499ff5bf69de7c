"""Error taxonomy for the import pipeline"""


class WpJekyllError(Exception):
    """Base class for all import errors."""


class MalformedExportError(WpJekyllError):
    """The export document cannot be parsed at all. Fatal for the run."""


class AssetFetchError(WpJekyllError):
    """A single asset could not be downloaded. Recovered by the resolver."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class ItemTransformError(WpJekyllError):
    """Deriving, transforming, or writing one item failed. The item is skipped."""

    def __init__(self, title: str, file_name: str, cause: Exception):
        super().__init__(f"{title!r} ({file_name}): {cause}")
        self.title = title
        self.file_name = file_name
        self.cause = cause
