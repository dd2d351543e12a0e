"""Exceptions raised along the scraping pipeline."""

from typing import Optional

from selector_scraper.models.schemas import DataSelector, ScrapingFailure, ScrapingStatus


class SelectorValidityError(Exception):
    """The validity of a selector could not be determined."""

    def __init__(self, message: str, selector: Optional[DataSelector] = None):
        super().__init__(message)
        self.message = message
        self.selector = selector


class ScrapingError(Exception):
    """A scraping failure tagged with its status and the selector at fault."""

    def __init__(
        self,
        message: str,
        status: ScrapingStatus,
        selector: Optional[DataSelector] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.selector = selector

    def to_failure(self) -> ScrapingFailure:
        return ScrapingFailure(
            status=self.status, message=self.message, selector=self.selector
        )
