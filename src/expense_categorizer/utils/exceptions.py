"""Custom exceptions for the expense categorizer."""


class CategorizerError(Exception):
    """Base exception for categorization errors."""

    pass


class EmptyInputError(CategorizerError):
    """Transaction CSV had no content to parse."""

    pass


class CsvParseError(CategorizerError):
    """Error reading a transaction or shared-expense CSV file."""

    pass


class ConfigurationError(CategorizerError):
    """Error in configuration or category taxonomy."""

    pass


class ReportGenerationError(CategorizerError):
    """Error writing a report file."""

    pass


class CategoryListError(CategorizerError):
    """Error in the category list store."""

    pass


class CategoryListNotFoundError(CategoryListError):
    """Requested category list does not exist."""

    pass


class DuplicateCategoryListError(CategoryListError):
    """A category list with the same name already exists."""

    pass
