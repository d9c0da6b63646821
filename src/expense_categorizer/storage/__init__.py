"""Persistence for saved category lists."""

from .category_lists import CategoryList, CategoryListStore

__all__ = ["CategoryList", "CategoryListStore"]
