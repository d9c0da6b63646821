"""
File-backed store for named category taxonomies.
Each list is kept as one JSON document under the store root.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional
from urllib.parse import quote
import json
import logging

from pydantic import BaseModel, Field, ValidationError

from ..models.transaction import Categories
from ..utils.exceptions import (
    CategoryListError,
    CategoryListNotFoundError,
    DuplicateCategoryListError,
)

logger = logging.getLogger(__name__)

class CategoryList(BaseModel):
    """A named, saved category taxonomy."""

    name: str
    categories: Categories
    is_default: bool = False
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class CategoryListStore:
    """
    Directory of saved category lists.

    Names are unique. At most one list is the default; marking a list as
    default clears the flag on every other list.
    """

    def __init__(self, root: Path):
        self.root = root

    def _path_for(self, name: str) -> Path:
        # Percent-encoding keeps distinct names in distinct files
        filename = quote(name, safe="")
        return self.root / f"{filename}.json"

    def _read(self, path: Path) -> CategoryList:
        try:
            with open(path, "r", encoding="utf-8") as f:
                return CategoryList.model_validate(json.load(f))
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            raise CategoryListError(f"Failed to read category list {path}: {e}") from e

    def _write(self, category_list: CategoryList) -> None:
        path = self._path_for(category_list.name)
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                f.write(category_list.model_dump_json(indent=2))
        except OSError as e:
            raise CategoryListError(f"Failed to write category list {path}: {e}") from e

    def list_all(self) -> list[CategoryList]:
        """All saved lists, ordered by name."""
        if not self.root.exists():
            return []
        lists = [self._read(path) for path in sorted(self.root.glob("*.json"))]
        return sorted(lists, key=lambda c: c.name)

    def get(self, name: str) -> Optional[CategoryList]:
        """Look up a list by name."""
        path = self._path_for(name)
        if not path.exists():
            return None
        category_list = self._read(path)
        return category_list if category_list.name == name else None

    def get_default(self) -> Optional[CategoryList]:
        """The list flagged as default, if any."""
        return next((c for c in self.list_all() if c.is_default), None)

    def create(
        self, name: str, categories: Categories, is_default: bool = False
    ) -> CategoryList:
        """
        Save a new category list.

        Raises:
            DuplicateCategoryListError: If a list with this name exists
        """
        if self._path_for(name).exists():
            raise DuplicateCategoryListError(f"Category list '{name}' already exists")

        if is_default:
            self._clear_default()

        category_list = CategoryList(name=name, categories=categories, is_default=is_default)
        self._write(category_list)
        logger.info(f"Created category list: {name}")
        return category_list

    def update(
        self,
        name: str,
        categories: Optional[Categories] = None,
        is_default: Optional[bool] = None,
    ) -> CategoryList:
        """
        Replace the taxonomy and/or default flag of an existing list.

        Raises:
            CategoryListNotFoundError: If no list has this name
        """
        existing = self.get(name)
        if existing is None:
            raise CategoryListNotFoundError(f"Category list '{name}' not found")

        if is_default:
            self._clear_default(except_name=name)

        updated = existing.model_copy(
            update={
                "categories": categories if categories is not None else existing.categories,
                "is_default": is_default if is_default is not None else existing.is_default,
                "updated_at": datetime.now(),
            }
        )
        self._write(updated)
        logger.info(f"Updated category list: {name}")
        return updated

    def delete(self, name: str) -> None:
        """
        Remove a saved list.

        Raises:
            CategoryListNotFoundError: If no list has this name
        """
        if self.get(name) is None:
            raise CategoryListNotFoundError(f"Category list '{name}' not found")
        path = self._path_for(name)
        try:
            path.unlink()
        except OSError as e:
            raise CategoryListError(f"Failed to delete category list {path}: {e}") from e
        logger.info(f"Deleted category list: {name}")

    def _clear_default(self, except_name: Optional[str] = None) -> None:
        for category_list in self.list_all():
            if category_list.is_default and category_list.name != except_name:
                self._write(category_list.model_copy(update={"is_default": False}))
