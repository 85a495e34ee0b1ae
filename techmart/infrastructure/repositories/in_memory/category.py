"""
In-memory Category repository (tests / local dev).

Las categorías se cargan con add_category(); no hay ABM por API.
"""

from __future__ import annotations

from threading import Lock
from typing import Dict, List, Optional

from ....domain.entities import Category


class InMemoryCategoryRepository:
    def __init__(self, categories: Optional[List[Category]] = None) -> None:
        self._lock = Lock()
        self._categories: Dict[int, Category] = {}
        for category in categories or []:
            self.add_category(category)

    def add_category(self, category: Category) -> Category:
        with self._lock:
            self._categories[category.id] = category
            return category

    def get_category(self, category_id: int) -> Optional[Category]:
        with self._lock:
            return self._categories.get(category_id)
