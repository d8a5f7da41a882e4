"""Catalog domain service."""

from decimal import Decimal
from typing import Optional, Union

from bizdocs.database.base import Database
from bizdocs.domain.entities import UNSET, CatalogItem as CatalogItemEntity, ItemType
from bizdocs.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    ValidationError,
    catalog_item_delete_blocked,
    catalog_item_not_found,
    duplicate_catalog_code,
)
from bizdocs.domain.pricing import quantize_money
from bizdocs.domain.validation import decimal_value, optional_text, require_text
from bizdocs.logging_config import get_logger

logger = get_logger("catalog")

MAX_PAGE_SIZE = 100


def parse_item_type(value: Union[str, ItemType]) -> ItemType:
    """Coerce an item type name into ItemType."""
    try:
        return ItemType(value)
    except ValueError:
        raise ValidationError(f"Unknown item type '{value}'. Expected 'item' or 'service'")


def _price(value) -> Decimal:
    price = quantize_money(decimal_value("unit_price", value))
    if price < 0:
        raise ValidationError("unit_price must not be negative")
    return price


class CatalogService:
    """Service for managing catalog items."""

    def __init__(self, db: Database):
        """Initialize catalog service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_item(
        self,
        code: str,
        name: str,
        item_type: Union[str, ItemType],
        unit_price,
        description: Optional[str] = None,
    ) -> CatalogItemEntity:
        """Create a catalog item.

        Raises:
            ValidationError: If a field is missing or malformed
            ConflictError: If the code is already used
        """
        code = require_text("code", code)
        name = require_text("name", name)
        item_type = parse_item_type(item_type)
        price = _price(unit_price)

        if self.db.get_catalog_item_by_code(code) is not None:
            raise ConflictError(duplicate_catalog_code(code))

        item_id = self.db.create_catalog_item(
            code=code,
            name=name,
            item_type=item_type,
            unit_price=price,
            description=optional_text(description),
        )
        logger.info("Created catalog item %s (%s)", item_id, code)
        return self.db.get_catalog_item(item_id)

    def get_item(self, item_id: int) -> Optional[CatalogItemEntity]:
        """Get catalog item by ID."""
        return self.db.get_catalog_item(item_id)

    def get_item_by_code(self, code: str) -> Optional[CatalogItemEntity]:
        """Get catalog item by code."""
        return self.db.get_catalog_item_by_code(code)

    def search_items(
        self,
        query: Optional[str] = None,
        item_type: Union[str, ItemType, None] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> list[CatalogItemEntity]:
        """Search the catalog by code or name text, ordered by name.

        Raises:
            ValidationError: If paging values or the type are invalid
        """
        if not 1 <= limit <= MAX_PAGE_SIZE:
            raise ValidationError(f"limit must be between 1 and {MAX_PAGE_SIZE}")
        if offset < 0:
            raise ValidationError("offset must not be negative")
        return self.db.list_catalog_items(
            query=optional_text(query),
            item_type=parse_item_type(item_type) if item_type is not None else None,
            limit=limit,
            offset=offset,
        )

    def update_item(
        self,
        item_id: int,
        code=UNSET,
        name=UNSET,
        item_type=UNSET,
        unit_price=UNSET,
        description=UNSET,
    ) -> CatalogItemEntity:
        """Update the supplied fields of a catalog item.

        Existing transaction lines keep the price, code and name they copied
        when they were created.

        Raises:
            NotFoundError: If the item doesn't exist
            ValidationError: If a supplied value is malformed
            ConflictError: If the new code is already used by another item
        """
        item = self.db.get_catalog_item(item_id)
        if item is None:
            raise NotFoundError(catalog_item_not_found(item_id))

        if code is not UNSET:
            code = require_text("code", code)
            existing = self.db.get_catalog_item_by_code(code)
            if existing is not None and existing.id != item_id:
                raise ConflictError(duplicate_catalog_code(code))
        if name is not UNSET:
            name = require_text("name", name)
        if item_type is not UNSET:
            item_type = parse_item_type(item_type)
        if unit_price is not UNSET:
            unit_price = _price(unit_price)
        if description is not UNSET:
            description = optional_text(description)

        self.db.update_catalog_item(
            item_id,
            code=code,
            name=name,
            item_type=item_type,
            unit_price=unit_price,
            description=description,
        )
        return self.db.get_catalog_item(item_id)

    def delete_item(self, item_id: int) -> bool:
        """Delete a catalog item that no transaction line references.

        Raises:
            NotFoundError: If the item doesn't exist
            DependencyError: If transaction lines still reference the item
        """
        if self.db.get_catalog_item(item_id) is None:
            raise NotFoundError(catalog_item_not_found(item_id))

        line_count = self.db.count_lines_for_catalog_item(item_id)
        if line_count > 0:
            raise DependencyError(catalog_item_delete_blocked(item_id, line_count))

        deleted = self.db.delete_catalog_item(item_id)
        logger.info("Deleted catalog item %s", item_id)
        return deleted
