"""
Product Normalization Engine

Folds flat catalog rows (one product per SKU variant) into parent products
with variants and attribute options:

1. Load active, non-parent products ordered by SKU.
2. Group them by parent SKU prefix.
3. Parse each SKU into color / size / age.
4. Promote the first row of each group to parent; create one variant per
   row and link it to the matching attribute options.
5. Deactivate the remaining rows and point them at the parent.

Groups are processed sequentially, each inside its own SAVEPOINT. A failing
group is rolled back and reported; the batch continues.
"""

import logging
from dataclasses import asdict, dataclass, field
from typing import Any
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from catalog_engines.contracts.types import AttributeSlug, NormalizeAction
from catalog_engines.engines.sku_parser import (
    ParsedVariant,
    build_variant_name,
    clean_product_name,
    collect_attribute_values,
    get_color_hex,
    group_by_parent_sku,
    parse_sku_variants,
    primary_option,
)
from catalog_engines.exceptions import InvalidActionError
from catalog_engines.persistence.models import Product
from catalog_engines.persistence.repo import CatalogRepository

logger = logging.getLogger(__name__)


@dataclass
class MigrationResult:
    success: bool = True
    parent_products_created: int = 0
    variants_created: int = 0
    attribute_options_created: int = 0
    errors: list[str] = field(default_factory=list)
    details: list[dict[str, Any]] = field(default_factory=list)
    dry_run: bool = True

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class ProductNormalizationEngine:
    """
    SKU normalization batch job.

    Does not commit: the caller commits after migrate() so a dry run and a
    real run share the same code path.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = CatalogRepository(db)

    def run(self, action: str | None, dry_run: bool = True) -> dict[str, Any]:
        """Dispatch a preview or migrate request."""
        if action == NormalizeAction.PREVIEW.value:
            return self.preview()
        if action == NormalizeAction.MIGRATE.value:
            return self.migrate(dry_run=dry_run).to_dict()
        raise InvalidActionError(action)

    def preview(self) -> dict[str, Any]:
        """Describe what migrate() would do without writing anything."""
        products = self.repo.get_flat_products()
        groups = group_by_parent_sku(products)

        details = []
        for parent_sku, rows in groups.items():
            values = collect_attribute_values(parse_sku_variants(row.sku_interno) for row in rows)
            details.append(
                {
                    "parent_sku": parent_sku,
                    "variant_count": len(rows),
                    "sample_name": clean_product_name(rows[0].nombre),
                    **values,
                    "total_stock": sum(row.stock_fisico or 0 for row in rows),
                }
            )

        return {
            "success": True,
            "total_products": len(products),
            "unique_parent_skus": len(groups),
            "details": details,
        }

    def migrate(self, dry_run: bool = True) -> MigrationResult:
        logger.info("Starting product normalization", extra={"dry_run": dry_run})

        attribute_ids = self.repo.get_attribute_ids(slug.value for slug in AttributeSlug)
        products = self.repo.get_flat_products()
        groups = group_by_parent_sku(products)

        result = MigrationResult(dry_run=dry_run)

        for parent_sku, rows in groups.items():
            parsed_rows = [(row, parse_sku_variants(row.sku_interno)) for row in rows]
            result.details.append(
                {
                    "parent_sku": parent_sku,
                    "variant_count": len(rows),
                    **collect_attribute_values(parsed for _, parsed in parsed_rows),
                }
            )

            if dry_run:
                continue

            counts = MigrationResult()
            try:
                with self.db.begin_nested():
                    self._migrate_group(parent_sku, parsed_rows, attribute_ids, counts)
            except Exception as e:
                logger.error(
                    "Error processing group",
                    extra={"parent_sku": parent_sku, "error": str(e)},
                    exc_info=True,
                )
                result.errors.append(f"Error processing group {parent_sku}: {e}")
                continue

            result.parent_products_created += counts.parent_products_created
            result.variants_created += counts.variants_created
            result.attribute_options_created += counts.attribute_options_created

        logger.info(
            "Product normalization finished",
            extra={
                "dry_run": dry_run,
                "groups": len(groups),
                "parent_products_created": result.parent_products_created,
                "variants_created": result.variants_created,
                "errors": len(result.errors),
            },
        )
        return result

    def _migrate_group(
        self,
        parent_sku: str,
        parsed_rows: list[tuple[Product, ParsedVariant]],
        attribute_ids: dict[str, UUID],
        counts: MigrationResult,
    ) -> None:
        parent = parsed_rows[0][0]
        # Promoting rewrites the parent row's SKU; variants keep the full SKU
        original_skus = [product.sku_interno for product, _ in parsed_rows]

        self.repo.promote_to_parent(parent, parent_sku, clean_product_name(parent.nombre))
        counts.parent_products_created += 1

        for (product, parsed), variant_sku in zip(parsed_rows, original_skus):
            option_type, option_value = primary_option(parsed)
            variant = self.repo.create_variant(
                product_id=parent.id,
                sku=variant_sku,
                name=build_variant_name(parsed, variant_sku),
                option_type=option_type,
                option_value=option_value,
                price=product.precio_mayorista,
                stock=product.stock_fisico,
                moq=product.moq or 1,
                images=[product.imagen_principal] if product.imagen_principal else [],
                is_active=True,
                attribute_combination=parsed.attribute_combination(),
            )
            counts.variants_created += 1

            for attribute_id, option_id in self._resolve_options(parsed, attribute_ids):
                self.repo.link_variant_option(variant.id, attribute_id, option_id)
                counts.attribute_options_created += 1

            self.repo.log_migration(product.id, variant.id, parent_sku)

            if product is not parent:
                self.repo.deactivate_into_parent(product, parent.id)

    def _resolve_options(
        self,
        parsed: ParsedVariant,
        attribute_ids: dict[str, UUID],
    ) -> list[tuple[UUID, UUID]]:
        """
        Fetch or create the attribute options for a parsed SKU.

        An option that can't be created is logged and skipped; the variant
        is still migrated without that link.
        """
        wanted = []
        if parsed.color:
            display_color = parsed.color[:1].upper() + parsed.color[1:]
            wanted.append((AttributeSlug.COLOR.value, parsed.color, display_color, get_color_hex(parsed.color)))
        if parsed.size:
            wanted.append((AttributeSlug.SIZE.value, parsed.size, f"{parsed.size} cm", None))
        if parsed.age:
            wanted.append((AttributeSlug.AGE_GROUP.value, parsed.age, parsed.age, None))

        links = []
        for slug, value, display_value, color_hex in wanted:
            attribute_id = attribute_ids.get(slug)
            if attribute_id is None:
                continue
            try:
                with self.db.begin_nested():
                    option = self.repo.get_or_create_attribute_option(attribute_id, value, display_value, color_hex)
            except SQLAlchemyError as e:
                logger.warning(
                    "Error creating attribute option",
                    extra={"attribute": slug, "value": value, "error": str(e)},
                )
                continue
            links.append((attribute_id, option.id))
        return links
