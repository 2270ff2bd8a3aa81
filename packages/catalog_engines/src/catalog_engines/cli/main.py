"""
Catalog CLI

Command-line interface for catalog and pricing administration.

Commands:
- normalize-preview: Show how flat products would be grouped into parents
- normalize-migrate: Run the SKU normalization (dry run unless --apply)
- list-margin-ranges: List B2B margin ranges
- add-margin-range: Create a B2B margin range
- quote-price: Calculate the B2B price of a product for a destination
- expire-orders: Expire pending orders whose reservation ran out
"""

from decimal import Decimal, InvalidOperation
from typing import Optional
from uuid import UUID

import typer
from rich import print as rprint
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="catalog-cli",
    help="Marketplace catalog and pricing CLI",
)

console = Console()


def get_db():
    """Get database session."""
    from basecore.db import get_db as _get_db
    return next(_get_db())


def parse_decimal(value: str, name: str) -> Decimal:
    try:
        return Decimal(value)
    except InvalidOperation:
        rprint(f"[red]Invalid {name}: {value}[/red]")
        raise typer.Exit(1)


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, help="Override LOG_LEVEL"),
):
    """Configure logging before running a command."""
    from basecore.logging import setup_logging
    setup_logging(level=log_level)


@app.command()
def normalize_preview():
    """
    Preview the SKU normalization.

    Groups active flat products by parent SKU and shows the colors, sizes
    and ages parsed for each group. Nothing is written.
    """
    db = get_db()

    try:
        from catalog_engines.engines.normalizer import ProductNormalizationEngine

        result = ProductNormalizationEngine(db).preview()

        rprint(f"Products: {result['total_products']}  Parent SKUs: {result['unique_parent_skus']}")

        if not result["details"]:
            rprint("[yellow]No products to normalize[/yellow]")
            raise typer.Exit(0)

        table = Table(title="Normalization preview")
        table.add_column("Parent SKU", style="dim")
        table.add_column("Name")
        table.add_column("Variants")
        table.add_column("Colors")
        table.add_column("Sizes")
        table.add_column("Ages")
        table.add_column("Stock")

        for detail in result["details"]:
            table.add_row(
                detail["parent_sku"],
                detail["sample_name"],
                str(detail["variant_count"]),
                ", ".join(detail["colors_found"]) or "-",
                ", ".join(detail["sizes_found"]) or "-",
                ", ".join(detail["ages_found"]) or "-",
                str(detail["total_stock"]),
            )

        console.print(table)

    finally:
        db.close()


@app.command()
def normalize_migrate(
    apply: bool = typer.Option(False, "--apply", help="Write changes (default is a dry run)"),
    force: bool = typer.Option(False, "--force", "-f", help="Don't ask for confirmation"),
):
    """
    Run the SKU normalization.

    Without --apply only the analysis is shown. With --apply parents,
    variants and attribute options are created and flat rows deactivated.
    """
    if apply and not force:
        confirm = typer.confirm("Migrate all flat products into parents and variants?")
        if not confirm:
            rprint("[yellow]Cancelled[/yellow]")
            raise typer.Exit(0)

    db = get_db()

    try:
        from catalog_engines.engines.normalizer import ProductNormalizationEngine

        result = ProductNormalizationEngine(db).migrate(dry_run=not apply)
        if apply:
            db.commit()

        label = "Migration" if apply else "Dry run"
        rprint(f"[green]{label} finished[/green]")
        rprint(f"  Groups: {len(result.details)}")
        rprint(f"  Parent products: {result.parent_products_created}")
        rprint(f"  Variants: {result.variants_created}")
        rprint(f"  Attribute links: {result.attribute_options_created}")

        if result.errors:
            rprint(f"[red]{len(result.errors)} group(s) failed:[/red]")
            for error in result.errors:
                rprint(f"  {error}")
            raise typer.Exit(1)

    finally:
        db.close()


@app.command()
def list_margin_ranges(
    all_: bool = typer.Option(False, "--all", "-a", help="Show inactive ranges too"),
):
    """
    List B2B margin ranges in evaluation order.
    """
    db = get_db()

    try:
        from catalog_engines.persistence.repo import PricingRepository

        ranges = PricingRepository(db).list_margin_ranges(active_only=not all_)

        if not ranges:
            rprint("[yellow]No margin ranges found[/yellow]")
            raise typer.Exit(0)

        table = Table(title="B2B Margin Ranges")
        table.add_column("ID", style="dim")
        table.add_column("Min cost")
        table.add_column("Max cost")
        table.add_column("Margin %")
        table.add_column("Order")
        table.add_column("Active")
        table.add_column("Description")

        for row in ranges:
            table.add_row(
                str(row.id)[:8] + "...",
                f"${row.min_cost}",
                f"${row.max_cost}" if row.max_cost is not None else "∞",
                f"{row.margin_percent}%",
                str(row.sort_order),
                "Yes" if row.is_active else "No",
                row.description or "-",
            )

        console.print(table)

    finally:
        db.close()


@app.command()
def add_margin_range(
    min_cost: str = typer.Argument(..., help="Lower bound (inclusive)"),
    margin_percent: str = typer.Argument(..., help="Margin percent applied to the factory cost"),
    max_cost: Optional[str] = typer.Option(None, help="Upper bound (exclusive); omit for no limit"),
    description: Optional[str] = typer.Option(None, help="Description"),
    sort_order: int = typer.Option(0, help="Evaluation order"),
):
    """
    Create a B2B margin range.
    """
    min_value = parse_decimal(min_cost, "min cost")
    margin_value = parse_decimal(margin_percent, "margin percent")
    max_value = parse_decimal(max_cost, "max cost") if max_cost is not None else None

    if max_value is not None and max_value <= min_value:
        rprint("[red]max cost must be greater than min cost[/red]")
        raise typer.Exit(1)

    db = get_db()

    try:
        from catalog_engines.persistence.repo import PricingRepository

        row = PricingRepository(db).create_margin_range(
            min_cost=min_value,
            max_cost=max_value,
            margin_percent=margin_value,
            description=description,
            sort_order=sort_order,
        )
        db.commit()

        rprint(f"[green]Created margin range:[/green]")
        rprint(f"  ID: {row.id}")
        rprint(f"  Range: ${min_value} - {f'${max_value}' if max_value is not None else '∞'}")
        rprint(f"  Margin: {margin_value}%")

    finally:
        db.close()


@app.command()
def quote_price(
    product_id: str = typer.Argument(..., help="Product UUID"),
    destination: Optional[str] = typer.Option(None, help="Destination country code (default from settings)"),
):
    """
    Calculate the B2B price of a product.

    Shows margin, logistics, category fees, suggested retail price and ROI.
    """
    try:
        product_uuid = UUID(product_id)
    except ValueError:
        rprint(f"[red]Invalid product ID: {product_id}[/red]")
        raise typer.Exit(1)

    db = get_db()

    try:
        from basecore.settings import get_settings
        from catalog_engines.engines.pricing import B2BPriceCalculator
        from catalog_engines.persistence.repo import CatalogRepository, PricingRepository

        settings = get_settings()
        products = CatalogRepository(db).get_products_for_calculation([product_uuid])
        if not products:
            rprint(f"[red]Product not found: {product_id}[/red]")
            raise typer.Exit(1)

        pricing = PricingRepository(db)
        calculator = B2BPriceCalculator(
            margin_ranges=pricing.get_margin_ranges(),
            routes=pricing.get_routes(),
            category_rates=pricing.get_category_rates(),
            destination_code=destination or settings.DEFAULT_DESTINATION_CODE,
            default_margin_percent=settings.DEFAULT_MARGIN_PERCENT,
            default_weight_kg=settings.DEFAULT_WEIGHT_KG,
            pvp_multiplier=settings.SUGGESTED_PVP_MULTIPLIER,
        )
        price = calculator.calculate_product_price(products[0])

        rprint(f"[bold]B2B price for {product_id}[/bold]")
        rprint(f"  Factory cost: ${price.factory_cost}")
        rprint(f"  Margin: {price.margin_percent}% (${price.margin_value})")
        if price.logistics:
            rprint(f"  Logistics: ${price.logistics_cost} via {price.logistics.route_name}")
            rprint(f"  Transit: {price.logistics.estimated_days.min}-{price.logistics.estimated_days.max} días")
        else:
            rprint("[yellow]  No route for destination; logistics not included[/yellow]")
        rprint(f"  Category fees: ${price.category_fees}")
        rprint(f"  [green]Final B2B price: ${price.final_b2b_price}[/green]")
        rprint(f"  Suggested PVP: ${price.suggested_pvp}")
        rprint(f"  Profit: ${price.profit_amount} (ROI {price.roi_percent}%)")

    finally:
        db.close()


@app.command()
def expire_orders():
    """
    Expire pending B2B orders whose stock reservation ran out.
    """
    db = get_db()

    try:
        from catalog_engines.jobs.expire_orders import expire_pending_orders

        result = expire_pending_orders(db)
        db.commit()

        rprint(f"[green]{result['message']}[/green]")

    finally:
        db.close()


if __name__ == "__main__":
    app()
