"""Product price list commands."""

import click

from ledgerbook.cli.error_handling import handle_domain_error, parse_amount_option
from ledgerbook.domain.errors import DomainError
from ledgerbook.domain.product import ProductService


@click.group()
def product_group():
    """Manage the product price list."""
    pass


@product_group.command("add")
@click.argument("name")
@click.option("--unit-price", required=True, help="Price per unit")
@click.option("--bulk-price", required=True, help="Bulk price")
@click.pass_context
def add_product(ctx, name: str, unit_price: str, bulk_price: str):
    """Add a product."""
    service = ProductService(ctx.obj["db"], ctx.obj["owner"])
    unit = parse_amount_option(ctx, "unit price", unit_price)
    bulk = parse_amount_option(ctx, "bulk price", bulk_price)
    try:
        product_id = service.add_product(name, unit, bulk)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Added product '{name}' (ID: {product_id})")


@product_group.command("list")
@click.pass_context
def list_products(ctx):
    """List products, newest first."""
    products = ProductService(ctx.obj["db"], ctx.obj["owner"]).list_products()
    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Product':<36} {'Unit price':>14} {'Bulk price':>14}")
    click.echo("-" * 72)
    for p in products:
        click.echo(f"{p.id:<6} {p.product_name[:36]:<36} {p.unit_price:>14,.2f} {p.bulk_price:>14,.2f}")


@product_group.command("delete")
@click.argument("product_id", type=int)
@click.pass_context
def delete_product(ctx, product_id: int):
    """Delete a product."""
    service = ProductService(ctx.obj["db"], ctx.obj["owner"])
    try:
        service.delete_product(product_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted product {product_id}")


def register_commands(cli: click.Group) -> None:
    """Register product commands with main CLI."""
    cli.add_command(product_group, name="product")
