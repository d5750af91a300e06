# Overview: Flask CLI command groups for store bootstrap, order export and stock maintenance.

# backend/barflow/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to barflow (PowerShell: $env:FLASK_APP="barflow").
# - Use: python -m flask <group> <command> [options]
#
# Store bootstrap/repair:
# - python -m flask system init
#   Idempotent open: create missing tables, apply migrations, seed a new store, repair table occupancy.
# - python -m flask system reset --yes
#   Wipe every ledger table and reseed the default store.
#
# Orders:
# - python -m flask orders export --output orders.json
#   JSON dump of every order with its lines (stdout when --output is omitted).
#
# Stock:
# - python -m flask stock low
#   Products at or below their alert threshold.
# - python -m flask stock replenish 3 24 --note "Delivery"
#   Add stock to a product and record the movement.

import json

import click
from flask.cli import with_appcontext

from .services import schema_service, order_service, catalog_service, stock_service
from .services.stock_service import StockError
from .validation import NotFoundError


@click.group('system')
def system_group():
    """Store bootstrap and repair commands."""


@system_group.command('init')
@with_appcontext
def init_store_command():
    """Open the store: schema, migrations, seed (new store only) and table repair."""
    click.echo("START Opening BarFlow store...")
    summary = schema_service.open_store()

    if summary["recovered"]:
        click.echo("WARN  Saved store was unreadable; a fresh store was created")
    if summary["created"]:
        click.echo("PASS Created new store with default data")
    else:
        click.echo("PASS Using existing store")

    if summary["migrations_applied"]:
        click.echo(f"PASS Applied migrations: {', '.join(summary['migrations_applied'])}")
    else:
        click.echo("PASS Schema is current")
    click.echo(f"PASS Tables repaired: {summary['tables_repaired']}")

    health = schema_service.check_store_health()
    click.echo("\n" + "=" * 60)
    for name, count in health.items():
        click.echo(f"  {name:<16} {count}")
    click.echo("=" * 60)


@system_group.command('reset')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_store_command(yes):
    """
    DANGER: Wipe the store back to the seeded defaults.

    Every order, client, movement and setting is deleted.
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Wiping store...")
    schema_service.reset_store()
    click.echo("PASS Store reset to defaults")


@click.group('orders')
def orders_group():
    """Order inspection commands."""


@orders_group.command('export')
@click.option('--output', type=click.Path(dir_okay=False, writable=True), default=None, help='Write JSON to this file')
@with_appcontext
def export_orders_command(output):
    """Dump every order with its lines as JSON."""
    orders = order_service.export_orders()
    payload = json.dumps(orders, indent=2, ensure_ascii=False)

    if output:
        with open(output, "w", encoding="utf-8") as fh:
            fh.write(payload)
        click.echo(f"PASS Exported {len(orders)} order(s) to {output}")
    else:
        click.echo(payload)


@click.group('stock')
def stock_group():
    """Stock inspection and replenishment commands."""


@stock_group.command('low')
@with_appcontext
def low_stock_command():
    """List products at or below their alert threshold."""
    products = catalog_service.list_low_stock_products()
    if not products:
        click.echo("PASS No product below its alert threshold")
        return

    click.echo(f"{'ID':<5} {'Name':<24} {'Stock':>6} {'Alert':>6}")
    click.echo("-" * 44)
    for p in products:
        click.echo(f"{p.id:<5} {p.name:<24} {p.stock:>6} {p.alert_threshold:>6}")


@stock_group.command('replenish')
@click.argument('product_id', type=int)
@click.argument('quantity', type=int)
@click.option('--note', default=None, help='Free-text note stored on the movement')
@with_appcontext
def replenish_command(product_id, quantity, note):
    """Add QUANTITY units to PRODUCT_ID and record the movement."""
    try:
        movement = stock_service.replenish(product_id, quantity, note=note)
    except (StockError, NotFoundError) as e:
        raise click.ClickException(str(e))

    product = catalog_service.get_product(product_id)
    click.echo(f"PASS {product.name}: {movement.quantity:+d} -> stock {product.stock}")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(orders_group)
    app.cli.add_command(stock_group)
