import os
import click
from flask import current_app
from flask.cli import with_appcontext
from flask_migrate import upgrade as alembic_upgrade, migrate as alembic_migrate
from werkzeug.security import generate_password_hash
from models import db
from models.user import User, ROLE_ADMIN, ROLE_CUSTOMER, ROLE_VENDOR
from models.product import Product
from models.order import Order, OrderStatusLog, CheckoutAttempt
from models.cart import CartSnapshot
from models.subscriber import Subscriber


DEMO_USERS = [
    {"email": "admin@styleswap.com", "name": "Alex Morgan", "password": "admin123", "role": ROLE_ADMIN},
    {
        "email": "elegance@styleswap.com",
        "name": "Sophia Elegance",
        "password": "vendor123",
        "role": ROLE_VENDOR,
        "shop_name": "Elegance Rentals",
        "shop_address": "12 Fashion Lane, Bandra West, Mumbai",
    },
    {
        "email": "formal@styleswap.com",
        "name": "Marcus Formal",
        "password": "vendor123",
        "role": ROLE_VENDOR,
        "shop_name": "Formal Affair",
        "shop_address": "45 Business Hub, Connaught Place, New Delhi",
    },
    {"email": "customer@styleswap.com", "name": "James Wilson", "password": "user123", "role": ROLE_CUSTOMER},
]

# (vendor email, name, category, price/day, deposit, stock, sizes)
DEMO_PRODUCTS = [
    ("elegance@styleswap.com", "Midnight Blue Tuxedo", "Wedding Attire", 75, 150, 5, ["S", "M", "L", "XL", "XXL"]),
    ("elegance@styleswap.com", "Ivory Wedding Gown", "Wedding Attire", 120, 300, 3, ["XS", "S", "M", "L"]),
    ("elegance@styleswap.com", "Blush Bridesmaid Dress", "Wedding Attire", 45, 90, 6, ["XS", "S", "M", "L", "XL"]),
    ("formal@styleswap.com", "Charcoal Business Suit", "Formal Wear", 50, 100, 8, ["S", "M", "L", "XL"]),
    ("formal@styleswap.com", "Velvet Dinner Jacket", "Formal Wear", 60, 120, 4, ["M", "L", "XL"]),
]


def _assert_safe_for_upgrade():
    # Prevent accidental prod upgrades unless explicitly allowed
    env = (current_app.config.get("ENV") or "").lower()
    app_env = (os.getenv("APP_ENV") or "").lower()
    if app_env == "production" or env == "production":
        if (os.getenv("ALLOW_DB_MIGRATIONS") or "").lower() not in ("1", "true", "yes"):
            raise click.ClickException("Refusing to run DB migration in production without ALLOW_DB_MIGRATIONS=true")


@click.command("db-migrate-safe")
@click.option("-m", "--message", default="auto migration", help="Migration message")
@with_appcontext
def db_migrate_safe(message):
    """Generate a new migration script from current models."""
    alembic_migrate(message=message)
    click.echo("Migration script generated.")


@click.command("db-upgrade-safe")
@with_appcontext
def db_upgrade_safe():
    """Apply migrations to the configured database."""
    _assert_safe_for_upgrade()
    alembic_upgrade()
    click.echo("Database upgraded.")


@click.command("seed-demo")
@click.option("--reset/--no-reset", default=False, help="Delete existing orders, carts, subscribers, products and users first")
@with_appcontext
def seed_demo(reset):
    """Load demo admin, vendor and customer accounts with a few rental products."""
    _assert_safe_for_upgrade()
    if reset:
        for model in (OrderStatusLog, Order, CheckoutAttempt, CartSnapshot, Subscriber, Product, User):
            model.query.delete()

    users = {}
    for entry in DEMO_USERS:
        user = User.query.filter_by(email=entry["email"]).first()
        if user is None:
            user = User(
                email=entry["email"],
                name=entry["name"],
                password_hash=generate_password_hash(entry["password"]),
                role=entry["role"],
                shop_name=entry.get("shop_name"),
                shop_address=entry.get("shop_address"),
            )
            db.session.add(user)
        users[entry["email"]] = user
    db.session.flush()

    created = 0
    for vendor_email, name, category, price, deposit, stock, sizes in DEMO_PRODUCTS:
        vendor = users[vendor_email]
        if Product.query.filter_by(sub_admin_id=vendor.id, name=name).first():
            continue
        db.session.add(Product(
            sub_admin_id=vendor.id,
            name=name,
            category=category,
            description=f"{name} from {vendor.shop_name}.",
            price_per_day=price,
            security_deposit=deposit,
            stock_quantity=stock,
            available_quantity=stock,
            sizes=sizes,
            images=[],
        ))
        created += 1
    db.session.commit()
    click.echo(f"Seeded {len(users)} users and {created} products.")


def register_cli(app):
    app.cli.add_command(db_migrate_safe)
    app.cli.add_command(db_upgrade_safe)
    app.cli.add_command(seed_demo)
