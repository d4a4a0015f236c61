from __future__ import annotations

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from modules.accounts.models import UserRole
from modules.products.models import Product

DEMO_PASSWORD = "Hello@1234"

CATALOG = [
    ("Gaming Laptop Pro", "High-performance laptop for gaming", "1999.99", 25, "Electronics"),
    ("Wireless Mouse", "Ergonomic wireless mouse", "49.99", 150, "Accessories"),
    ("Mechanical Keyboard", "RGB mechanical keyboard with blue switches", "129.99", 75, "Accessories"),
    ("4K Monitor", "27-inch 4K UHD monitor", "499.99", 40, "Electronics"),
    ("USB-C Hub", "7-in-1 USB-C hub", "39.99", 200, "Accessories"),
    ("Wireless Headphones", "Noise-cancelling over-ear headphones", "199.99", 60, "Audio"),
    ("Webcam HD", "1080p webcam with microphone", "79.99", 90, "Accessories"),
    ("Laptop Stand", "Adjustable aluminium laptop stand", "34.99", 120, "Accessories"),
    ("External SSD 1TB", "Portable USB 3.2 solid state drive", "149.99", 80, "Storage"),
]


class Command(BaseCommand):
    help = "Seed database with demo accounts and a product catalog."

    def handle(self, *args, **options):
        self.stdout.write("Seeding development data...")

        admin, users_created = self._seed_users()
        products_created = self._seed_products(owner=admin)

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={users_created}, "
                f"products={products_created}"
            )
        )

    def _seed_users(self):
        User = get_user_model()
        accounts = [
            ("admin", "admin@storefront.dev", UserRole.ADMIN),
            ("user", "user@storefront.dev", UserRole.USER),
        ]
        created = 0
        admin = None
        for username, email, role in accounts:
            user = User.objects.filter(email=email).first()
            if user is None:
                user = User.objects.create_user(
                    username=username,
                    email=email,
                    password=DEMO_PASSWORD,
                    role=role,
                )
                created += 1
            if role == UserRole.ADMIN:
                admin = user
        return admin, created

    def _seed_products(self, owner) -> int:
        self.stdout.write("Creating products...")
        created = 0
        for name, description, price, stock, category in CATALOG:
            _, was_created = Product.objects.alive().get_or_create(
                name=name,
                defaults={
                    "description": description,
                    "price": Decimal(price),
                    "stock": stock,
                    "category": category,
                    "user": owner,
                },
            )
            created += int(was_created)
        self.stdout.write(self.style.SUCCESS("Creating products... Done!"))
        return created
