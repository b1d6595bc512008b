from __future__ import annotations

import random
from decimal import Decimal

from django.core.management.base import BaseCommand

from modules.orders.constants import PaymentMethod
from modules.orders.dtos import CreateOrderDTO
from modules.orders.exceptions import InsufficientStock
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.users.models import User
from modules.users.repositories.django_repository import UserDjangoRepository


class Command(BaseCommand):
    help = "Seed database with realistic development data."

    def add_arguments(self, parser):
        parser.add_argument(
            "--orders",
            type=int,
            default=30,
            help="Number of orders to place when the database has none.",
        )

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        users = self._seed_users()
        products = self._seed_products()
        orders_created = self._seed_orders(users, products, options["orders"])

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={len(users)}, "
                f"products={len(products)}, "
                f"orders={orders_created}"
            )
        )

    def _seed_users(self) -> list[User]:
        self.stdout.write("Creating users...")
        users: list[User] = []
        seed_users = [
            ("Ana", "Souza", "ana@example.com", 31, "Rua das Flores, 120 - São Paulo/SP"),
            ("Bruno", "Lima", "bruno@example.com", 45, "Av. Brasil, 850 - Rio de Janeiro/RJ"),
            ("Carla", "Mendes", "carla@example.com", 27, "Rua XV de Novembro, 45 - Curitiba/PR"),
            ("Daniel", "Costa", "daniel@example.com", 38, "Rua da Bahia, 1020 - Belo Horizonte/MG"),
            ("Fernanda", "Rocha", "fernanda@example.com", 29, "Av. Sete de Setembro, 77 - Salvador/BA"),
        ]
        for name, last_name, email, age, address in seed_users:
            user, _ = User.objects.get_or_create(
                email=email,
                defaults={
                    "name": name,
                    "last_name": last_name,
                    "age": age,
                    "address": address,
                },
            )
            users.append(user)
        self.stdout.write(self.style.SUCCESS("Creating users... Done!"))
        return users

    def _seed_products(self) -> list[Product]:
        self.stdout.write("Creating products...")
        products: list[Product] = []
        catalog = [
            ("Monitor 27\"", "Eletrônicos", Decimal("1299.90")),
            ("Teclado Mecânico", "Eletrônicos", Decimal("399.90")),
            ("Mouse Gamer", "Eletrônicos", Decimal("249.90")),
            ("Headset", "Eletrônicos", Decimal("299.90")),
            ("Cadeira Ergonômica", "Móveis", Decimal("1499.00")),
            ("Mesa Escritório", "Móveis", Decimal("899.00")),
            ("Papel A4", "Escritório", Decimal("29.90")),
            ("Caderno", "Escritório", Decimal("19.90")),
        ]
        for name, category, price in catalog:
            product, _ = Product.objects.get_or_create(
                name=name,
                defaults={
                    "description": category,
                    "price": price,
                    "stock": random.randint(10, 200),
                },
            )
            products.append(product)
        self.stdout.write(self.style.SUCCESS("Creating products... Done!"))
        return products

    def _seed_orders(
        self, users: list[User], products: list[Product], count: int
    ) -> int:
        self.stdout.write("Creating orders...")
        if Order.objects.exists():
            self.stdout.write(self.style.WARNING("Skipping orders (already seeded)."))
            return 0
        if not users or not products:
            self.stdout.write(self.style.WARNING("Skipping orders (no users/products)."))
            return 0

        # Orders go through the service so product stock stays consistent.
        service = OrderService(
            order_repository=OrderDjangoRepository(),
            user_repository=UserDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )
        orders_created = 0
        for i in range(count):
            user = random.choice(users)
            product = random.choice(products)
            dto = CreateOrderDTO(
                name=f"Pedido {i + 1}",
                description=f"Seed order {i + 1}",
                address=user.address,
                payment_method=random.choice(list(PaymentMethod)),
                quantity=random.randint(1, 5),
                user_id=user.id,
                product_id=product.id,
            )
            try:
                service.create_order(dto)
            except InsufficientStock:
                continue
            orders_created += 1

        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return orders_created
