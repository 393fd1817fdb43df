"""Factory classes for restaurant models."""

from decimal import Decimal

import factory

from dinein.web.restaurant.models import (
    MenuItem,
    Order,
    OrderLine,
    OrderStatus,
    PaymentStatus,
)


class MenuItemFactory(factory.django.DjangoModelFactory):
    """Factory for MenuItem model."""

    class Meta:
        model = MenuItem

    name = factory.Sequence(lambda n: f"Item {n}")
    description = factory.Faker("sentence")
    price = Decimal("12.99")
    category = "Mains"
    image_url = ""
    stock_quantity = 20
    is_available = factory.LazyAttribute(lambda obj: obj.stock_quantity > 0)


class OrderFactory(factory.django.DjangoModelFactory):
    """Factory for Order model."""

    class Meta:
        model = Order

    table_number = factory.Sequence(lambda n: n + 1)
    customer_name = factory.Faker("first_name")
    status = OrderStatus.PENDING
    payment_status = PaymentStatus.PENDING
    total_amount = Decimal("25.98")


class OrderLineFactory(factory.django.DjangoModelFactory):
    """Factory for OrderLine model."""

    class Meta:
        model = OrderLine

    order = factory.SubFactory(OrderFactory)
    menu_item = factory.SubFactory(MenuItemFactory)
    item_name = factory.LazyAttribute(lambda obj: obj.menu_item.name)
    unit_price = factory.LazyAttribute(lambda obj: obj.menu_item.price)
    quantity = 2
    special_instructions = ""
    position = factory.Sequence(lambda n: n)
