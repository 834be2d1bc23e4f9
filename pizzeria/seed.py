"""
Default catalog seeding.

The ordering pipeline never writes products; this module fills an empty
catalog with the house menu so a fresh database is usable right away.
"""

import logging
from typing import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from pizzeria.models import Product

logger = logging.getLogger(__name__)

DEFAULT_MENU = (
    {
        "item_id": "pizza-margherita",
        "name": "Pizza Margherita",
        "price": 14.99,
        "description": "Tomato, fior di latte, basil",
        "category": "Pizzas",
    },
    {
        "item_id": "pizza-pepperoni",
        "name": "Pepperoni Pizza",
        "price": 16.99,
        "description": "Tomato, mozzarella, pepperoni",
        "category": "Pizzas",
    },
    {
        "item_id": "pizza-quattro-formaggi",
        "name": "Quattro Formaggi",
        "price": 17.50,
        "description": "Mozzarella, gorgonzola, fontina, parmigiano",
        "category": "Pizzas",
    },
    {
        "item_id": "pasta-carbonara",
        "name": "Pasta Carbonara",
        "price": 13.99,
        "description": "Spaghetti, guanciale, egg yolk, pecorino",
        "category": "Pasta",
    },
    {
        "item_id": "caesar-salad",
        "name": "Caesar Salad",
        "price": 8.99,
        "description": "Romaine, croutons, parmesan, caesar dressing",
        "category": "Sides",
    },
    {
        "item_id": "garlic-bread",
        "name": "Garlic Bread",
        "price": 5.99,
        "description": "Toasted focaccia with garlic butter",
        "category": "Sides",
    },
    {
        "item_id": "tiramisu",
        "name": "Tiramisu",
        "price": 7.99,
        "description": "Mascarpone, espresso, cocoa",
        "category": "Desserts",
    },
    {
        "item_id": "coke",
        "name": "Coke",
        "price": 2.99,
        "description": "330ml can",
        "category": "Drinks",
    },
    {
        "item_id": "sparkling-water",
        "name": "Sparkling Water",
        "price": 3.49,
        "description": "500ml bottle",
        "category": "Drinks",
    },
)


async def seed_catalog(session: AsyncSession, menu: Sequence[dict] = DEFAULT_MENU) -> int:
    """
    Insert the menu if the catalog is empty.

    Returns:
        int: Number of products inserted (0 if the catalog already had rows)
    """
    result = await session.execute(select(func.count()).select_from(Product))
    if result.scalar():
        return 0

    session.add_all(Product(**row) for row in menu)
    await session.commit()
    logger.info(f"Seeded catalog with {len(menu)} products")
    return len(menu)
