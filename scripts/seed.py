#!/usr/bin/env python3
"""Seed database with sample catalog data.

Creates:
- Categories (reds, whites, rosés, sparkling)
- Products across those categories
- Two stores with opening hours
- Delivery zones with postal codes

The script is idempotent: categories are matched by slug, products,
stores and zones by name.

Usage:
    python -m scripts.seed
"""

import asyncio
import os
import sys

# Add parent to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from catalog_api.models import Category, DeliveryZone, Product, Store
from catalog_api.services.serialized import encode_json_field
from catalog_api.settings import Settings

load_dotenv()

# ============================================================
# Catalog definitions
# ============================================================

CATEGORIES = [
    {"name": "Vins rouges", "slug": "reds", "description": "Bordeaux, Bourgogne, Rhône et plus"},
    {"name": "Vins blancs", "slug": "whites", "description": "Secs, moelleux et liquoreux"},
    {"name": "Rosés", "slug": "roses", "description": "Provence et Loire"},
    {"name": "Effervescents", "slug": "sparkling", "description": "Champagnes et crémants"},
]

PRODUCTS = [
    {
        "name": "Château Margaux 2015",
        "category": "reds",
        "description": "Grand cru classé, tannins soyeux et longue garde.",
        "price": 649.0,
        "region": "Bordeaux",
        "grape_variety": "Cabernet Sauvignon, Merlot",
        "featured": True,
        "images": ["https://images.cavavin.example/margaux-2015.jpg"],
    },
    {
        "name": "Côte-Rôtie La Landonne",
        "category": "reds",
        "description": "Syrah du nord de la vallée du Rhône.",
        "price": 89.0,
        "region": "Vallée du Rhône",
        "grape_variety": "Syrah",
        "featured": False,
        "images": [
            "https://images.cavavin.example/landonne-front.jpg",
            "https://images.cavavin.example/landonne-back.jpg",
        ],
    },
    {
        "name": "Gevrey-Chambertin Vieilles Vignes",
        "category": "reds",
        "description": "Pinot noir de Bourgogne aux arômes de cerise noire.",
        "price": 54.5,
        "region": "Bourgogne",
        "grape_variety": "Pinot Noir",
        "featured": True,
        "images": ["https://images.cavavin.example/gevrey-vv.jpg"],
    },
    {
        "name": "Chablis Premier Cru Montmains",
        "category": "whites",
        "description": "Minéral et tendu.",
        "price": 32.0,
        "region": "Bourgogne",
        "grape_variety": "Chardonnay",
        "featured": False,
        "images": ["https://images.cavavin.example/chablis-montmains.jpg"],
    },
    {
        "name": "Sancerre Les Monts Damnés",
        "category": "whites",
        "description": "Agrumes et pierre à fusil.",
        "price": 27.9,
        "region": "Loire",
        "grape_variety": "Sauvignon Blanc",
        "featured": False,
        "images": [],
    },
    {
        "name": "Domaines Ott Clos Mireille",
        "category": "roses",
        "description": "Rosé de Provence pâle et élégant.",
        "price": 38.0,
        "region": "Provence",
        "grape_variety": "Grenache, Cinsault",
        "featured": True,
        "images": ["https://images.cavavin.example/clos-mireille.jpg"],
    },
    {
        "name": "Champagne Brut Réserve",
        "category": "sparkling",
        "description": "Bulles fines, notes de brioche.",
        "price": 45.0,
        "region": "Champagne",
        "grape_variety": "Chardonnay, Pinot Noir, Pinot Meunier",
        "featured": False,
        "images": ["https://images.cavavin.example/brut-reserve.jpg"],
    },
]

_WEEKDAY_HOURS = {"open": "10:00", "close": "19:30"}

STORES = [
    {
        "name": "Cavavin Paris 11",
        "address": "42 rue Oberkampf",
        "city": "Paris",
        "postal_code": "75011",
        "phone": "+33 1 43 00 00 00",
        "opening_hours": {
            "monday": None,
            "tuesday": _WEEKDAY_HOURS,
            "wednesday": _WEEKDAY_HOURS,
            "thursday": _WEEKDAY_HOURS,
            "friday": _WEEKDAY_HOURS,
            "saturday": {"open": "09:30", "close": "20:00"},
            "sunday": {"open": "10:00", "close": "13:00"},
        },
    },
    {
        "name": "Cavavin Lyon Croix-Rousse",
        "address": "8 boulevard de la Croix-Rousse",
        "city": "Lyon",
        "postal_code": "69004",
        "phone": None,
        "opening_hours": {
            "monday": "closed",
            "tuesday": _WEEKDAY_HOURS,
            "wednesday": _WEEKDAY_HOURS,
            "thursday": _WEEKDAY_HOURS,
            "friday": _WEEKDAY_HOURS,
            "saturday": _WEEKDAY_HOURS,
            "sunday": None,
        },
    },
]

DELIVERY_ZONES = [
    {"name": "Paris intra-muros", "postal_codes": [f"750{n:02d}" for n in range(1, 21)]},
    {"name": "Lyon centre", "postal_codes": ["69001", "69002", "69003", "69004", "69006", "69007"]},
]


async def seed_database() -> None:
    """Seed database with sample data."""
    database_url = Settings().async_database_url

    engine = create_async_engine(database_url, echo=False)
    async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with async_session() as session:
        print("Seeding database...")

        print("\nCreating categories...")
        category_map = await seed_categories(session)

        print("\nCreating products...")
        await seed_products(session, category_map)

        print("\nCreating stores...")
        await seed_stores(session)

        print("\nCreating delivery zones...")
        await seed_delivery_zones(session)

        await session.commit()
        print("\nDatabase seeded successfully!")

    await engine.dispose()


async def seed_categories(session: AsyncSession) -> dict[str, str]:
    """Seed categories; returns slug -> id."""
    category_map: dict[str, str] = {}

    for c in CATEGORIES:
        result = await session.execute(select(Category).where(Category.slug == c["slug"]))
        existing = result.scalar_one_or_none()

        if existing:
            category_map[c["slug"]] = existing.id
            print(f"  - {c['slug']} (exists)")
        else:
            category = Category(name=c["name"], slug=c["slug"], description=c["description"])
            session.add(category)
            await session.flush()
            category_map[c["slug"]] = category.id
            print(f"  + {c['slug']}")

    return category_map


async def seed_products(session: AsyncSession, category_map: dict[str, str]) -> None:
    """Seed sample products."""
    for p in PRODUCTS:
        category_id = category_map.get(p["category"])
        if not category_id:
            print(f"  ! category not found: {p['category']}")
            continue

        result = await session.execute(select(Product).where(Product.name == p["name"]))
        if result.scalar_one_or_none():
            print(f"  - {p['name']} (exists)")
            continue

        session.add(
            Product(
                name=p["name"],
                description=p["description"],
                price=p["price"],
                region=p["region"],
                grape_variety=p["grape_variety"],
                featured=p["featured"],
                images=encode_json_field(p["images"]),
                category_id=category_id,
            )
        )
        print(f"  + {p['name']} ({p['price']:.2f} EUR)")


async def seed_stores(session: AsyncSession) -> None:
    """Seed physical stores."""
    for s in STORES:
        result = await session.execute(select(Store).where(Store.name == s["name"]))
        if result.scalar_one_or_none():
            print(f"  - {s['name']} (exists)")
            continue

        session.add(
            Store(
                name=s["name"],
                address=s["address"],
                city=s["city"],
                postal_code=s["postal_code"],
                phone=s["phone"],
                opening_hours=encode_json_field(s["opening_hours"]),
            )
        )
        print(f"  + {s['name']}")


async def seed_delivery_zones(session: AsyncSession) -> None:
    """Seed delivery zones."""
    for z in DELIVERY_ZONES:
        result = await session.execute(select(DeliveryZone).where(DeliveryZone.name == z["name"]))
        if result.scalar_one_or_none():
            print(f"  - {z['name']} (exists)")
            continue

        session.add(DeliveryZone(name=z["name"], postal_codes=encode_json_field(z["postal_codes"])))
        print(f"  + {z['name']} ({len(z['postal_codes'])} postal codes)")


if __name__ == "__main__":
    asyncio.run(seed_database())
