from django.core.management.base import BaseCommand
from django.db import transaction

from products.services.catalog import save_category, save_product
from public.services.listing_cache import Listing, invalidate_listing


def _tiers(general, teacher, student):
    return {"general": general, "teacher": teacher, "student": student}


CATEGORIES = [
    ("cat-coffee", "กาแฟ"),
    ("cat-tea", "ชา"),
    ("cat-milk", "นม & โกโก้"),
    ("cat-bakery", "เบเกอรี่"),
]

PRODUCTS = [
    {
        "id": "p-espresso",
        "name": "เอสเปรสโซ่",
        "category": "กาแฟ",
        "productType": "drink",
        "prices": {
            "hot": _tiers(40, 35, 30),
            "iced": _tiers(45, 40, 35),
            "frappe": _tiers(55, 50, 45),
        },
        "isPopular": True,
    },
    {
        "id": "p-latte",
        "name": "ลาเต้",
        "category": "กาแฟ",
        "productType": "drink",
        "prices": {"hot": _tiers(45, 40, 35), "iced": _tiers(50, 45, 40)},
        "isRecommended": True,
    },
    {
        "id": "p-thai-tea",
        "name": "ชาไทย",
        "category": "ชา",
        "productType": "drink",
        "prices": {"iced": _tiers(40, 35, 30), "frappe": _tiers(50, 45, 40)},
        "isPopular": True,
    },
    {
        "id": "p-cocoa",
        "name": "โกโก้",
        "category": "นม & โกโก้",
        "productType": "drink",
        "prices": {"hot": _tiers(40, 35, 30), "iced": _tiers(45, 40, 35)},
    },
    {
        "id": "p-croissant",
        "name": "ครัวซองต์เนยสด",
        "category": "เบเกอรี่",
        "productType": "snack",
        "prices": {"snack": _tiers(35, 30, 25)},
    },
]


class Command(BaseCommand):
    help = "Seed menu categories and products (idempotent upsert by id)"

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write(self.style.WARNING("Seeding menu..."))

        for category_id, name in CATEGORIES:
            save_category({"id": category_id, "name": name})

        for product in PRODUCTS:
            save_product(product)

        invalidate_listing(Listing.CATEGORIES)
        invalidate_listing(Listing.PRODUCTS)

        self.stdout.write(
            self.style.SUCCESS(
                f"✅ Seeded {len(CATEGORIES)} categories and {len(PRODUCTS)} products."
            )
        )
