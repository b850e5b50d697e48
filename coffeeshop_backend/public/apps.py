# public/apps.py

"""
PUBLIC APP CONFIG

Storefront / POS backend gateway (AllowAny).

The ShopStore (mutation lock, asset store, chat notifier) is built once
here and lives as long as the process.
"""

from django.apps import AppConfig


class PublicConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "public"
    verbose_name = "Backend Gateway"

    store = None

    def ready(self):
        from public.services.shop_store import ShopStore

        self.store = ShopStore.from_settings()
