from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Category",
            fields=[
                ("id", models.CharField(max_length=64, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=120)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["created_at", "id"],
                "verbose_name_plural": "categories",
            },
        ),
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.CharField(max_length=64, primary_key=True, serialize=False)),
                ("name", models.CharField(db_index=True, max_length=255)),
                ("category", models.CharField(blank=True, default="", max_length=120)),
                (
                    "product_type",
                    models.CharField(
                        choices=[("drink", "เครื่องดื่ม"), ("snack", "ขนม")],
                        default="drink",
                        max_length=16,
                    ),
                ),
                ("prices", models.TextField(blank=True, default="{}")),
                ("description", models.TextField(blank=True, default="")),
                ("image", models.TextField(blank=True, default="")),
                ("additional_images", models.TextField(blank=True, default="[]")),
                ("video", models.TextField(blank=True, default="")),
                ("is_popular", models.BooleanField(default=False)),
                ("is_recommended", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["created_at", "id"],
                "indexes": [
                    models.Index(fields=["category"], name="product_category_idx"),
                ],
            },
        ),
    ]
