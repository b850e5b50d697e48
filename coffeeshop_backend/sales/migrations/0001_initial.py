from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.CharField(max_length=64, primary_key=True, serialize=False)),
                ("customer_name", models.CharField(blank=True, default="", max_length=200)),
                (
                    "user_type",
                    models.CharField(
                        choices=[
                            ("general", "ทั่วไป"),
                            ("teacher", "ครู"),
                            ("student", "นักเรียน"),
                        ],
                        default="general",
                        help_text="Representative customer class at order time",
                        max_length=16,
                    ),
                ),
                ("items", models.TextField(default="[]")),
                ("total_amount", models.DecimalField(decimal_places=2, max_digits=12)),
                (
                    "payment_method",
                    models.CharField(
                        choices=[("cash", "เงินสด"), ("transfer", "โอนชำระ")],
                        default="cash",
                        max_length=16,
                    ),
                ),
                (
                    "payment_status",
                    models.CharField(
                        choices=[("pending", "รอชำระ"), ("paid", "ชำระแล้ว")],
                        default="pending",
                        max_length=16,
                    ),
                ),
                ("delivery_location", models.CharField(blank=True, default="", max_length=255)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "รอดำเนินการ"),
                            ("preparing", "กำลังทำ"),
                            ("delivering", "กำลังส่ง"),
                            ("completed", "ส่งแล้ว"),
                            ("cancelled", "ยกเลิก"),
                        ],
                        default="pending",
                        max_length=16,
                    ),
                ),
                ("slip_url", models.TextField(blank=True, default="")),
                ("timestamp", models.BigIntegerField(db_index=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["-timestamp", "-created_at"],
                "indexes": [
                    models.Index(fields=["status"], name="order_status_idx"),
                    models.Index(fields=["payment_status"], name="order_payment_status_idx"),
                ],
            },
        ),
    ]
