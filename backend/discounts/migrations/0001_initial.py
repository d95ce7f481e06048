import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Coupon",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("tenant_id", models.CharField(db_index=True, max_length=64)),
                ("title", models.CharField(max_length=255)),
                (
                    "code",
                    models.CharField(help_text="Code customers enter at checkout (unique per tenant)", max_length=50),
                ),
                (
                    "discount",
                    models.PositiveSmallIntegerField(
                        help_text="Discount percentage applied to the cart total.",
                        validators=[
                            django.core.validators.MinValueValidator(0),
                            django.core.validators.MaxValueValidator(100),
                        ],
                    ),
                ),
                ("valid_upto", models.DateField(help_text="Last day (inclusive) on which the coupon is honored.")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["code"],
                "indexes": [models.Index(fields=["tenant_id", "code"], name="coupon_tenant_code_idx")],
                "constraints": [
                    models.UniqueConstraint(fields=("tenant_id", "code"), name="unique_coupon_code_per_tenant")
                ],
            },
        ),
    ]
