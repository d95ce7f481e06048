from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="ProductPricingCache",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("product_id", models.CharField(max_length=64, unique=True)),
                ("tenant_id", models.CharField(db_index=True, max_length=64)),
                ("price_configuration", models.JSONField(default=dict)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Product Pricing Cache",
                "verbose_name_plural": "Product Pricing Cache",
            },
        ),
        migrations.CreateModel(
            name="ToppingPriceCache",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("topping_id", models.CharField(max_length=64, unique=True)),
                ("tenant_id", models.CharField(db_index=True, max_length=64)),
                ("price", models.PositiveIntegerField()),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Topping Price Cache",
                "verbose_name_plural": "Topping Price Cache",
            },
        ),
    ]
