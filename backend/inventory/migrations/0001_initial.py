import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Ingredient',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text='Unique name of the ingredient.', max_length=200, unique=True)),
                ('stock_level', models.DecimalField(decimal_places=4, default=0, help_text='Quantity on hand, expressed in stock_unit. May be negative.', max_digits=14)),
                ('stock_unit', models.CharField(help_text="Unit the stock level is counted in, e.g., 'gram', 'ml', 'pcs'.", max_length=50)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Ingredient',
                'verbose_name_plural': 'Ingredients',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='PurchaseLogEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity_purchased', models.DecimalField(decimal_places=4, help_text='Quantity bought, in the unit below', max_digits=14)),
                ('unit', models.CharField(help_text="Unit of the purchased quantity, e.g., 'kilogram'", max_length=50)),
                ('total_cost', models.DecimalField(decimal_places=2, max_digits=12)),
                ('supplier', models.CharField(blank=True, max_length=200)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField()),
                ('ingredient', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='purchases', to='inventory.ingredient')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='purchases_logged', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Purchase Log Entry',
                'verbose_name_plural': 'Purchase Log Entries',
                'ordering': ['-created_at'],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('quantity_purchased__gt', 0)), name='purchase_quantity_positive'),
                    models.CheckConstraint(condition=models.Q(('total_cost__gte', 0)), name='purchase_cost_not_negative'),
                ],
            },
        ),
    ]
