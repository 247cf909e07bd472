import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('inventory', '0001_initial'),
        ('products', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='StockHistoryEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('operation_type', models.CharField(choices=[('ORDER_DEDUCTION', 'Order Deduction'), ('RESTOCK_ADD', 'Preparation Restocked'), ('RESTOCK_CONSUMPTION', 'Consumed by Restock'), ('PURCHASE', 'Purchase Received')], help_text='Type of stock operation performed', max_length=30)),
                ('quantity_change', models.DecimalField(decimal_places=4, help_text='Change in quantity (positive for additions, negative for subtractions)', max_digits=14)),
                ('previous_quantity', models.DecimalField(decimal_places=4, help_text='Quantity before the operation', max_digits=14)),
                ('new_quantity', models.DecimalField(decimal_places=4, help_text='Quantity after the operation', max_digits=14)),
                ('unit', models.CharField(help_text='Stock unit the quantities are expressed in', max_length=50)),
                ('detailed_reason', models.TextField(blank=True, help_text='Explanation of the stock operation')),
                ('reference_id', models.CharField(blank=True, db_index=True, help_text="Reference ID linking entries of one operation (e.g., 'order_12')", max_length=100)),
                ('timestamp', models.DateTimeField(auto_now_add=True, help_text='When the operation was performed')),
                ('ingredient', models.ForeignKey(blank=True, help_text='Ingredient whose stock changed', null=True, on_delete=django.db.models.deletion.CASCADE, related_name='stock_history', to='inventory.ingredient')),
                ('product', models.ForeignKey(blank=True, help_text='Stock-tracked product whose stock changed', null=True, on_delete=django.db.models.deletion.CASCADE, related_name='stock_history', to='products.product')),
                ('user', models.ForeignKey(blank=True, help_text='User who performed the operation', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='stock_operations', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Stock History Entry',
                'verbose_name_plural': 'Stock History Entries',
                'ordering': ['-timestamp', '-id'],
                'indexes': [
                    models.Index(fields=['ingredient', 'timestamp'], name='stock_hist_ingr_time_idx'),
                    models.Index(fields=['product', 'timestamp'], name='stock_hist_prod_time_idx'),
                    models.Index(fields=['operation_type'], name='stock_hist_operation_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(models.Q(('ingredient__isnull', False), ('product__isnull', True)), models.Q(('ingredient__isnull', True), ('product__isnull', False)), _connector='OR'), name='stock_history_exactly_one_target'),
                ],
            },
        ),
    ]
