import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('inventory', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Category',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text='Name of the product category.', max_length=100, unique=True)),
                ('description', models.TextField(blank=True, help_text='Description of the category.')),
                ('order', models.IntegerField(default=0, help_text='Display order for this category. Lower numbers appear first.')),
            ],
            options={
                'verbose_name': 'Category',
                'verbose_name_plural': 'Categories',
                'ordering': ['order', 'name'],
            },
        ),
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text='Name of the product.', max_length=200)),
                ('price', models.DecimalField(decimal_places=2, help_text='The selling price of the product.', max_digits=10)),
                ('is_for_sale', models.BooleanField(default=True, help_text='Whether this product is offered at the register. Preparations usually are not.')),
                ('stock_level', models.DecimalField(blank=True, decimal_places=4, help_text='Prepared quantity on hand, in stock_unit. Leave blank for products that are not stock-tracked.', max_digits=14, null=True)),
                ('stock_unit', models.CharField(blank=True, help_text='Unit the stock level is counted in. Required when stock_level is set.', max_length=50, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('categories', models.ManyToManyField(blank=True, related_name='products', to='products.category')),
            ],
            options={
                'verbose_name': 'Product',
                'verbose_name_plural': 'Products',
                'ordering': ['name'],
                'indexes': [
                    models.Index(fields=['is_for_sale'], name='product_is_for_sale_idx'),
                    models.Index(fields=['name'], name='product_name_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(models.Q(('stock_level__isnull', True), ('stock_unit__isnull', True)), models.Q(('stock_level__isnull', False), ('stock_unit__isnull', False)), _connector='OR'), name='product_stock_unit_iff_tracked'),
                ],
            },
        ),
        migrations.CreateModel(
            name='RecipeItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity', models.DecimalField(decimal_places=4, help_text='Quantity needed to make one unit of the product.', max_digits=12)),
                ('unit', models.CharField(help_text="Unit of measure, e.g., 'gram', 'teaspoon', 'ml', 'pcs'.", max_length=50)),
                ('position', models.PositiveIntegerField(default=0, help_text='Order of the line within the recipe.')),
                ('ingredient', models.ForeignKey(blank=True, help_text='The raw ingredient used.', null=True, on_delete=django.db.models.deletion.PROTECT, related_name='recipe_items', to='inventory.ingredient')),
                ('product', models.ForeignKey(help_text='The product this recipe line belongs to.', on_delete=django.db.models.deletion.CASCADE, related_name='recipe_items', to='products.product')),
                ('sub_product', models.ForeignKey(blank=True, help_text='The product used as a component.', null=True, on_delete=django.db.models.deletion.PROTECT, related_name='used_in_recipe_items', to='products.product')),
            ],
            options={
                'verbose_name': 'Recipe Item',
                'verbose_name_plural': 'Recipe Items',
                'ordering': ['product', 'position', 'id'],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(models.Q(('ingredient__isnull', False), ('sub_product__isnull', True)), models.Q(('ingredient__isnull', True), ('sub_product__isnull', False)), _connector='OR'), name='recipe_item_exactly_one_component'),
                    models.CheckConstraint(condition=models.Q(('quantity__gt', 0)), name='recipe_item_quantity_positive'),
                ],
            },
        ),
    ]
