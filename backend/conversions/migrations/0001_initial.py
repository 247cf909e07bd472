import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('inventory', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='ConversionRule',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('from_unit', models.CharField(help_text="The source unit, e.g., 'teaspoon'", max_length=50)),
                ('to_unit', models.CharField(help_text="The target unit, e.g., 'gram'", max_length=50)),
                ('factor', models.DecimalField(decimal_places=6, help_text='Multiply the from_unit quantity by this to get to_unit quantity', max_digits=18)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('ingredient', models.ForeignKey(blank=True, help_text="If set, this rule is specific to this ingredient. If null, it's a generic rule.", null=True, on_delete=django.db.models.deletion.CASCADE, related_name='conversion_rules', to='inventory.ingredient')),
            ],
            options={
                'verbose_name': 'Conversion Rule',
                'verbose_name_plural': 'Conversion Rules',
                'ordering': ['from_unit', 'to_unit', 'id'],
                'indexes': [models.Index(fields=['ingredient'], name='conv_rule_ingredient_idx')],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('ingredient__isnull', False)), fields=('from_unit', 'to_unit', 'ingredient'), name='unique_conversion_rule_per_ingredient'),
                    models.UniqueConstraint(condition=models.Q(('ingredient__isnull', True)), fields=('from_unit', 'to_unit'), name='unique_generic_conversion_rule'),
                    models.CheckConstraint(condition=models.Q(('factor__gt', 0)), name='conversion_rule_factor_positive'),
                ],
            },
        ),
    ]
