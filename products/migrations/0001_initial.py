from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('hsn', models.CharField(blank=True, default='', max_length=20)),
                ('batch', models.CharField(blank=True, default='', max_length=100)),
                ('packaging', models.CharField(blank=True, default='', help_text='e.g. 10x10, 100ml', max_length=50)),
                ('quantity', models.PositiveIntegerField(default=0)),
                ('mrp', models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ('purchase_rate', models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ('sale_rate', models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ('sale_rate_inclusive', models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ('expiry', models.CharField(blank=True, default='', help_text='Year-month, e.g. 2027-03', max_length=7)),
                ('cgst', models.DecimalField(decimal_places=2, default=0, max_digits=5)),
                ('sgst', models.DecimalField(decimal_places=2, default=0, max_digits=5)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'constraints': [models.UniqueConstraint(fields=('name', 'batch'), name='unique_product_name_batch')],
            },
        ),
        migrations.CreateModel(
            name='StockAdjustment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity_adjusted', models.IntegerField()),
                ('reason', models.CharField(max_length=100)),
                ('notes', models.TextField(blank=True, default='')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('product', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='adjustments', to='products.product')),
            ],
        ),
    ]
