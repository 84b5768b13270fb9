from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('games', '0001_initial'),
    ]

    operations = [
        migrations.AlterField(
            model_name='bet',
            name='payout_multiplier',
            field=models.DecimalField(decimal_places=4, max_digits=10),
        ),
    ]
