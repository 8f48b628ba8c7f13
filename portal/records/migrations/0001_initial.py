import records.models
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Document',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('collection', models.CharField(
                    choices=[
                        ('users', 'Users'),
                        ('students', 'Students'),
                        ('teachers', 'Teachers'),
                        ('classes', 'Classes'),
                        ('payments', 'Payments'),
                        ('expenses', 'Expenses'),
                    ],
                    db_index=True,
                    max_length=20,
                )),
                ('key', models.CharField(
                    default=records.models.new_document_key,
                    help_text='Store-assigned identifier, exposed as the entity id.',
                    max_length=64,
                )),
                ('data', models.JSONField(
                    default=dict,
                    help_text='Entity fields. Absent optional fields are omitted, never null.',
                )),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Document',
                'verbose_name_plural': 'Documents',
                'ordering': ['collection', 'created_at', 'id'],
            },
        ),
        migrations.AddConstraint(
            model_name='document',
            constraint=models.UniqueConstraint(
                fields=('collection', 'key'),
                name='unique_document_key_per_collection',
            ),
        ),
    ]
