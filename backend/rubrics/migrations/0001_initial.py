"""Create RubricDefinition and ReviewSpec

Generated manually. Run `python manage.py migrate` to apply.
"""
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='RubricDefinition',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('school', models.CharField(max_length=100)),
                ('department', models.CharField(max_length=100)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
        ),
        migrations.AddConstraint(
            model_name='rubricdefinition',
            constraint=models.UniqueConstraint(fields=('school', 'department'), name='unique_rubric_per_unit'),
        ),
        migrations.CreateModel(
            name='ReviewSpec',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('review_name', models.CharField(max_length=64)),
                ('display_name', models.CharField(blank=True, default='', max_length=150)),
                ('faculty_type', models.CharField(choices=[('guide', 'Guide'), ('panel', 'Panel')], default='guide', max_length=8)),
                ('components', models.JSONField(blank=True, default=list)),
                ('deadline_from', models.DateTimeField(blank=True, null=True)),
                ('deadline_to', models.DateTimeField(blank=True, null=True)),
                ('requires_ppt', models.BooleanField(default=False)),
                ('order', models.PositiveIntegerField(default=0)),
                ('rubric', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='reviews', to='rubrics.rubricdefinition')),
            ],
            options={'ordering': ('rubric', 'order', 'id')},
        ),
        migrations.AddConstraint(
            model_name='reviewspec',
            constraint=models.UniqueConstraint(fields=('rubric', 'review_name'), name='unique_review_name_per_rubric'),
        ),
    ]
