"""Create Panel, Project, Student, ReviewRecord and DeadlineOverride

Generated manually. Run `python manage.py migrate` to apply.
"""
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('rubrics', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Panel',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('school', models.CharField(max_length=100)),
                ('department', models.CharField(max_length=100)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('faculty1', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='panels_as_first', to=settings.AUTH_USER_MODEL)),
                ('faculty2', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='panels_as_second', to=settings.AUTH_USER_MODEL)),
            ],
        ),
        migrations.CreateModel(
            name='Project',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200, unique=True)),
                ('school', models.CharField(max_length=100)),
                ('department', models.CharField(max_length=100)),
                ('ppt_approved', models.BooleanField(default=False)),
                ('best_project', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('guide_faculty', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='guided_projects', to=settings.AUTH_USER_MODEL)),
                ('panel', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='projects', to='projects.panel')),
            ],
            options={'ordering': ('name',)},
        ),
        migrations.AddIndex(
            model_name='project',
            index=models.Index(fields=['school', 'department'], name='project_unit_idx'),
        ),
        migrations.CreateModel(
            name='Student',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('reg_no', models.CharField(max_length=32, unique=True)),
                ('name', models.CharField(max_length=150)),
                ('email', models.EmailField(blank=True, default='', max_length=254)),
                ('school', models.CharField(max_length=100)),
                ('department', models.CharField(max_length=100)),
                ('ppt_approved', models.BooleanField(default=False)),
                ('ppt_locked', models.BooleanField(default=False)),
                ('project', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='students', to='projects.project')),
            ],
            options={'ordering': ('reg_no',)},
        ),
        migrations.CreateModel(
            name='ReviewRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('marks', models.JSONField(blank=True, default=dict)),
                ('comments', models.TextField(blank=True, default='')),
                ('attendance_value', models.BooleanField(default=False)),
                ('attendance_locked', models.BooleanField(default=False)),
                ('locked', models.BooleanField(default=False)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('review_spec', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='records', to='rubrics.reviewspec')),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='review_records', to='projects.student')),
            ],
        ),
        migrations.AddConstraint(
            model_name='reviewrecord',
            constraint=models.UniqueConstraint(fields=('student', 'review_spec'), name='unique_review_record_per_student'),
        ),
        migrations.CreateModel(
            name='DeadlineOverride',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('from_at', models.DateTimeField()),
                ('to_at', models.DateTimeField()),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('review_spec', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='deadline_overrides', to='rubrics.reviewspec')),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='deadline_overrides', to='projects.student')),
            ],
        ),
        migrations.AddConstraint(
            model_name='deadlineoverride',
            constraint=models.UniqueConstraint(fields=('student', 'review_spec'), name='unique_deadline_override_per_student'),
        ),
    ]
