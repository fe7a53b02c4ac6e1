"""Create ExtensionRequest

Generated manually. Run `python manage.py migrate` to apply.
"""
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('projects', '0001_initial'),
        ('rubrics', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='ExtensionRequest',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('faculty_type', models.CharField(choices=[('guide', 'Guide'), ('panel', 'Panel')], max_length=8)),
                ('reason', models.TextField(blank=True, default='')),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('approved', 'Approved'), ('rejected', 'Rejected')], db_index=True, default='pending', max_length=16)),
                ('new_deadline', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('resolved_at', models.DateTimeField(blank=True, null=True)),
                ('faculty', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='extension_requests', to=settings.AUTH_USER_MODEL)),
                ('resolved_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='resolved_extension_requests', to=settings.AUTH_USER_MODEL)),
                ('review_spec', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='extension_requests', to='rubrics.reviewspec')),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='extension_requests', to='projects.student')),
            ],
            options={'ordering': ('-created_at', '-id')},
        ),
        migrations.AddIndex(
            model_name='extensionrequest',
            index=models.Index(fields=['status', 'created_at'], name='extreq_status_created_idx'),
        ),
        migrations.AddIndex(
            model_name='extensionrequest',
            index=models.Index(fields=['faculty_type', 'status'], name='extreq_type_status_idx'),
        ),
        migrations.AddConstraint(
            model_name='extensionrequest',
            constraint=models.UniqueConstraint(condition=models.Q(('status', 'pending')), fields=('student', 'review_spec', 'faculty_type'), name='unique_pending_extension_request'),
        ),
    ]
