import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('club', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='RecurrencePattern',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('days_of_week', models.JSONField(default=list, help_text='Weekday numbers, 0 = Sunday ... 6 = Saturday.', verbose_name='Days of Week')),
                ('start_time', models.TimeField(verbose_name='Start Time')),
                ('duration_minutes', models.PositiveIntegerField(verbose_name='Duration (minutes)')),
                ('location', models.CharField(blank=True, default='', max_length=255, verbose_name='Location')),
                ('notes', models.TextField(blank=True, default='', verbose_name='Notes')),
                ('generated_from', models.DateField(verbose_name='Generated From')),
                ('generate_until', models.DateField(verbose_name='Generate Until')),
                ('is_active', models.BooleanField(default=True, verbose_name='Is Active')),
                ('deactivated_at', models.DateTimeField(blank=True, null=True, verbose_name='Deactivated At')),
                ('team', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='recurrence_patterns', to='club.team', verbose_name='Team')),
            ],
            options={
                'verbose_name': 'Recurrence Pattern',
                'verbose_name_plural': 'Recurrence Patterns',
                'db_table': 'training_recurrences',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='TrainingSession',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('session_date', models.DateField(verbose_name='Session Date')),
                ('start_time', models.TimeField(verbose_name='Start Time')),
                ('duration_minutes', models.PositiveIntegerField(verbose_name='Duration (minutes)')),
                ('location', models.CharField(blank=True, default='', max_length=255, verbose_name='Location')),
                ('notes', models.TextField(blank=True, default='', verbose_name='Notes')),
                ('focus_areas', models.JSONField(blank=True, default=list, verbose_name='Focus Areas')),
                ('is_override', models.BooleanField(default=False, verbose_name='Is Override')),
                ('is_cancelled', models.BooleanField(default=False, verbose_name='Is Cancelled')),
                ('cancellation_reason', models.CharField(blank=True, default='', max_length=255, verbose_name='Cancellation Reason')),
                ('cancelled_at', models.DateTimeField(blank=True, null=True, verbose_name='Cancelled At')),
                ('recurrence', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='sessions', to='training.recurrencepattern', verbose_name='Recurrence Pattern')),
                ('team', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='training_sessions', to='club.team', verbose_name='Team')),
            ],
            options={
                'verbose_name': 'Training Session',
                'verbose_name_plural': 'Training Sessions',
                'db_table': 'training_sessions',
                'ordering': ['session_date', 'start_time'],
                'indexes': [models.Index(fields=['team', 'session_date'], name='training_team_date_idx')],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('recurrence__isnull', False)), fields=('team', 'recurrence', 'session_date'), name='unique_pattern_instance_per_date'),
                    models.CheckConstraint(condition=models.Q(('is_override', False), ('recurrence__isnull', False), _connector='OR'), name='override_requires_recurrence'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Attendance',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('status', models.CharField(choices=[('present', 'Present'), ('absent', 'Absent'), ('late', 'Late'), ('excused', 'Excused'), ('injured', 'Injured')], max_length=20, verbose_name='Status')),
                ('arrival_time', models.TimeField(blank=True, null=True, verbose_name='Arrival Time')),
                ('notes', models.TextField(blank=True, default='', verbose_name='Notes')),
                ('player', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='attendance_records', to='club.player', verbose_name='Player')),
                ('session', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='attendance_records', to='training.trainingsession', verbose_name='Training Session')),
            ],
            options={
                'verbose_name': 'Attendance',
                'verbose_name_plural': 'Attendance',
                'db_table': 'attendance',
                'ordering': ['-session__session_date', 'player__last_name'],
                'unique_together': {('session', 'player')},
            },
        ),
    ]
