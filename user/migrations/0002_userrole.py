import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('club', '0001_initial'),
        ('user', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='UserRole',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('role', models.CharField(choices=[('parent', 'Parent'), ('coach', 'Coach'), ('club_admin', 'Club Admin'), ('super_admin', 'Super Admin')], max_length=50, verbose_name='Role')),
                ('club', models.ForeignKey(blank=True, help_text='Organization the role applies to. Empty only for super admins.', null=True, on_delete=django.db.models.deletion.CASCADE, related_name='role_grants', to='club.club', verbose_name='Club')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='role_grants', to=settings.AUTH_USER_MODEL, verbose_name='User')),
            ],
            options={
                'verbose_name': 'User Role',
                'verbose_name_plural': 'User Roles',
                'db_table': 'user_roles',
                'ordering': ['-created_at'],
                'unique_together': {('user', 'role', 'club')},
            },
        ),
    ]
