import django.core.validators
import django.db.models.deletion
import user_auth_app.models
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
        ('stores_app', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='User',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('name', models.CharField(help_text='Full name, 20 to 60 characters.', max_length=60, validators=[django.core.validators.MinLengthValidator(20), django.core.validators.MaxLengthValidator(60)])),
                ('email', models.EmailField(max_length=255, unique=True)),
                ('address', models.CharField(max_length=400)),
                ('role', models.CharField(choices=[('admin', 'Administrator'), ('user', 'User'), ('store_owner', 'Store owner')], db_index=True, default='user', max_length=20)),
                ('is_active', models.BooleanField(default=True)),
                ('is_staff', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('store', models.OneToOneField(blank=True, help_text='The store this user owns. Only set for store owners.', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='owner', to='stores_app.store')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'verbose_name': 'User',
                'verbose_name_plural': 'Users',
                'db_table': 'users',
                'ordering': ['-created_at'],
            },
            managers=[
                ('objects', user_auth_app.models.UserManager()),
            ],
        ),
    ]
