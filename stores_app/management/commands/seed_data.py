from django.core.management.base import BaseCommand
from django.db import transaction

from stores_app.models import Store
from user_auth_app.models import User

ADMIN_ACCOUNT = {
    'email': 'admin@storerating.com',
    'password': 'AdminPass123!',
    'name': 'System Administrator User',
    'address': '123 Admin Street, Admin City, AC 12345',
}

SAMPLE_STORES = [
    {
        'name': 'Tech Electronics Store',
        'email': 'contact@techelectronics.com',
        'address': '456 Technology Avenue, Tech City, TC 67890',
    },
    {
        'name': 'Fashion Boutique Central',
        'email': 'info@fashionboutique.com',
        'address': '789 Fashion Street, Style City, SC 11111',
    },
    {
        'name': 'Green Grocery Market',
        'email': 'hello@greengrocery.com',
        'address': '321 Fresh Food Lane, Garden City, GC 22222',
    },
    {
        'name': 'Book Haven Library Store',
        'email': 'books@bookhaven.com',
        'address': '654 Reading Road, Knowledge City, KC 33333',
    },
    {
        'name': 'Sports Equipment Pro',
        'email': 'info@sportsequipmentpro.com',
        'address': '987 Athletic Avenue, Sports City, SP 44444',
    },
]


class Command(BaseCommand):
    """
    Creates the initial administrator and a handful of sample stores.

    Running it again is safe: existing records, matched by email, are left untouched.
    """
    help = 'Creates the default administrator account and sample stores.'

    def add_arguments(self, parser):
        parser.add_argument(
            '--no-stores',
            action='store_true',
            help='Only create the administrator account.',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if User.objects.filter(email=ADMIN_ACCOUNT['email']).exists():
            self.stdout.write(f"Admin user already exists: {ADMIN_ACCOUNT['email']}")
        else:
            User.objects.create_superuser(**ADMIN_ACCOUNT)
            self.stdout.write(self.style.SUCCESS(f"Created admin user {ADMIN_ACCOUNT['email']}"))

        if options['no_stores']:
            return

        for store_data in SAMPLE_STORES:
            store, created = Store.objects.get_or_create(
                email=store_data['email'],
                defaults={'name': store_data['name'], 'address': store_data['address']}
            )
            if created:
                self.stdout.write(self.style.SUCCESS(f'Added store: {store.name}'))
            else:
                self.stdout.write(f'Store already exists: {store.name}')
