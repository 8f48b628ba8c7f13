"""
records/management/commands/seed_store.py
─────────────────────────────────────────
Bootstrap an empty document store.

    python manage.py seed_store [--username admin] [--password ...]

• users collection empty   → one superadmin account
• classes collection empty → the sixteen default classes (PS … CM2, both tracks)

Collections that already hold documents are left untouched.
"""

from django.core.management.base import BaseCommand, CommandError

from accounts.session import hash_password
from records import repository
from records.errors import StoreError
from records.models import ClassType, Role

DEFAULT_CLASS_NAMES = ['PS', 'GS', 'CI', 'CP', 'CE1', 'CE2', 'CM1', 'CM2']


class Command(BaseCommand):
    help = 'Create the default superadmin and classes when the store is empty.'

    def add_arguments(self, parser):
        parser.add_argument('--username', default='admin')
        parser.add_argument('--password', default='superadmin123')

    def handle(self, *args, **options):
        try:
            if not repository.users.get_all():
                repository.users.add({
                    'username': options['username'],
                    'password': hash_password(options['password']),
                    'role':     Role.SUPERADMIN.value,
                })
                self.stdout.write(self.style.SUCCESS(
                    f'Created superadmin "{options["username"]}".'
                ))
            else:
                self.stdout.write('Users already present, skipping.')

            if not repository.classes.get_all():
                for class_type in (ClassType.FRENCH, ClassType.ARABIC):
                    for name in DEFAULT_CLASS_NAMES:
                        repository.classes.add({'name': name, 'type': class_type.value})
                self.stdout.write(self.style.SUCCESS(
                    f'Created {2 * len(DEFAULT_CLASS_NAMES)} default classes.'
                ))
            else:
                self.stdout.write('Classes already present, skipping.')
        except StoreError as exc:
            raise CommandError(str(exc)) from exc
