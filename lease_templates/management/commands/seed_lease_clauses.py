"""
Install the default residential lease clause set

Does nothing when the library already holds clauses, or when
LEASE_TEMPLATES['SEED_DEFAULT_CLAUSES'] is False (unless --force is given).
"""
from django.core.management.base import BaseCommand

from lease_templates.clause_library import ClauseLibraryService
from lease_templates.conf import get_setting, get_store


class Command(BaseCommand):
    help = 'Seed the lease clause library with the default residential clauses'

    def add_arguments(self, parser):
        parser.add_argument(
            '--force',
            action='store_true',
            help='Seed even when SEED_DEFAULT_CLAUSES is disabled',
        )

    def handle(self, *args, **options):
        if not options['force'] and not get_setting('SEED_DEFAULT_CLAUSES'):
            self.stdout.write('Default clause seeding is disabled, skipping.')
            return

        service = ClauseLibraryService(get_store())
        created = service.seed_default_clauses()

        if created:
            self.stdout.write(self.style.SUCCESS(f'Created {created} lease clauses'))
        else:
            self.stdout.write('Clause library already populated, nothing to do.')
