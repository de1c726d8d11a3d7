import logging
from django.core.management.base import BaseCommand, CommandError

from allowlist_api.address import InvalidAddress
from allowlist_api.simulation.allowlist import populate_allowlist
from allowlist.loader import add_records, upsert_records, delete_records, clear_records, read_address_file
from allowlist.models import AllowlistRecord
from allowlist.resolver import check_address
from allowlist.roles import RoleCatalog, UnknownRole
from allowlist.store import get_record_store


logging.basicConfig(level=logging.INFO)


class Command(BaseCommand):
    help = 'Manage allowlisted wallets'

    def add_arguments(self, parser):
        actions = parser.add_subparsers(dest='action', required=True)

        for name, help_text in (('add', 'Add wallets, existing addresses are skipped'),
                                ('replace', 'Add wallets or replace their role')):
            subparser = actions.add_parser(name, help=help_text)
            subparser.add_argument('addresses', nargs='*')
            subparser.add_argument('--file', dest='file_path',
                                   help='Newline-delimited address file')
            subparser.add_argument('--role', required=True)
            subparser.add_argument('--allow-unknown-role', action='store_true',
                                   help='Accept a role missing from the configured catalog')

        delete = actions.add_parser('delete', help='Delete wallets')
        delete.add_argument('addresses', nargs='*')
        delete.add_argument('--file', dest='file_path',
                            help='Newline-delimited address file')

        clear = actions.add_parser('clear', help='Delete every allowlisted wallet')
        clear.add_argument('--noinput', '--no-input', action='store_false', dest='interactive',
                           help='Do not prompt for confirmation')

        seed = actions.add_parser('seed', help='Replace the allowlist with random sample wallets')
        seed.add_argument('--count', type=int, default=3,
                          help='Sample wallets per role')
        seed.add_argument('--role', action='append', dest='roles',
                          help='Seed this role only, may be repeated')
        seed.add_argument('--noinput', '--no-input', action='store_false', dest='interactive',
                          help='Do not prompt before clearing existing wallets')

        check = actions.add_parser('check', help='Look up a single wallet')
        check.add_argument('address')

        actions.add_parser('roles', help='List the configured roles')

    def handle(self, *args, **options):
        action = options['action']
        try:
            getattr(self, 'handle_{}'.format(action))(options)
        except (UnknownRole, InvalidAddress) as e:
            raise CommandError(e)

    def collect_addresses(self, options):
        addresses = list(options.get('addresses') or [])
        file_path = options.get('file_path')
        if file_path:
            try:
                from_file = read_address_file(file_path)
            except OSError as e:
                raise CommandError('Could not read {}: {}'.format(file_path, e))
            self.stdout.write('Read {} addresses from {}.'.format(len(from_file), file_path))
            addresses += from_file
        if not addresses:
            raise CommandError('No wallet addresses given.')
        return addresses

    def handle_add(self, options):
        report = add_records(
            self.collect_addresses(options),
            options['role'],
            allow_unknown_role=options['allow_unknown_role'])
        self.stdout.write(report.summary())

    def handle_replace(self, options):
        report = upsert_records(
            self.collect_addresses(options),
            options['role'],
            allow_unknown_role=options['allow_unknown_role'])
        self.stdout.write(report.summary())

    def handle_delete(self, options):
        report = delete_records(self.collect_addresses(options))
        self.stdout.write(report.summary())

    def confirm(self, options, question):
        if not options['interactive']:
            return True
        if input('{} (y/n): '.format(question)).lower() == 'y':
            return True
        self.stdout.write('Operation cancelled.')
        return False

    def handle_clear(self, options):
        if self.confirm(options, 'Do you want to clear every allowlisted wallet?'):
            self.stdout.write('Cleared {} wallets.'.format(clear_records()))

    def handle_seed(self, options):
        if options['count'] < 1:
            raise CommandError('--count must be at least 1.')

        catalog = RoleCatalog.from_settings()
        roles = [catalog.require(role) for role in options['roles'] or catalog.roles()]

        existing = AllowlistRecord.objects.count()
        if existing:
            self.stdout.write('Found {} existing wallets.'.format(existing))
            if not self.confirm(options, 'Do you want to clear existing data and insert sample data?'):
                return
            self.stdout.write('Cleared {} wallets.'.format(clear_records()))

        inserted = 0
        for role in roles:
            for record in populate_allowlist(options['count'], role):
                self.stdout.write('{} {}'.format(record.address, record.role))
                inserted += 1
        self.stdout.write('Inserted {} sample wallets.'.format(inserted))

    def handle_check(self, options):
        outcome = check_address(options['address'], get_record_store())
        if outcome.failed:
            raise CommandError(outcome.message)
        if outcome.whitelisted:
            self.stdout.write('{}: {}'.format(outcome.role, outcome.message))
        else:
            self.stdout.write(outcome.message)

    def handle_roles(self, options):
        catalog = RoleCatalog.from_settings()
        for role in catalog.roles():
            self.stdout.write('{} ({}): {}'.format(
                role, catalog.label(role), catalog.role_message(role)))
