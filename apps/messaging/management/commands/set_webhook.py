import dataclasses

from django.apps import apps
from django.core.management.base import BaseCommand, CommandError

from apps.messaging.exceptions import MessengerError
from apps.messaging.providers import build_messenger
from apps.messaging.providers.telegram.telegram_validator import TelegramConfigValidator


class Command(BaseCommand):
    help = 'Registers (or removes) the Telegram webhook pointing at this deployment'

    def add_arguments(self, parser):
        parser.add_argument('url', nargs='?', help='Public HTTPS URL of the /webhook/ endpoint')
        parser.add_argument('--delete', action='store_true', help='Remove the webhook instead of setting it')
        parser.add_argument('--drop-pending', action='store_true', help='Discard updates queued on Telegram')

    def handle(self, *args, **options):
        config = apps.get_app_config('bot').bot_config

        validator = TelegramConfigValidator(dataclasses.asdict(config))
        if not validator.validate():
            self.stdout.write(validator.get_validation_report())
            raise CommandError('TELEGRAM_BOT_TOKEN and TELEGRAM_BOT_USERNAME must be set to valid values.')

        messenger = build_messenger(config, skip_validation=True)
        try:
            if options['delete']:
                messenger.delete_webhook(drop_pending_updates=options['drop_pending'])
                self.stdout.write(self.style.SUCCESS('Webhook removed.'))
                return

            if not options['url']:
                raise CommandError('A webhook URL is required unless --delete is given.')
            if not options['url'].startswith('https://'):
                self.stdout.write(self.style.WARNING('Telegram only delivers webhooks to HTTPS URLs.'))

            messenger.set_webhook(
                options['url'],
                secret_token=config.webhook_secret or None,
                drop_pending_updates=options['drop_pending'],
            )
        except MessengerError as e:
            raise CommandError(f'Telegram rejected the request: {e}') from e

        self.stdout.write(self.style.SUCCESS(f"Webhook set to {options['url']}."))
