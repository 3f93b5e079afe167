"""
Run the digital menu synchronizer in the foreground.
"""
import time

from django.core.management.base import BaseCommand

from digital_menu.services import digital_menu_sync


class Command(BaseCommand):
    help = "Poll the digital menu and reconcile its orders with the POS"

    def add_arguments(self, parser):
        parser.add_argument(
            "--once",
            action="store_true",
            help="Run a single reconciliation tick and exit",
        )
        parser.add_argument(
            "--interval-ms",
            type=int,
            default=None,
            help="Polling interval in milliseconds (default: DIGITAL_MENU_SYNC_INTERVAL_MS)",
        )

    def handle(self, *args, **options):
        if options["once"]:
            changed = digital_menu_sync.sync_orders()
            self.stdout.write(self.style.SUCCESS(f"Digital menu sync: {changed} order(s) changed"))
            return

        digital_menu_sync.start(options["interval_ms"])
        self.stdout.write(
            self.style.SUCCESS(
                f"Digital menu sync running every {digital_menu_sync.interval_ms} ms. Ctrl+C to stop."
            )
        )
        try:
            while digital_menu_sync.is_running:
                time.sleep(0.5)
        except KeyboardInterrupt:
            pass
        finally:
            digital_menu_sync.stop()
        self.stdout.write("Digital menu sync stopped")
