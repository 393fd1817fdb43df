"""
Reconcile stale pending orders with their payment gateway.

Asks the gateway how each open transaction ended and applies the answer,
so an order whose webhook was lost does not stay pending forever.

Usage:
    python manage.py reconcile_payments
    python manage.py reconcile_payments --older-than 30 --limit 50
    python manage.py reconcile_payments --dry-run
"""

import logging
from datetime import timedelta
from typing import Any

from django.core.management.base import BaseCommand

from dinein.web.payments.exceptions import GatewayUnavailable
from dinein.web.payments.gateways import PaymentOutcome
from dinein.web.payments.models import CallbackSource
from dinein.web.payments.services import stale_pending_orders, verify_and_settle

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Ask the payment gateway about stale pending orders and settle them"

    def add_arguments(self, parser: Any) -> None:
        parser.add_argument(
            "--older-than",
            type=int,
            default=15,
            help="Only orders untouched for this many minutes (default: 15)",
        )
        parser.add_argument(
            "--limit",
            type=int,
            default=100,
            help="Maximum orders to check in one run (default: 100)",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="List the orders that would be checked and exit",
        )

    def handle(self, *_args: Any, **options: Any) -> None:
        older_than = timedelta(minutes=options["older_than"])
        orders = list(stale_pending_orders(older_than)[: options["limit"]])

        if not orders:
            self.stdout.write("No stale pending orders")
            return

        if options["dry_run"]:
            for order in orders:
                self.stdout.write(
                    f"  {order.pk} table {order.table_number} "
                    f"{order.payment_gateway}:{order.payment_reference}"
                )
            self.stdout.write(f"{len(orders)} orders would be checked")
            return

        settled = 0
        errors = 0
        for order in orders:
            try:
                outcome = verify_and_settle(order, source=CallbackSource.RECONCILE)
            except GatewayUnavailable as e:
                errors += 1
                logger.warning(
                    "Could not reconcile order %s: %s", order.pk, e.message
                )
                continue

            if outcome != PaymentOutcome.PENDING:
                settled += 1
            self.stdout.write(f"  {order.pk}: {outcome}")

        self.stdout.write(
            f"Checked {len(orders)} orders, {settled} settled, {errors} errors"
        )
