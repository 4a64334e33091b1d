"""External collaborators: inventory API client and notifiers."""
from .inventory import Inventory, InventoryClient
from .notifications import LogNotifier, Notifier, TelegramNotifier

__all__ = [
    "Inventory",
    "InventoryClient",
    "LogNotifier",
    "Notifier",
    "TelegramNotifier",
]
