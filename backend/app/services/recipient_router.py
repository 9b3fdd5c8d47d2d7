"""
Maps purchased SKUs to the addresses that must be notified about them.

The SKU set is fixed; the addresses behind each SKU come from configuration.
A SKU with no configured address is left out of the table entirely, so every
entry present has at least one recipient.
"""

from app.config import Settings
from app.errors import UnroutableError

RoutingTable = dict[str, tuple[str, ...]]

# Residential Property Appraisal In Edmonton
IN_EDMONTON_SKU = "SQ5929745"
# Residential Property Appraisal Outside Edmonton
OUTSIDE_EDMONTON_SKU = "SQ8618609"


def _ordered_unique(addresses: list[str]) -> tuple[str, ...]:
    seen: set = set()
    unique: list[str] = []
    for address in addresses:
        if address and address not in seen:
            seen.add(address)
            unique.append(address)
    return tuple(unique)


def build_routing_table(settings: Settings) -> RoutingTable:
    """Build the SKU → recipients table from settings."""
    configured = {
        IN_EDMONTON_SKU: settings.in_edmonton_recipients,
        OUTSIDE_EDMONTON_SKU: settings.outside_edmonton_recipients,
    }
    table: RoutingTable = {}
    for sku, addresses in configured.items():
        recipients = _ordered_unique(addresses)
        if recipients:
            table[sku] = recipients
    return table


def recipients_for(sku: str, table: RoutingTable) -> tuple[str, ...]:
    """
    Return the recipients configured for ``sku``.

    Raises:
        UnroutableError: the SKU has no entry in the table.
    """
    recipients = table.get(sku)
    if not recipients:
        raise UnroutableError(sku)
    return recipients
