"""
Louva - Salon loyalty program.

Usage:
    from louva import TransactionService, RewardService, ScanService
    from louva.exceptions import LouvaError

    result = TransactionService.record(request, principal)
    redemption = RewardService.redeem(customer_id, reward_id)
    scan = ScanService.verify(qr_string)
"""

_LAZY = {
    "CustomerService": "louva.services.customers",
    "PointsService": "louva.services.points",
    "TransactionService": "louva.services.transactions",
    "RewardService": "louva.services.rewards",
    "MissionService": "louva.services.missions",
    "ScanService": "louva.services.scan",
    "MembershipService": "louva.services.membership",
    "CatalogService": "louva.services.catalog",
    "ReportService": "louva.services.reports",
    "LouvaError": "louva.exceptions",
}


def __getattr__(name):
    if name in _LAZY:
        from importlib import import_module

        return getattr(import_module(_LAZY[name]), name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = list(_LAZY)
__version__ = "0.1.0"
