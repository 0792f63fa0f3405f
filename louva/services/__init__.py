"""Louva services.

Each module exposes one classmethod-based service:
- louva.services.customers: CustomerService
- louva.services.points: PointsService
- louva.services.transactions: TransactionService
- louva.services.missions: MissionService
- louva.services.rewards: RewardService
- louva.services.scan: ScanService
- louva.services.catalog: CatalogService
- louva.services.membership: MembershipService
- louva.services.reports: ReportService
"""

from louva.services import customers
from louva.services import points

__all__ = ["customers", "points"]
