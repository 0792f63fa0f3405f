"""Louva models."""

from louva.models.customer import Customer, MembershipLevel
from louva.models.service import Service, ServiceCategory
from louva.models.payment_method import PaymentMethod, PaymentType
from louva.models.transaction import Transaction, TransactionLine, TransactionStatus
from louva.models.points_history import PointsHistoryEntry, EntryType
from louva.models.reward import Reward, RewardRedemption, RedemptionStatus
from louva.models.mission import Mission, UserMission, UserMissionStatus
from louva.models.membership_rule import MembershipRule

__all__ = [
    # Members
    "Customer",
    "MembershipLevel",
    "MembershipRule",
    # Catalog
    "Service",
    "ServiceCategory",
    "PaymentMethod",
    "PaymentType",
    "Reward",
    "Mission",
    # Ledger
    "Transaction",
    "TransactionLine",
    "TransactionStatus",
    "PointsHistoryEntry",
    "EntryType",
    "RewardRedemption",
    "RedemptionStatus",
    "UserMission",
    "UserMissionStatus",
]
