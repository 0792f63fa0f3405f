"""
Louva signals - public event API.

Emitted signals:
- customer_created: Emitted by CustomerService.create()
- points_earned: Emitted by TransactionService.record()
- reward_redeemed: Emitted by RewardService.redeem()
- mission_completed: Emitted when a transaction or staff completes a mission
"""

from django.dispatch import Signal

customer_created = Signal()  # sender=Customer, customer=Customer
points_earned = Signal()  # sender=Transaction, transaction, customer, points
reward_redeemed = Signal()  # sender=RewardRedemption, redemption, customer
mission_completed = Signal()  # sender=UserMission, user_mission, transaction (None if staff-completed)
