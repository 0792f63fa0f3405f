"""Louva admin.

Ledger rows (transactions, points history, redemptions) are read-only;
balances change only through the services.
"""

from django.contrib import admin
from django.urls import reverse
from django.utils.html import format_html

from louva.models import (
    Customer,
    MembershipLevel,
    MembershipRule,
    Mission,
    PaymentMethod,
    PointsHistoryEntry,
    Reward,
    RewardRedemption,
    Service,
    Transaction,
    TransactionLine,
    UserMission,
)

LEVEL_COLORS = {
    MembershipLevel.BRONZE: "#cd7f32",
    MembershipLevel.SILVER: "#c0c0c0",
    MembershipLevel.GOLD: "#ffd700",
}


def level_badge(level):
    color = LEVEL_COLORS.get(level, "#6c757d")
    text_color = "#000" if level in (MembershipLevel.SILVER, MembershipLevel.GOLD) else "#fff"
    return format_html(
        '<span style="background:{}; color:{}; padding:2px 8px; '
        'border-radius:3px; font-size:11px;">{}</span>',
        color,
        text_color,
        level,
    )


def signed_points(points):
    if points > 0:
        return format_html('<span style="color:green">+{}</span>', points)
    return format_html('<span style="color:red">{}</span>', points)


class ReadOnlyAdminMixin:
    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# ===========================================
# Inlines
# ===========================================


class PointsHistoryInline(ReadOnlyAdminMixin, admin.TabularInline):
    model = PointsHistoryEntry
    extra = 0
    fields = ["entry_type", "points_change", "balance_after", "description", "created_at"]
    readonly_fields = fields
    ordering = ["-created_at"]
    max_num = 20
    verbose_name_plural = "Points history (latest 20)"


class UserMissionInline(admin.TabularInline):
    model = UserMission
    extra = 0
    fields = ["mission", "status", "activated_at", "expires_at", "completed_at"]
    readonly_fields = ["activated_at", "completed_at"]


class TransactionLineInline(ReadOnlyAdminMixin, admin.TabularInline):
    model = TransactionLine
    extra = 0
    fields = ["service", "price", "points_earned"]
    readonly_fields = fields


# ===========================================
# Customer Admin
# ===========================================


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = [
        "full_name",
        "email",
        "phone",
        "membership_badge",
        "total_points",
        "lifetime_points",
        "total_visits",
        "is_active",
    ]
    list_filter = ["membership_level", "is_active"]
    search_fields = ["full_name", "email", "phone", "qr_code"]
    readonly_fields = [
        "id",
        "qr_code",
        "total_points",
        "lifetime_points",
        "membership_level",
        "total_visits",
        "total_spent",
        "created_at",
        "updated_at",
    ]
    inlines = [UserMissionInline, PointsHistoryInline]

    fieldsets = [
        ("Identification", {"fields": ["id", "full_name", "qr_code"]}),
        ("Contact", {"fields": ["email", "phone"]}),
        (
            "Loyalty",
            {
                "fields": [
                    "membership_level",
                    "total_points",
                    "lifetime_points",
                    "total_visits",
                    "total_spent",
                ]
            },
        ),
        ("Status", {"fields": ["is_active"]}),
        ("Metadata", {"fields": ["created_at", "updated_at"], "classes": ["collapse"]}),
    ]

    def membership_badge(self, obj):
        return level_badge(obj.membership_level)

    membership_badge.short_description = "Membership"


# ===========================================
# Catalog Admin
# ===========================================


@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    list_display = ["name", "category", "price_label", "point_multiplier", "is_active"]
    list_filter = ["category", "is_active"]
    search_fields = ["name", "description"]
    list_editable = ["is_active"]


@admin.register(PaymentMethod)
class PaymentMethodAdmin(admin.ModelAdmin):
    list_display = ["name", "type", "bank", "is_active"]
    list_filter = ["type", "is_active"]
    list_editable = ["is_active"]


@admin.register(Reward)
class RewardAdmin(admin.ModelAdmin):
    list_display = ["name", "points_required", "redemption_count", "is_active"]
    list_filter = ["is_active"]
    search_fields = ["name"]

    def redemption_count(self, obj):
        return obj.redemptions.count()

    redemption_count.short_description = "Redemptions"


@admin.register(Mission)
class MissionAdmin(admin.ModelAdmin):
    list_display = ["title", "service", "bonus_points", "duration_days", "is_active"]
    list_filter = ["is_active"]
    search_fields = ["title"]
    raw_id_fields = ["service"]


@admin.register(MembershipRule)
class MembershipRuleAdmin(admin.ModelAdmin):
    list_display = ["level_display", "min_points", "max_points", "multiplier", "updated_at"]
    ordering = ["min_points"]

    def level_display(self, obj):
        return level_badge(obj.level)

    level_display.short_description = "Level"


# ===========================================
# Ledger Admin (read-only)
# ===========================================


@admin.register(Transaction)
class TransactionAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = [
        "created_at",
        "customer_link",
        "total_amount",
        "points_earned",
        "mission_bonus_points",
        "payment_method",
        "staff",
    ]
    list_filter = ["payment_method", "status"]
    search_fields = ["customer__full_name", "customer__email", "notes"]
    date_hierarchy = "created_at"
    inlines = [TransactionLineInline]

    def customer_link(self, obj):
        url = reverse("admin:louva_customer_change", args=[obj.customer.pk])
        return format_html('<a href="{}">{}</a>', url, obj.customer.full_name)

    customer_link.short_description = "Customer"


@admin.register(PointsHistoryEntry)
class PointsHistoryEntryAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = [
        "created_at",
        "customer_name",
        "entry_type",
        "points_display",
        "balance_after",
        "description",
    ]
    list_filter = ["entry_type"]
    search_fields = ["customer__full_name", "description"]
    date_hierarchy = "created_at"

    def customer_name(self, obj):
        return obj.customer.full_name

    customer_name.short_description = "Customer"

    def points_display(self, obj):
        return signed_points(obj.points_change)

    points_display.short_description = "Points"


@admin.register(RewardRedemption)
class RewardRedemptionAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = [
        "voucher_code",
        "customer",
        "reward",
        "points_used",
        "status_display",
        "redeemed_at",
        "expiry_date",
    ]
    list_filter = ["status"]
    search_fields = ["voucher_code", "customer__full_name"]
    date_hierarchy = "redeemed_at"

    def status_display(self, obj):
        return obj.effective_status

    status_display.short_description = "Status"
