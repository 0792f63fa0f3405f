from django.urls import path

from . import views

app_name = "louva"

urlpatterns = [
    path("profile/", views.ProfileView.as_view(), name="profile"),
    path("profile/qr/", views.ProfileQRView.as_view(), name="profile-qr"),
    path("points/", views.PointsView.as_view(), name="points"),
    path("services/", views.ServicesView.as_view(), name="services"),
    path("rewards/", views.RewardsView.as_view(), name="rewards"),
    path("rewards/history/", views.RewardHistoryView.as_view(), name="rewards-history"),
    path("transactions/", views.TransactionsView.as_view(), name="transactions"),
    path("missions/", views.MissionsView.as_view(), name="missions"),
    path("scan/verify/", views.ScanVerifyView.as_view(), name="scan-verify"),
    path(
        "scan/customer-rewards/",
        views.ScanCustomerRewardsView.as_view(),
        name="scan-customer-rewards",
    ),
    path("vouchers/use/", views.VoucherUseView.as_view(), name="voucher-use"),
    path("admin/customers/", views.AdminCustomersView.as_view(), name="admin-customers"),
    path("admin/dashboard/", views.AdminDashboardView.as_view(), name="admin-dashboard"),
    path("admin/membership/", views.AdminMembershipView.as_view(), name="admin-membership"),
    path(
        "admin/reports/top-services/",
        views.AdminTopServicesView.as_view(),
        name="admin-top-services",
    ),
    path("admin/services/", views.AdminServicesView.as_view(), name="admin-services"),
    path(
        "admin/payment-methods/",
        views.AdminPaymentMethodsView.as_view(),
        name="admin-payment-methods",
    ),
]
