# Initial loyalty schema

import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Customer",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("full_name", models.CharField(max_length=150, verbose_name="full name")),
                (
                    "email",
                    models.EmailField(
                        blank=True, db_index=True, max_length=254, verbose_name="email"
                    ),
                ),
                (
                    "phone",
                    models.CharField(
                        blank=True, db_index=True, max_length=20, verbose_name="phone"
                    ),
                ),
                (
                    "qr_code",
                    models.CharField(
                        blank=True,
                        max_length=120,
                        null=True,
                        unique=True,
                        verbose_name="static QR code",
                    ),
                ),
                (
                    "total_points",
                    models.PositiveIntegerField(
                        default=0,
                        help_text="Points available for redemption",
                        verbose_name="points balance",
                    ),
                ),
                (
                    "lifetime_points",
                    models.PositiveIntegerField(
                        default=0,
                        help_text="Total points ever earned (never decreases)",
                        verbose_name="lifetime points",
                    ),
                ),
                (
                    "membership_level",
                    models.CharField(
                        choices=[("Bronze", "Bronze"), ("Silver", "Silver"), ("Gold", "Gold")],
                        db_index=True,
                        default="Bronze",
                        max_length=10,
                        verbose_name="membership level",
                    ),
                ),
                ("total_visits", models.PositiveIntegerField(default=0, verbose_name="total visits")),
                (
                    "total_spent",
                    models.PositiveBigIntegerField(
                        default=0, help_text="Rupiah", verbose_name="total spent"
                    ),
                ),
                ("is_active", models.BooleanField(db_index=True, default=True, verbose_name="active")),
                (
                    "created_at",
                    models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at"),
                ),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
            ],
            options={
                "verbose_name": "customer",
                "verbose_name_plural": "customers",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="Service",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100, verbose_name="name")),
                (
                    "category",
                    models.CharField(
                        choices=[
                            ("Hair", "Hair"),
                            ("Treatment", "Treatment"),
                            ("Nail Care", "Nail Care"),
                        ],
                        default="Hair",
                        max_length=20,
                        verbose_name="category",
                    ),
                ),
                ("description", models.TextField(blank=True, verbose_name="description")),
                ("min_price", models.PositiveIntegerField(help_text="Rupiah", verbose_name="price")),
                (
                    "max_price",
                    models.PositiveIntegerField(
                        blank=True,
                        help_text="Upper bound for variable-price services",
                        null=True,
                        verbose_name="maximum price",
                    ),
                ),
                (
                    "point_multiplier",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("1.00"),
                        max_digits=5,
                        validators=[django.core.validators.MinValueValidator(Decimal("1.00"))],
                        verbose_name="point multiplier",
                    ),
                ),
                ("is_active", models.BooleanField(default=True, verbose_name="active")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
            ],
            options={
                "verbose_name": "service",
                "verbose_name_plural": "services",
                "ordering": ["category", "name"],
            },
        ),
        migrations.CreateModel(
            name="PaymentMethod",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=60, verbose_name="name")),
                (
                    "type",
                    models.CharField(
                        choices=[
                            ("cash", "Cash"),
                            ("card", "Debit/Credit card"),
                            ("ewallet", "E-wallet"),
                            ("transfer", "Bank transfer"),
                            ("voucher", "Voucher"),
                        ],
                        default="cash",
                        max_length=20,
                        verbose_name="type",
                    ),
                ),
                ("bank", models.CharField(blank=True, max_length=60, verbose_name="bank")),
                ("is_active", models.BooleanField(default=True, verbose_name="active")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
            ],
            options={
                "verbose_name": "payment method",
                "verbose_name_plural": "payment methods",
                "ordering": ["type", "name"],
            },
        ),
        migrations.CreateModel(
            name="Reward",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100, verbose_name="name")),
                ("description", models.TextField(blank=True, verbose_name="description")),
                ("points_required", models.PositiveIntegerField(verbose_name="points required")),
                ("is_active", models.BooleanField(default=True, verbose_name="active")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
            ],
            options={
                "verbose_name": "reward",
                "verbose_name_plural": "rewards",
                "ordering": ["points_required", "name"],
            },
        ),
        migrations.CreateModel(
            name="MembershipRule",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "level",
                    models.CharField(
                        choices=[("Bronze", "Bronze"), ("Silver", "Silver"), ("Gold", "Gold")],
                        max_length=10,
                        unique=True,
                        verbose_name="level",
                    ),
                ),
                ("min_points", models.PositiveIntegerField(verbose_name="minimum lifetime points")),
                (
                    "max_points",
                    models.PositiveIntegerField(
                        blank=True,
                        help_text="Empty for the top tier",
                        null=True,
                        verbose_name="maximum lifetime points",
                    ),
                ),
                (
                    "multiplier",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("1.00"),
                        max_digits=4,
                        verbose_name="points multiplier",
                    ),
                ),
                ("color", models.CharField(default="#4A8BC2", max_length=7, verbose_name="color")),
                ("benefits", models.JSONField(blank=True, default=list, verbose_name="benefits")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
            ],
            options={
                "verbose_name": "membership rule",
                "verbose_name_plural": "membership rules",
                "ordering": ["min_points"],
            },
        ),
        migrations.CreateModel(
            name="Mission",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=120, verbose_name="title")),
                ("description", models.TextField(blank=True, verbose_name="description")),
                ("bonus_points", models.PositiveIntegerField(verbose_name="bonus points")),
                (
                    "duration_days",
                    models.PositiveIntegerField(
                        blank=True,
                        help_text="Activation window; empty means no expiry",
                        null=True,
                        verbose_name="duration (days)",
                    ),
                ),
                ("is_active", models.BooleanField(default=True, verbose_name="active")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                (
                    "service",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="missions",
                        to="louva.service",
                        verbose_name="required service",
                    ),
                ),
            ],
            options={
                "verbose_name": "mission",
                "verbose_name_plural": "missions",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="Transaction",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("staff", models.CharField(blank=True, max_length=100, verbose_name="staff")),
                ("total_amount", models.PositiveBigIntegerField(default=0, verbose_name="total amount")),
                ("points_earned", models.PositiveIntegerField(default=0, verbose_name="points earned")),
                ("mission_bonus_points", models.PositiveIntegerField(default=0, verbose_name="mission bonus")),
                ("notes", models.TextField(blank=True, verbose_name="notes")),
                (
                    "status",
                    models.CharField(
                        choices=[("completed", "Completed")],
                        default="completed",
                        max_length=20,
                        verbose_name="status",
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at"),
                ),
                (
                    "customer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="transactions",
                        to="louva.customer",
                        verbose_name="customer",
                    ),
                ),
                (
                    "payment_method",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="transactions",
                        to="louva.paymentmethod",
                        verbose_name="payment method",
                    ),
                ),
            ],
            options={
                "verbose_name": "transaction",
                "verbose_name_plural": "transactions",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="TransactionLine",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("price", models.PositiveIntegerField(verbose_name="price")),
                (
                    "points_earned",
                    models.PositiveIntegerField(
                        help_text="Base points before the membership multiplier",
                        verbose_name="points earned",
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at"),
                ),
                (
                    "service",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="transaction_lines",
                        to="louva.service",
                        verbose_name="service",
                    ),
                ),
                (
                    "transaction",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="lines",
                        to="louva.transaction",
                        verbose_name="transaction",
                    ),
                ),
            ],
            options={
                "verbose_name": "transaction line",
                "verbose_name_plural": "transaction lines",
                "ordering": ["pk"],
            },
        ),
        migrations.CreateModel(
            name="RewardRedemption",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("points_used", models.PositiveIntegerField(verbose_name="points used")),
                ("voucher_code", models.CharField(max_length=32, unique=True, verbose_name="voucher code")),
                (
                    "status",
                    models.CharField(
                        choices=[("active", "Active"), ("used", "Used"), ("expired", "Expired")],
                        db_index=True,
                        default="active",
                        max_length=10,
                        verbose_name="status",
                    ),
                ),
                (
                    "redeemed_at",
                    models.DateTimeField(default=django.utils.timezone.now, verbose_name="redeemed at"),
                ),
                ("expiry_date", models.DateTimeField(verbose_name="expires at")),
                ("used_at", models.DateTimeField(blank=True, null=True, verbose_name="used at")),
                ("used_by", models.CharField(blank=True, max_length=100, verbose_name="used by")),
                (
                    "customer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="redemptions",
                        to="louva.customer",
                        verbose_name="customer",
                    ),
                ),
                (
                    "reward",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="redemptions",
                        to="louva.reward",
                        verbose_name="reward",
                    ),
                ),
            ],
            options={
                "verbose_name": "reward redemption",
                "verbose_name_plural": "reward redemptions",
                "ordering": ["-redeemed_at"],
            },
        ),
        migrations.CreateModel(
            name="UserMission",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("available", "Available"),
                            ("active", "Active"),
                            ("completed", "Completed"),
                            ("expired", "Expired"),
                        ],
                        db_index=True,
                        default="active",
                        max_length=10,
                        verbose_name="status",
                    ),
                ),
                (
                    "activated_at",
                    models.DateTimeField(default=django.utils.timezone.now, verbose_name="activated at"),
                ),
                ("completed_at", models.DateTimeField(blank=True, null=True, verbose_name="completed at")),
                ("expires_at", models.DateTimeField(blank=True, null=True, verbose_name="expires at")),
                (
                    "customer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="user_missions",
                        to="louva.customer",
                        verbose_name="customer",
                    ),
                ),
                (
                    "mission",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="user_missions",
                        to="louva.mission",
                        verbose_name="mission",
                    ),
                ),
                (
                    "transaction",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="completed_missions",
                        to="louva.transaction",
                        verbose_name="completed by",
                    ),
                ),
            ],
            options={
                "verbose_name": "customer mission",
                "verbose_name_plural": "customer missions",
                "ordering": ["-activated_at"],
            },
        ),
        migrations.CreateModel(
            name="PointsHistoryEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "entry_type",
                    models.CharField(
                        choices=[
                            ("earn", "Earn"),
                            ("redeem", "Redeem"),
                            ("adjust", "Adjustment"),
                            ("expire", "Expiration"),
                        ],
                        max_length=20,
                        verbose_name="type",
                    ),
                ),
                (
                    "points_change",
                    models.IntegerField(
                        help_text="Positive for earnings, negative for redemptions",
                        verbose_name="points change",
                    ),
                ),
                ("balance_after", models.IntegerField(verbose_name="balance after")),
                ("description", models.CharField(max_length=255, verbose_name="description")),
                ("created_by", models.CharField(blank=True, max_length=100, verbose_name="created by")),
                (
                    "created_at",
                    models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at"),
                ),
                (
                    "customer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="points_history",
                        to="louva.customer",
                        verbose_name="customer",
                    ),
                ),
                (
                    "redemption",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="history_entries",
                        to="louva.rewardredemption",
                    ),
                ),
                (
                    "transaction",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="history_entries",
                        to="louva.transaction",
                    ),
                ),
            ],
            options={
                "verbose_name": "points history entry",
                "verbose_name_plural": "points history",
                "ordering": ["-created_at", "-pk"],
            },
        ),
        migrations.AddIndex(
            model_name="transaction",
            index=models.Index(fields=["customer", "-created_at"], name="louva_txn_cust_created_idx"),
        ),
        migrations.AddIndex(
            model_name="rewardredemption",
            index=models.Index(fields=["customer", "status"], name="louva_redeem_cust_status_idx"),
        ),
        migrations.AddIndex(
            model_name="pointshistoryentry",
            index=models.Index(fields=["customer", "-created_at"], name="louva_hist_cust_created_idx"),
        ),
        migrations.AddConstraint(
            model_name="usermission",
            constraint=models.UniqueConstraint(
                fields=("customer", "mission"),
                name="louva_unique_user_mission",
            ),
        ),
    ]
