from django.contrib import admin

from voting.models import (
    Competition,
    Contestant,
    HostingTier,
    PlatformSettings,
    Purchase,
    Submission,
    Vote,
)


class ContestantInline(admin.TabularInline):
    model = Contestant
    extra = 0


class PurchaseInline(admin.TabularInline):
    model = Purchase
    extra = 0
    can_delete = False
    readonly_fields = [
        "transaction_id",
        "contestant",
        "vote_count",
        "bonus_votes",
        "amount_cents",
        "purchased_at",
    ]


@admin.register(HostingTier)
class HostingTierAdmin(admin.ModelAdmin):
    list_display = ["name", "price_cents", "max_contestants", "revenue_share_percent"]


@admin.register(Competition)
class CompetitionAdmin(admin.ModelAdmin):
    list_display = ["title", "category", "status", "tier", "created_at"]
    list_filter = ["status", "tier"]
    search_fields = ["title", "category"]
    inlines = [ContestantInline, PurchaseInline]


@admin.register(Contestant)
class ContestantAdmin(admin.ModelAdmin):
    list_display = ["display_name", "competition", "application_status", "applied_at"]
    list_filter = ["application_status", "competition"]
    search_fields = ["display_name", "talent_profile_id"]


@admin.register(Vote)
class VoteAdmin(admin.ModelAdmin):
    """Votes are append-only; the admin is read-only."""

    list_display = ["competition", "contestant", "source", "voting_day", "cast_at"]
    list_filter = ["source", "competition"]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(PlatformSettings)
class PlatformSettingsAdmin(admin.ModelAdmin):
    list_display = ["__str__", "sales_tax_percent", "free_votes_per_day", "updated_at"]


@admin.register(Submission)
class SubmissionAdmin(admin.ModelAdmin):
    list_display = ["full_name", "kind", "status", "amount_paid_cents", "created_at"]
    list_filter = ["kind", "status", "nomination_status"]
    search_fields = ["full_name", "email", "nominator_name"]
