from django.contrib import admin
from .models import User, Invoice, InvoiceClient, InvoiceItem, FlightLog


class InvoiceClientInline(admin.TabularInline):
    model = InvoiceClient
    extra = 0


class InvoiceItemInline(admin.TabularInline):
    model = InvoiceItem
    extra = 0


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ['email', 'first_name', 'last_name', 'created_at']
    search_fields = ['email', 'first_name', 'last_name']
    ordering = ['email']


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = ['smartbill_id', 'series', 'number', 'issue_date', 'total_amount', 'currency', 'status']
    list_filter = ['status', 'currency']
    search_fields = ['smartbill_id', 'number', 'clients__email']
    ordering = ['-issue_date']
    inlines = [InvoiceClientInline, InvoiceItemInline]


@admin.register(FlightLog)
class FlightLogAdmin(admin.ModelAdmin):
    list_display = ['date', 'user_id', 'instructor_id', 'payer_id', 'flight_type', 'total_hours']
    list_filter = ['flight_type']
    search_fields = ['user_id', 'payer_id']
    ordering = ['-date']
