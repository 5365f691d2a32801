from django.contrib import admin
from .models import Transaction


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    list_display = ('student', 'amount', 'status', 'payment_method', 'date', 'recorded_by')
    list_filter = ('status', 'payment_method')
    search_fields = ('student__name',)
