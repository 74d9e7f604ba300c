"""Admin configuration for Django Address Book."""
from django.contrib import admin

from django_addressbook import services
from django_addressbook.models import (
    Address,
    AddressType,
    Contact,
    Group,
    StagedAddressEdit,
)


class ContactInline(admin.TabularInline):
    model = Contact
    extra = 0
    fields = ['prefix', 'first_name', 'last_name', 'cell_phone', 'email']
    show_change_link = True


@admin.register(AddressType)
class AddressTypeAdmin(admin.ModelAdmin):
    list_display = ['name', 'kind', 'only_one_main_contact']
    list_filter = ['kind']


@admin.register(Address)
class AddressAdmin(admin.ModelAdmin):
    list_display = [
        'addressee_for_display', 'address1', 'city', 'state', 'zip', 'home_phone',
        'address_type', 'created_at',
    ]
    list_filter = ['address_type', 'state']
    search_fields = [
        'address1', 'city', 'zip', 'home_phone',
        'primary_contact__last_name', 'secondary_contact__last_name',
    ]
    list_select_related = ['primary_contact', 'secondary_contact', 'address_type']
    raw_id_fields = ['primary_contact', 'secondary_contact']
    inlines = [ContactInline]

    fieldsets = (
        (None, {
            'fields': ('address1', 'address2', 'city', 'state', 'zip', 'home_phone')
        }),
        ('Main Contacts', {
            'fields': ('address_type', 'primary_contact', 'secondary_contact')
        }),
    )


@admin.register(Contact)
class ContactAdmin(admin.ModelAdmin):
    list_display = ['sort_name', 'email', 'cell_phone', 'work_phone', 'birthday', 'address']
    search_fields = ['first_name', 'last_name', 'email', 'cell_phone', 'work_phone']
    ordering = ['last_name', 'first_name']
    raw_id_fields = ['address']

    def delete_model(self, request, obj):
        services.delete_contact(obj)

    def delete_queryset(self, request, queryset):
        # QuerySet.delete() skips Contact.delete()
        for contact in queryset:
            services.delete_contact(contact)

    fieldsets = (
        (None, {
            'fields': ('prefix', 'first_name', 'middle_name', 'last_name', 'birthday')
        }),
        ('Contact Info', {
            'fields': ('work_phone', 'cell_phone', 'email', 'website')
        }),
        ('Address', {
            'fields': ('address',)
        }),
    )


@admin.register(Group)
class GroupAdmin(admin.ModelAdmin):
    list_display = ['name', 'address_count', 'created_at']
    search_fields = ['name']
    filter_horizontal = ['addresses']

    @admin.display(description='Addresses')
    def address_count(self, obj):
        return obj.addresses.count()


@admin.register(StagedAddressEdit)
class StagedAddressEditAdmin(admin.ModelAdmin):
    list_display = ['session_key', 'contact', 'created_at', 'expires_at']
    readonly_fields = ['session_key', 'contact', 'payload', 'created_at', 'expires_at']
