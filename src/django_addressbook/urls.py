"""URL patterns for django-addressbook."""
from django.urls import path

from . import views

app_name = 'django_addressbook'

urlpatterns = [
    path('', views.index, name='index'),

    # Contacts
    path('contacts/', views.contact_list, name='contact_list'),
    path('contacts/find/', views.contact_find, name='contact_find'),
    path('contacts/<int:contact_id>/', views.contact_detail, name='contact_detail'),
    path('contacts/<int:contact_id>/delete/', views.contact_delete, name='contact_delete'),
    path(
        'contacts/<int:contact_id>/change-address/',
        views.contact_change_address,
        name='contact_change_address',
    ),
    path(
        'contacts/<int:contact_id>/remove-address/',
        views.contact_remove_address,
        name='contact_remove_address',
    ),

    # Addresses
    path('addresses/', views.address_list, name='address_list'),
    path('addresses/<int:address_id>/', views.address_detail, name='address_detail'),
    path('addresses/<int:address_id>/delete/', views.address_delete, name='address_delete'),

    # Groups
    path('groups/', views.group_list, name='group_list'),
]
