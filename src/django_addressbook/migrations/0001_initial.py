# Generated manually for the django-addressbook package

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models

import django_addressbook.phone
from django_addressbook.states import US_STATES


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="AddressType",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=50, unique=True, verbose_name="name")),
                (
                    "kind",
                    models.CharField(
                        choices=[("individual", "Individual"), ("family", "Family")],
                        default="individual",
                        max_length=20,
                        verbose_name="kind",
                    ),
                ),
                (
                    "only_one_main_contact",
                    models.BooleanField(default=True, verbose_name="only one main contact"),
                ),
            ],
            options={
                "verbose_name": "address type",
                "verbose_name_plural": "address types",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Address",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("archived_at", models.DateTimeField(blank=True, null=True)),
                (
                    "address1",
                    models.CharField(blank=True, max_length=255, verbose_name="address line 1"),
                ),
                (
                    "address2",
                    models.CharField(blank=True, max_length=255, verbose_name="address line 2"),
                ),
                ("city", models.CharField(blank=True, max_length=100, verbose_name="city")),
                (
                    "state",
                    models.CharField(
                        blank=True, choices=US_STATES, max_length=2, verbose_name="state"
                    ),
                ),
                (
                    "zip",
                    models.CharField(
                        blank=True,
                        max_length=10,
                        validators=[
                            django.core.validators.RegexValidator(
                                code="invalid_zip",
                                message="is invalid",
                                regex="^\\d{5}(-\\d{4})?$",
                            )
                        ],
                        verbose_name="zip",
                    ),
                ),
                (
                    "home_phone",
                    models.CharField(
                        blank=True,
                        max_length=30,
                        validators=[django_addressbook.phone.validate_phone],
                        verbose_name="home phone",
                    ),
                ),
                (
                    "address_type",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="addresses",
                        to="django_addressbook.addresstype",
                        verbose_name="address type",
                    ),
                ),
            ],
            options={
                "verbose_name": "address",
                "verbose_name_plural": "addresses",
                "ordering": ["pk"],
            },
        ),
        migrations.CreateModel(
            name="Contact",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("prefix", models.CharField(blank=True, max_length=20, verbose_name="prefix")),
                (
                    "first_name",
                    models.CharField(blank=True, max_length=150, verbose_name="first name"),
                ),
                (
                    "middle_name",
                    models.CharField(blank=True, max_length=150, verbose_name="middle name"),
                ),
                ("last_name", models.CharField(max_length=150, verbose_name="last name")),
                ("birthday", models.DateField(blank=True, null=True, verbose_name="birthday")),
                (
                    "work_phone",
                    models.CharField(
                        blank=True,
                        max_length=30,
                        validators=[django_addressbook.phone.validate_phone],
                        verbose_name="work phone",
                    ),
                ),
                (
                    "cell_phone",
                    models.CharField(
                        blank=True,
                        max_length=30,
                        validators=[django_addressbook.phone.validate_phone],
                        verbose_name="cell phone",
                    ),
                ),
                ("email", models.EmailField(blank=True, max_length=254, verbose_name="email")),
                ("website", models.URLField(blank=True, verbose_name="website")),
                (
                    "address",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="contacts",
                        to="django_addressbook.address",
                        verbose_name="address",
                    ),
                ),
            ],
            options={
                "verbose_name": "contact",
                "verbose_name_plural": "contacts",
                "ordering": ["last_name", "first_name", "pk"],
            },
        ),
        migrations.AddField(
            model_name="address",
            name="primary_contact",
            field=models.ForeignKey(
                blank=True,
                db_column="contact1_id",
                null=True,
                on_delete=django.db.models.deletion.SET_NULL,
                related_name="primary_for_addresses",
                to="django_addressbook.contact",
                verbose_name="primary contact",
            ),
        ),
        migrations.AddField(
            model_name="address",
            name="secondary_contact",
            field=models.ForeignKey(
                blank=True,
                db_column="contact2_id",
                null=True,
                on_delete=django.db.models.deletion.SET_NULL,
                related_name="secondary_for_addresses",
                to="django_addressbook.contact",
                verbose_name="secondary contact",
            ),
        ),
        migrations.CreateModel(
            name="Group",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=100, unique=True, verbose_name="name")),
                (
                    "addresses",
                    models.ManyToManyField(
                        blank=True,
                        related_name="groups",
                        to="django_addressbook.address",
                        verbose_name="addresses",
                    ),
                ),
            ],
            options={
                "verbose_name": "group",
                "verbose_name_plural": "groups",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="StagedAddressEdit",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                ("session_key", models.CharField(max_length=40, unique=True)),
                (
                    "payload",
                    models.JSONField(help_text="Snapshot of the candidate address fields"),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("expires_at", models.DateTimeField()),
                (
                    "contact",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="staged_address_edits",
                        to="django_addressbook.contact",
                    ),
                ),
            ],
            options={
                "indexes": [
                    models.Index(fields=["expires_at"], name="addressbook_staged_expires_idx")
                ],
            },
        ),
    ]
