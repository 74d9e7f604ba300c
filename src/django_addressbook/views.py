"""Address book JSON API views.

Every view answers with JSON. Validation problems come back as 400 with an
"errors" object, missing records as 404, and an edit of a shared address as
409 until the client confirms it through change_address.
"""
import json

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from . import selectors, services
from .forms import GroupForm
from .serializers import (
    address_list_to_dicts,
    address_snapshot,
    address_to_dict,
    contact_to_dict,
    group_to_dict,
)

STAGED_EDIT_SESSION_KEY = 'addressbook_staged_edit'

OUTCOME_STATUS = {
    services.Outcome.INVALID: 400,
    services.Outcome.CONFIRMATION_REQUIRED: 409,
    services.Outcome.STAGED_EDIT_MISSING: 404,
}


def _json_body(request):
    if not request.body:
        return {}
    data = json.loads(request.body)
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object")
    return data


def _bad_request(message):
    return JsonResponse({"error": message}, status=400)


def _not_found(what):
    return JsonResponse({"error": f"{what} not found"}, status=404)


def _session_key(request):
    if request.session.session_key is None:
        request.session.save()
    return request.session.session_key


def _contact_result_response(result, status=200):
    data = {
        "outcome": result.outcome,
        "saved": result.saved,
        "contact": contact_to_dict(result.contact),
        "address": address_to_dict(result.address) if result.address is not None else None,
        "errors": result.errors,
    }
    if result.address_list is not None:
        data["address_list"] = address_list_to_dicts(result.address_list)
    if result.outcome == services.Outcome.CONFIRMATION_REQUIRED:
        data["staged_address"] = address_snapshot(result.address)
        data["shared_with"] = result.contact.address.contacts.count()
    return JsonResponse(data, status=OUTCOME_STATUS.get(result.outcome, status))


# =============================================================================
# Main
# =============================================================================

@require_GET
def index(request):
    """Groups, contacts and addresses for the main screen."""
    return JsonResponse({
        "groups": [group_to_dict(g) for g in selectors.get_group_list()],
        "contacts": [contact_to_dict(c) for c in selectors.get_contact_list()],
        "addresses": address_list_to_dicts(selectors.get_address_list()),
    })


# =============================================================================
# Contacts
# =============================================================================

@csrf_exempt
@require_http_methods(["GET", "POST"])
def contact_list(request):
    """GET: all contacts. POST: create a contact."""
    if request.method == "GET":
        return JsonResponse({
            "contacts": [contact_to_dict(c) for c in selectors.get_contact_list()],
        })

    try:
        body = _json_body(request)
    except ValueError as e:
        return _bad_request(str(e))
    spec = services.AddressSpecification.from_request_data(body)
    result = services.create_contact(body.get("contact") or {}, spec)
    return _contact_result_response(result, status=201)


@require_GET
def contact_find(request):
    """Contacts whose last name starts with ?last_name=."""
    contacts = selectors.find_contacts_by_last_name(request.GET.get("last_name", ""))
    return JsonResponse({"contacts": [contact_to_dict(c) for c in contacts]})


@csrf_exempt
@require_http_methods(["GET", "POST"])
def contact_detail(request, contact_id: int):
    """GET: contact with its address. POST: update contact and address."""
    contact = selectors.get_contact_by_id(contact_id)
    if contact is None:
        return _not_found("Contact")

    if request.method == "GET":
        return JsonResponse({
            "contact": contact_to_dict(contact),
            "address": address_to_dict(contact.address) if contact.address else None,
        })

    try:
        body = _json_body(request)
    except ValueError as e:
        return _bad_request(str(e))
    spec = services.AddressSpecification.from_request_data(body)
    result = services.update_contact(
        contact, body.get("contact") or {}, spec, session_key=_session_key(request),
    )
    if result.staged_edit is not None:
        request.session[STAGED_EDIT_SESSION_KEY] = result.staged_edit.pk
    return _contact_result_response(result)


@csrf_exempt
@require_POST
def contact_change_address(request, contact_id: int):
    """Confirm a staged shared-address edit: {"apply_to_all": true|false}."""
    contact = selectors.get_contact_by_id(contact_id)
    if contact is None:
        return _not_found("Contact")
    try:
        body = _json_body(request)
    except ValueError as e:
        return _bad_request(str(e))
    if not isinstance(body.get("apply_to_all"), bool):
        return _bad_request("apply_to_all must be true or false")

    result = services.change_address(
        contact, _session_key(request), apply_to_all=body["apply_to_all"],
    )
    if result.outcome != services.Outcome.STAGED_EDIT_MISSING:
        request.session.pop(STAGED_EDIT_SESSION_KEY, None)
    return _contact_result_response(result)


@csrf_exempt
@require_POST
def contact_remove_address(request, contact_id: int):
    contact = selectors.get_contact_by_id(contact_id)
    if contact is None:
        return _not_found("Contact")
    old_address_id = services.remove_address(contact)
    return JsonResponse({
        "saved": old_address_id is not None,
        "old_address_id": old_address_id,
        "contact": contact_to_dict(contact),
        "address_list": address_list_to_dicts(selectors.get_address_list()),
    })


@csrf_exempt
@require_POST
def contact_delete(request, contact_id: int):
    contact = selectors.get_contact_by_id(contact_id)
    if contact is None:
        return _not_found("Contact")
    result = services.delete_contact(contact)
    data = {"deleted": True, "old_address": result.old_address}
    if result.address_list is not None:
        data["address_list"] = address_list_to_dicts(result.address_list)
    return JsonResponse(data)


# =============================================================================
# Addresses
# =============================================================================

@require_GET
def address_list(request):
    return JsonResponse({"addresses": address_list_to_dicts(selectors.get_address_list())})


@csrf_exempt
@require_http_methods(["GET", "POST"])
def address_detail(request, address_id: int):
    """GET: address. POST: update address fields."""
    address = selectors.get_address_by_id(address_id)
    if address is None:
        return _not_found("Address")

    if request.method == "GET":
        return JsonResponse({"address": address_to_dict(address)})

    try:
        body = _json_body(request)
    except ValueError as e:
        return _bad_request(str(e))
    errors = services.update_address(address, body.get("address") or {})
    return JsonResponse(
        {"saved": not errors, "address": address_to_dict(address), "errors": errors},
        status=400 if errors else 200,
    )


@csrf_exempt
@require_POST
def address_delete(request, address_id: int):
    address = selectors.get_address_by_id(address_id)
    if address is None:
        return _not_found("Address")
    services.delete_address(address)
    return JsonResponse({"deleted": True, "id": address_id})


# =============================================================================
# Groups
# =============================================================================

@csrf_exempt
@require_http_methods(["GET", "POST"])
def group_list(request):
    """GET: groups with mailing labels. POST: create a group."""
    if request.method == "GET":
        return JsonResponse({"groups": [group_to_dict(g) for g in selectors.get_group_list()]})

    try:
        body = _json_body(request)
    except ValueError as e:
        return _bad_request(str(e))
    form = GroupForm(data=body)
    if not form.is_valid():
        return JsonResponse(
            {"errors": {name: list(msgs) for name, msgs in form.errors.items()}},
            status=400,
        )
    group = form.save()
    return JsonResponse({"group": group_to_dict(group)}, status=201)
