"""Tests for the composite form binding and per-field bindings."""

import gc
import weakref
from dataclasses import dataclass
from typing import List, Literal, Optional, Union

import pytest
from PyQt6.QtTest import QTest

from pyqt_fieldkit.core.formatters import format_currency
from pyqt_fieldkit.exceptions import FieldKindMismatchError, UnknownFieldError
from pyqt_fieldkit.forms.enhanced_form import EnhancedForm, FormField, bind_form
from pyqt_fieldkit.forms.events import ChangeEvent
from pyqt_fieldkit.forms.field_kinds import HandlerCategory
from pyqt_fieldkit.forms.form_state import FormState
from pyqt_fieldkit.forms.validators import email, min_value, phone, required


@dataclass
class OrderForm:
    customer: str = ""
    email: str = ""
    phone: str = ""
    quantity: Union[int, str] = 1
    amount: Union[float, str] = ""
    gift_wrap: bool = False
    city: Literal["hn", "hcm"] = "hn"
    receipt: Optional[List[str]] = None


def make_form():
    return FormState(OrderForm, rules={
        "customer": [required("Required")],
        "email": [required("Required"), email("Bad email")],
        "phone": [phone("Bad phone")],
        "quantity": [min_value(1, "At least one")],
    })


def test_bind_form_is_memoized_per_manager(qapp):
    form = make_form()
    other = make_form()

    bound = bind_form(form)
    assert bind_form(form) is bound
    assert bind_form(other) is not bound
    assert isinstance(bound, EnhancedForm)
    assert bound.manager is form


def test_handlers_write_and_validate(qapp):
    form = make_form()
    handlers = bind_form(form).handlers

    handlers.phone("phone")(ChangeEvent(value="0912345678"))
    assert form.get_value("phone") == "091 234 567 8"
    assert form.get_error("phone") is None
    assert form.is_dirty("phone")

    handlers.email("email")(ChangeEvent(value=" NOT-AN-EMAIL "))
    assert form.get_value("email") == "not-an-email"
    assert form.get_error("email") == "Bad email"

    handlers.checkbox("gift_wrap")(ChangeEvent(checked=True))
    handlers.select("city")("hcm")
    handlers.file("receipt")(ChangeEvent(files=["/tmp/r.pdf"]))
    assert form.get_value("gift_wrap") is True
    assert form.get_value("city") == "hcm"
    assert form.get_value("receipt") == ["/tmp/r.pdf"]


def test_number_rejection_holds_value_and_skips_validation(qapp):
    form = make_form()
    validated = []
    form.validated.connect(lambda name, ok: validated.append(name))
    handler = bind_form(form).handlers.number("quantity")

    handler(ChangeEvent(value="5"))
    handler(ChangeEvent(value="5x"))

    assert form.get_value("quantity") == 5
    assert validated == ["quantity"]


def test_currency_stored_value_stays_numeric(qapp):
    form = make_form()
    bind_form(form).handlers.currency("amount")(ChangeEvent(value="1000000"))

    stored = form.get_value("amount")
    assert stored == 1000000
    assert "1.000.000" in format_currency(stored)
    assert form.get_value("amount") == 1000000


def test_kind_mismatch_and_unknown_field(qapp):
    handlers = bind_form(make_form()).handlers

    with pytest.raises(FieldKindMismatchError):
        handlers.checkbox("customer")
    with pytest.raises(FieldKindMismatchError):
        handlers.number("phone")
    with pytest.raises(UnknownFieldError):
        handlers.text("nickname")

    # Select writes into choice, text and number fields
    handlers.select("city")
    handlers.select("customer")
    handlers.select("quantity")


def test_handlers_for_category(qapp):
    handlers = bind_form(make_form()).handlers
    assert handlers.for_category(HandlerCategory.RADIO) is handlers.radio


def test_utils_debounced_trigger_and_dispose(qapp):
    form = make_form()
    bound = bind_form(form)
    debounced = bound.utils.debounced_trigger(delay_ms=50)

    debounced("customer")
    bound.dispose()
    QTest.qWait(100)

    assert form.get_error("customer") is None
    assert debounced.is_disposed


def test_utils_focus_handlers_validate_on_blur(qapp):
    form = make_form()
    bind_form(form).utils.focus_handlers("customer").on_blur()
    assert form.get_error("customer") == "Required"


def test_form_field_debounces_validation(qapp):
    form = make_form()
    customer = FormField(form, "customer", debounce_ms=50)

    customer.on_change(ChangeEvent(value=""))
    assert customer.value == ""
    assert customer.error is None
    assert customer.is_validation_pending

    QTest.qWait(150)
    assert customer.error == "Required"

    customer.on_change(ChangeEvent(value="Linh"))
    QTest.qWait(150)
    assert customer.error is None


def test_form_field_blur_validates_immediately(qapp):
    form = make_form()
    customer = bind_form(form).field("customer", debounce_ms=1000)

    customer.on_change(ChangeEvent(value=""))
    customer.on_blur()

    assert customer.error == "Required"
    assert not customer.is_validation_pending


def test_form_field_options(qapp):
    form = make_form()
    customer = FormField(form, "customer", validate_on_change=False, validate_on_blur=False)

    customer.on_change(ChangeEvent(value=""))
    customer.on_blur()

    assert not customer.is_validation_pending
    assert customer.error is None


def test_form_field_category_normalizes(qapp):
    form = make_form()
    field = FormField(form, "phone", category=HandlerCategory.PHONE, debounce_ms=50)
    field.on_change(ChangeEvent(value="0912.345.678"))
    assert field.value == "091 234 567 8"

    with pytest.raises(FieldKindMismatchError):
        FormField(form, "phone", category=HandlerCategory.CHECKBOX)


def test_form_field_dispose_stops_pending_validation(qapp):
    form = make_form()
    customer = FormField(form, "customer", debounce_ms=50)
    customer.on_change(ChangeEvent(value=""))
    customer.dispose()

    QTest.qWait(100)
    assert customer.error is None
    assert customer.is_disposed

    # Changes after dispose neither write nor raise
    customer.on_change(ChangeEvent(value="x"))
    customer.on_blur()
    assert customer.value == ""
    assert customer.error is None


def test_form_field_without_blur_validation_keeps_pending_change_validation(qapp):
    form = make_form()
    customer = FormField(form, "customer", validate_on_blur=False, debounce_ms=50)

    customer.on_change(ChangeEvent(value=""))
    customer.on_blur()
    assert customer.is_validation_pending
    assert customer.error is None

    QTest.qWait(150)
    assert customer.error == "Required"


def test_utils_does_not_keep_dropped_schedulers_alive(qapp):
    bound = bind_form(make_form())
    scheduler_ref = weakref.ref(bound.utils.debounced_trigger(delay_ms=50))
    gc.collect()
    assert scheduler_ref() is None

    kept = bound.utils.debounced_trigger(delay_ms=50)
    bound.dispose()
    assert kept.is_disposed
