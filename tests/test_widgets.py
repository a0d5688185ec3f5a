"""Tests for Qt widget binding."""

from dataclasses import dataclass
from typing import Literal, Union

import pytest
from PyQt6 import sip
from PyQt6.QtCore import QEvent
from PyQt6.QtGui import QFocusEvent
from PyQt6.QtTest import QTest
from PyQt6.QtWidgets import (
    QApplication, QCheckBox, QComboBox, QDateEdit, QLabel, QLineEdit, QPlainTextEdit, QRadioButton,
    QSpinBox, QWidget,
)

from pyqt_fieldkit.core.formatters import format_currency, format_phone_number
from pyqt_fieldkit.forms.enhanced_form import FormField, bind_form
from pyqt_fieldkit.forms.events import ChangeEvent
from pyqt_fieldkit.forms.field_kinds import HandlerCategory
from pyqt_fieldkit.forms.form_state import FormState
from pyqt_fieldkit.forms.handlers import FocusHandlers
from pyqt_fieldkit.forms.validators import phone, required
from pyqt_fieldkit.forms.widget_binding import (
    RADIO_VALUE_PROPERTY, connect_focus_handlers, connect_handler, event_from_widget,
    reflect_value, set_widget_value,
)


@dataclass
class ProfileForm:
    name: str = ""
    phone: str = ""
    bio: str = ""
    newsletter: bool = False
    city: Literal["hn", "hcm"] = "hn"
    gender: Literal["male", "female"] = "male"
    age: int = 18
    amount: Union[float, str] = ""


def test_event_from_widget(qapp):
    line_edit = QLineEdit("hello")
    assert event_from_widget(line_edit) == ChangeEvent(value="hello", source=line_edit)

    checkbox = QCheckBox("Newsletter")
    checkbox.setChecked(True)
    assert event_from_widget(checkbox).checked is True

    radio = QRadioButton("Female")
    radio.setProperty(RADIO_VALUE_PROPERTY, "female")
    assert event_from_widget(radio).value == "female"

    combo = QComboBox()
    combo.addItem("Hà Nội", "hn")
    assert event_from_widget(combo).value == "hn"

    spin = QSpinBox()
    spin.setValue(42)
    assert event_from_widget(spin).value == "42"

    with pytest.raises(TypeError):
        event_from_widget(QLabel())


def test_connect_handler_line_edit_uses_user_edits_only(qapp):
    received = []
    line_edit = QLineEdit()
    connect_handler(line_edit, received.append)

    line_edit.setText("typed")
    assert received == []

    line_edit.textEdited.emit("typed")
    assert [event.value for event in received] == ["typed"]


def test_connect_handler_radio_fires_when_checked(qapp):
    received = []
    radio = QRadioButton("Male")
    connect_handler(radio, received.append)

    radio.setChecked(True)
    radio.setChecked(False)
    assert len(received) == 1
    assert received[0].value == "Male"


def test_connect_handler_combo_passes_value(qapp):
    received = []
    combo = QComboBox()
    combo.addItem("Hà Nội", "hn")
    combo.addItem("Hồ Chí Minh", "hcm")
    connect_handler(combo, received.append)

    combo.setCurrentIndex(1)
    assert received == ["hcm"]


def test_connect_handler_rejects_unknown_widget(qapp):
    with pytest.raises(TypeError):
        connect_handler(QLabel(), print)


def test_set_widget_value_does_not_emit(qapp):
    checkbox = QCheckBox()
    toggles = []
    checkbox.toggled.connect(toggles.append)

    set_widget_value(checkbox, True)
    assert checkbox.isChecked()
    assert toggles == []

    edit = QPlainTextEdit()
    set_widget_value(edit, "0912345678", formatter=format_phone_number)
    assert edit.toPlainText() == "091 234 567 8"

    spin = QSpinBox()
    set_widget_value(spin, 7)
    set_widget_value(spin, "")
    assert spin.value() == 7


def test_focus_event_filter(qapp):
    calls = []
    line_edit = QLineEdit()
    connect_focus_handlers(line_edit, FocusHandlers(on_blur=lambda: calls.append("blur"),
                                                    on_focus=lambda: calls.append("focus")))

    QApplication.sendEvent(line_edit, QFocusEvent(QEvent.Type.FocusIn))
    QApplication.sendEvent(line_edit, QFocusEvent(QEvent.Type.FocusOut))
    assert calls == ["focus", "blur"]


def test_reflect_value_follows_form_state(qapp):
    form = FormState(ProfileForm, defaults={"name": "Linh"})
    line_edit = QLineEdit()
    stop = reflect_value(form, "name", line_edit)
    assert line_edit.text() == "Linh"

    form.set_value("name", "Mai")
    assert line_edit.text() == "Mai"

    stop()
    stop()
    form.set_value("name", "Hoa")
    assert line_edit.text() == "Mai"


def test_attached_phone_field_shows_formatted_value(qapp):
    form = FormState(ProfileForm, rules={"phone": [phone("Bad phone")]})
    line_edit = QLineEdit()
    bind_form(form).field("phone", category=HandlerCategory.PHONE, debounce_ms=50).attach(line_edit)

    line_edit.setText("0912345678")
    line_edit.textEdited.emit("0912345678")

    assert form.get_value("phone") == "091 234 567 8"
    assert line_edit.text() == "091 234 567 8"

    QTest.qWait(150)
    assert form.get_error("phone") is None


def test_attached_field_validates_on_focus_out(qapp):
    form = FormState(ProfileForm, rules={"name": [required("Required")]})
    line_edit = QLineEdit()
    FormField(form, "name", debounce_ms=1000).attach(line_edit)

    QApplication.sendEvent(line_edit, QFocusEvent(QEvent.Type.FocusOut))
    assert form.get_error("name") == "Required"


def test_attached_checkbox_and_combo(qapp):
    form = FormState(ProfileForm)
    bound = bind_form(form)

    checkbox = QCheckBox()
    bound.field("newsletter", category=HandlerCategory.CHECKBOX).attach(checkbox)
    checkbox.setChecked(True)
    assert form.get_value("newsletter") is True

    combo = QComboBox()
    combo.addItem("Hà Nội", "hn")
    combo.addItem("Hồ Chí Minh", "hcm")
    bound.field("city", category=HandlerCategory.SELECT).attach(combo)
    combo.setCurrentIndex(1)
    assert form.get_value("city") == "hcm"

    form.set_value("city", "hn")
    assert combo.currentIndex() == 0


def test_attached_radio_group(qapp):
    form = FormState(ProfileForm)
    bound = bind_form(form)
    group_box = QWidget()
    male = QRadioButton("Male", group_box)
    male.setProperty(RADIO_VALUE_PROPERTY, "male")
    female = QRadioButton("Female", group_box)
    female.setProperty(RADIO_VALUE_PROPERTY, "female")

    bound.field("gender", category=HandlerCategory.RADIO).attach(male)
    bound.field("gender", category=HandlerCategory.RADIO).attach(female)
    assert male.isChecked()

    female.setChecked(True)
    assert form.get_value("gender") == "female"
    assert not male.isChecked()


def test_destroying_widget_disposes_field(qapp):
    form = FormState(ProfileForm, rules={"name": [required("Required")]})
    line_edit = QLineEdit()
    field = FormField(form, "name", debounce_ms=50).attach(line_edit)

    field.on_change(ChangeEvent(value=""))
    sip.delete(line_edit)
    QTest.qWait(100)

    assert form.get_error("name") is None
    assert field.is_disposed
    # The deleted widget is no longer updated and the field ignores changes
    form.set_value("name", "after")
    field.on_change(ChangeEvent(value="x"))
    assert form.get_value("name") == "after"


def test_reflect_value_formats_currency_label(qapp):
    form = FormState(ProfileForm)
    label = QLabel()
    reflect_value(form, "age", label, formatter=format_currency)

    form.set_value("age", 1000000)
    assert "1.000.000" in label.text()


def test_typing_decimals_into_attached_number_fields(qapp):
    form = FormState(ProfileForm, defaults={"age": ""})
    bound = bind_form(form)
    age_edit = QLineEdit()
    amount_edit = QLineEdit()
    bound.field("age", category=HandlerCategory.NUMBER).attach(age_edit)
    bound.field("amount", category=HandlerCategory.CURRENCY).attach(amount_edit)

    QTest.keyClicks(age_edit, "0.5")
    QTest.keyClicks(amount_edit, "1.5")

    assert age_edit.text() == "0.5"
    assert form.get_value("age") == 0.5
    assert amount_edit.text() == "1.5"
    assert form.get_value("amount") == 1.5

    # Values written elsewhere still replace the typed text
    form.set_value("age", 42)
    assert age_edit.text() == "42"


def test_connect_handler_spin_boxes_only(qapp):
    received = []
    spin = QSpinBox()
    connect_handler(spin, received.append)
    spin.setValue(3)
    assert [event.value for event in received] == ["3"]

    with pytest.raises(TypeError):
        connect_handler(QDateEdit(), received.append)
