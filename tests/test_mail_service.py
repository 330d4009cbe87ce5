import smtplib
from datetime import datetime, timezone

import pytest

from shared.core.config import settings
from shared.utils import email_client
from shared.utils.email_client import EmailClient
from storefront_service.util.mail_service import (
    OrderMailService, format_pkr, render_order_html, serialize_items_text)
from storefront_service.app.schemas.order_schemas import Order

from conftest import line


class FakeMailer:
    def __init__(self, fail_with=None):
        self.messages = []
        self.fail_with = fail_with

    def send_email(self, sender, recipients, subject, text_body, html_body=None, attachments=None):
        if self.fail_with:
            raise self.fail_with
        self.messages.append({"sender": sender, "to": recipients, "subject": subject,
                              "text": text_body, "html": html_body})


def make_order(status="pending", email="ayesha@example.com", name="Ring <Gold>"):
    return Order.model_validate({
        "id": "ORD-1700000000000-1234",
        "paymentMethod": "cod",
        "customer": {
            "fullName": "Ayesha Khan",
            "email": email,
            "phone": "0300",
            "address": "Lahore",
            "zipCode": "54000",
        },
        "items": [line("j1", 2, name=name, price=1500).model_dump(by_alias=True)],
        "total": 3000,
        "status": status,
        "createdAt": datetime(2024, 5, 1, 10, 30, tzinfo=timezone.utc),
    })


@pytest.fixture
def notify_settings(monkeypatch):
    monkeypatch.setattr(settings, "ORDER_NOTIFY_EMAIL", "orders@shop.example")
    monkeypatch.setattr(settings, "EMAIL_SENDER", "shop@shop.example")


@pytest.mark.parametrize("amount, expected", [
    (1500, "PKR 1,500"), (12.5, "PKR 12.50"), (0, "PKR 0"), (None, "PKR 0"), (1234567.891, "PKR 1,234,567.89"),
])
def test_format_pkr(amount, expected):
    assert format_pkr(amount) == expected


def test_serialize_items_text():
    order = make_order(name="Ring")

    assert serialize_items_text(order.items) == "Ring x 2 = PKR 3,000"


def test_html_escapes_customer_supplied_text():
    html = render_order_html(make_order(), "Title", "Subtitle", "Customer Details")

    assert "Ring &lt;Gold&gt;" in html
    assert "Ring <Gold>" not in html


def test_new_order_notifies_admin_and_customer(notify_settings):
    mailer = FakeMailer()

    OrderMailService(mailer).send_order_emails(make_order())

    assert [m["to"] for m in mailer.messages] == [["orders@shop.example"], ["ayesha@example.com"]]
    assert mailer.messages[0]["subject"] == "[New COD Order] ORD-1700000000000-1234"
    assert mailer.messages[1]["subject"] == "Thanks for your order - ORD-1700000000000-1234"
    assert all(m["sender"] == "shop@shop.example" for m in mailer.messages)
    assert "Total: PKR 3,000" in mailer.messages[0]["text"]


def test_status_change_uses_prefix_and_status_copy(notify_settings):
    mailer = FakeMailer()

    OrderMailService(mailer).send_order_emails(make_order(status="completed"), "COMPLETED")

    assert mailer.messages[0]["subject"] == "[COMPLETED COD Order] ORD-1700000000000-1234"
    assert mailer.messages[1]["subject"] == "Your order has been completed - ORD-1700000000000-1234"


def test_customer_without_email_only_admin_is_notified(notify_settings):
    mailer = FakeMailer()

    OrderMailService(mailer).send_order_emails(make_order(email=None))

    assert len(mailer.messages) == 1


def test_unconfigured_mail_is_skipped(monkeypatch):
    monkeypatch.setattr(settings, "ORDER_NOTIFY_EMAIL", None)
    mailer = FakeMailer()

    OrderMailService(mailer).send_order_emails(make_order())
    OrderMailService().send_order_emails(make_order())

    assert mailer.messages == []


def test_delivery_failure_is_logged_not_raised(notify_settings, caplog):
    mailer = FakeMailer(fail_with=smtplib.SMTPAuthenticationError(535, b"bad login"))

    OrderMailService(mailer).send_order_emails(make_order())

    assert "Email delivery failed for order ORD-1700000000000-1234" in caplog.text


def test_from_settings_without_smtp_has_no_mailer(monkeypatch):
    monkeypatch.setattr(settings, "SMTP_HOST", None)

    assert OrderMailService.from_settings().mailer is None


class FakeSMTP:
    instances = []
    failures = 0

    def __init__(self, host, port, timeout=None):
        self.sent = []
        FakeSMTP.instances.append(self)

    def starttls(self):
        pass

    def login(self, username, password):
        pass

    def sendmail(self, sender, recipients, message):
        if FakeSMTP.failures:
            FakeSMTP.failures -= 1
            raise smtplib.SMTPServerDisconnected("connection dropped")
        self.sent.append((sender, recipients, message))

    def quit(self):
        pass


@pytest.fixture
def fake_smtp(monkeypatch):
    FakeSMTP.instances = []
    FakeSMTP.failures = 0
    monkeypatch.setattr(email_client.smtplib, "SMTP", FakeSMTP)
    return FakeSMTP


def make_client(max_retries=1):
    return EmailClient("smtp.example", 587, "user", "pass", max_retries=max_retries, retry_delay=0)


def test_email_client_retries_transient_failure(fake_smtp):
    fake_smtp.failures = 1

    make_client().send_email("a@x", ["b@x"], "Subject", "body", "<p>body</p>")

    assert len(fake_smtp.instances) == 2
    sender, recipients, message = fake_smtp.instances[-1].sent[0]
    assert recipients == ["b@x"]
    assert "Subject: Subject" in message


def test_email_client_gives_up_after_retries(fake_smtp):
    fake_smtp.failures = 5

    with pytest.raises(smtplib.SMTPServerDisconnected):
        make_client(max_retries=1).send_email("a@x", ["b@x"], "Subject", "body")

    assert len(fake_smtp.instances) == 2
