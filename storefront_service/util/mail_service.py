import logging
import smtplib
from datetime import datetime
from html import escape
from typing import List, Optional

from shared.core.config import settings
from shared.utils.email_client import EmailClient
from ..app.schemas.order_schemas import Order, OrderItem

logger = logging.getLogger(__name__)

BRAND_NAME = "Bismillah Wholesale"

STATUS_COPY = {
    "completed": {
        "title": "Order Delivered",
        "subtitle": "Your order has been marked as completed. Thank you for shopping with us.",
        "subject": "Your order has been completed",
    },
    "paid": {
        "title": "Payment Confirmed",
        "subtitle": "Your payment has been received and your order is now being prepared.",
        "subject": "Payment received for your order",
    },
}

DEFAULT_COPY = {
    "title": "Order Received",
    "subtitle": f"Thanks for shopping with {BRAND_NAME}. We received your order and will contact you shortly.",
    "subject": "Thanks for your order",
}

ITEM_ROW_HTML = """
<tr>
  <td style="padding:10px 8px;border-bottom:1px solid #2c2c2c;color:#f3f3f3;">
    <div style="font-weight:600;">{name}</div>
    <div style="color:#bdbdbd;">Qty: {quantity}</div>
    <div style="color:#bdbdbd;">Unit: {unit}</div>
  </td>
  <td style="padding:10px 8px;border-bottom:1px solid #2c2c2c;text-align:right;color:#d4af37;font-weight:700;">{line_total}</td>
</tr>"""

TEMPLATE_HTML = """
<div style="background:#0b0b0b;padding:24px 12px;font-family:Arial,sans-serif;">
  <div style="max-width:680px;margin:0 auto;background:#121212;border:1px solid #d4af37;border-radius:8px;padding:24px 18px;">
    <div style="text-align:center;margin-bottom:18px;font-family:Georgia,serif;font-weight:700;font-size:24px;color:#d4af37;">{brand}</div>
    <h2 style="margin:0 0 8px;color:#f7f7f7;text-align:center;">{title}</h2>
    <p style="margin:0 0 18px;color:#c7c7c7;font-size:14px;text-align:center;">{subtitle}</p>
    <table width="100%" style="border-collapse:collapse;margin-bottom:16px;color:#f3f3f3;font-size:13px;">
      <tr><td>Order ID</td><td style="text-align:right;">{order_id}</td></tr>
      <tr><td>Placed At</td><td style="text-align:right;">{placed_at}</td></tr>
      <tr><td>Payment</td><td style="text-align:right;">{payment}</td></tr>
      <tr><td>Status</td><td style="text-align:right;">{status}</td></tr>
    </table>
    <div style="margin-bottom:16px;color:#d7d7d7;font-size:13px;line-height:1.6;">
      <div style="color:#d4af37;font-weight:700;">{customer_heading}</div>
      {customer_name}<br/>{customer_phone}<br/>{customer_email}<br/>{customer_address}<br/>ZIP: {customer_zip}
    </div>
    <table width="100%" style="border-collapse:collapse;">
      {item_rows}
      <tr>
        <td style="padding:12px 8px;text-align:right;color:#f3f3f3;font-weight:700;">Total</td>
        <td style="padding:12px 8px;text-align:right;color:#d4af37;font-weight:700;">{total}</td>
      </tr>
    </table>
  </div>
</div>"""


def format_pkr(amount: float) -> str:
    formatted = f"{float(amount or 0):,.2f}"
    if formatted.endswith(".00"):
        formatted = formatted[:-3]
    return f"PKR {formatted}"


def line_total(item: OrderItem) -> float:
    return (item.product.price or 0) * (item.quantity or 0)


def serialize_items_text(items: List[OrderItem]) -> str:
    return "\n".join(
        f"{item.product.name or ''} x {item.quantity} = {format_pkr(line_total(item))}"
        for item in items
    )


def customer_status_copy(status: str) -> dict:
    return STATUS_COPY.get(status, DEFAULT_COPY)


def render_order_html(order: Order, title: str, subtitle: str, customer_heading: str) -> str:
    item_rows = "".join(
        ITEM_ROW_HTML.format(
            name=escape(item.product.name or ""),
            quantity=item.quantity,
            unit=escape(format_pkr(item.product.price)),
            line_total=escape(format_pkr(line_total(item))),
        )
        for item in order.items
    )
    customer = order.customer
    return TEMPLATE_HTML.format(
        brand=escape(BRAND_NAME.upper()),
        title=escape(title),
        subtitle=escape(subtitle),
        order_id=escape(order.id),
        placed_at=escape(format_placed_at(order.created_at)),
        payment=escape(order.payment_method.upper()),
        status=escape(order.status),
        customer_heading=escape(customer_heading),
        customer_name=escape(customer.full_name or ""),
        customer_phone=escape(customer.phone or ""),
        customer_email=escape(customer.email or ""),
        customer_address=escape(customer.address or ""),
        customer_zip=escape(customer.zip_code or ""),
        item_rows=item_rows,
        total=escape(format_pkr(order.total)),
    )


def format_placed_at(created_at: Optional[datetime]) -> str:
    return (created_at or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")


class OrderMailService:

    def __init__(self, mailer: Optional[EmailClient] = None):
        self.mailer = mailer

    @classmethod
    def from_settings(cls) -> "OrderMailService":
        if not settings.smtp_configured:
            return cls()
        return cls(EmailClient(
            smtp_host=settings.SMTP_HOST,
            smtp_port=settings.SMTP_PORT,
            username=settings.SMTP_USERNAME,
            password=settings.SMTP_PASSWORD,
            use_ssl=settings.SMTP_USE_SSL,
        ))

    def send_order_emails(self, order: Order, subject_prefix: str = "New") -> None:
        """Notify the shop admin and the customer about an order.

        Delivery problems are logged; they never reach the caller.
        """
        admin_email = settings.ORDER_NOTIFY_EMAIL
        if not self.mailer or not admin_email:
            logger.info("Email not configured, skipping notifications for %s", order.id)
            return

        sender = settings.EMAIL_SENDER or settings.SMTP_USERNAME
        payment = order.payment_method.upper()
        placed_at = format_placed_at(order.created_at)
        lines_text = serialize_items_text(order.items)
        total = format_pkr(order.total)
        customer = order.customer
        copy = customer_status_copy(order.status)

        try:
            self.mailer.send_email(
                sender=sender,
                recipients=[admin_email],
                subject=f"[{subject_prefix} {payment} Order] {order.id}",
                text_body=(
                    f"New order request received.\n\n"
                    f"Order ID: {order.id}\nPlaced At: {placed_at}\n"
                    f"Payment: {payment}\nStatus: {order.status}\n\n"
                    f"Customer Details\nName: {customer.full_name}\nEmail: {customer.email}\n"
                    f"Phone: {customer.phone}\nAddress: {customer.address}\nZIP: {customer.zip_code}\n\n"
                    f"Order Items\n{lines_text}\n\nTotal: {total}"
                ),
                html_body=render_order_html(
                    order, "New Order Request",
                    "A customer placed an order. Full details are below.",
                    "Customer Details"),
            )

            if customer.email:
                self.mailer.send_email(
                    sender=sender,
                    recipients=[customer.email],
                    subject=f"{copy['subject']} - {order.id}",
                    text_body=(
                        f"Hi {customer.full_name},\n\n{copy['subtitle']}\n\n"
                        f"Order ID: {order.id}\nPlaced At: {placed_at}\n"
                        f"Payment Method: {payment}\nStatus: {order.status}\n\n"
                        f"Shipping Details\nName: {customer.full_name}\nPhone: {customer.phone}\n"
                        f"Address: {customer.address}\nZIP: {customer.zip_code}\n\n"
                        f"Order Items\n{lines_text}\n\nOrder Total: {total}\n\n"
                        f"Regards,\n{BRAND_NAME}"
                    ),
                    html_body=render_order_html(
                        order, copy["title"], copy["subtitle"], "Shipping Details"),
                )
        except (smtplib.SMTPException, OSError):
            logger.exception("Email delivery failed for order %s", order.id)
