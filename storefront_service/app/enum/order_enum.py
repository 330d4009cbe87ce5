from enum import Enum


class OrderStatus(str, Enum):

    pending = "pending"
    awaiting_payment = "awaiting_payment"
    paid = "paid"
    processing = "processing"
    shipping = "shipping"
    shipped = "shipped"
    completed = "completed"
    cancelled = "cancelled"


class PaymentMethod(str, Enum):
    cod = "cod"
    jazzcash = "jazzcash"
    easypaisa = "easypaisa"
    card = "card"


# Card payments go through the hosted checkout, never the offline endpoint
OFFLINE_PAYMENT_METHODS = {
    PaymentMethod.cod.value,
    PaymentMethod.jazzcash.value,
    PaymentMethod.easypaisa.value,
}
