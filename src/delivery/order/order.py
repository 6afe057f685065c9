"""Order aggregate: the role-gated order lifecycle.

State machine:
    PENDING → CONFIRMED → PREPARING → READY → SHIPPING → DELIVERED
    CANCELLED (from PENDING, CONFIRMED, PREPARING)

Every transition is checked in the same order: the actor's role, then the
actor's claim on this particular order (customer who placed it, owner of the
shop, shipper serving the shop or assigned to the order), then the current
status. A failed check raises before any field is touched.

Orders are immutable once DELIVERED or CANCELLED, except for the review link
and the payout bookkeeping.
"""

import secrets
import string
from datetime import UTC, datetime
from enum import Enum
from typing import NamedTuple

from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String, Text, ValueObject

from delivery.config import DEFAULT_CUSTOMER_CANCEL_REASON, DEFAULT_OWNER_CANCEL_REASON
from delivery.domain import delivery
from delivery.order.events import (
    OrderAccepted,
    OrderCancelled,
    OrderDelivered,
    OrderPaidOut,
    OrderPlaced,
    OrderReviewed,
    OrderStatusChanged,
)
from delivery.shared.actor import Actor, Role
from delivery.shared.errors import ConflictError, ForbiddenError, InvalidRequestError


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PREPARING = "PREPARING"
    READY = "READY"
    SHIPPING = "SHIPPING"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class PaymentStatus(Enum):
    UNPAID = "UNPAID"
    PAID = "PAID"


class PaymentMethod(Enum):
    COD = "COD"
    ZALOPAY = "ZALOPAY"
    MOMO = "MOMO"
    SEPAY = "SEPAY"


class CancelledBy(Enum):
    CUSTOMER = "CUSTOMER"
    OWNER = "OWNER"


TERMINAL_STATES = {OrderStatus.DELIVERED, OrderStatus.CANCELLED}


class Transition(NamedTuple):
    role: Role
    allowed_from: frozenset
    target: OrderStatus
    conflict_code: str


# Operation → (role, required prior statuses, resulting status, error code on wrong status)
TRANSITIONS = {
    "confirm": Transition(Role.OWNER, frozenset({OrderStatus.PENDING}), OrderStatus.CONFIRMED, "ORDER_011"),
    "mark_preparing": Transition(Role.OWNER, frozenset({OrderStatus.CONFIRMED}), OrderStatus.PREPARING, "ORDER_011"),
    "mark_ready": Transition(Role.OWNER, frozenset({OrderStatus.PREPARING}), OrderStatus.READY, "ORDER_011"),
    "owner_cancel": Transition(
        Role.OWNER,
        frozenset({OrderStatus.CONFIRMED, OrderStatus.PREPARING}),
        OrderStatus.CANCELLED,
        "ORDER_013",
    ),
    "cancel": Transition(
        Role.CUSTOMER,
        frozenset({OrderStatus.PENDING, OrderStatus.CONFIRMED, OrderStatus.PREPARING}),
        OrderStatus.CANCELLED,
        "ORDER_012",
    ),
    "accept": Transition(Role.SHIPPER, frozenset({OrderStatus.READY}), OrderStatus.SHIPPING, "ORDER_014"),
    "mark_shipping": Transition(
        Role.SHIPPER,
        frozenset({OrderStatus.READY, OrderStatus.SHIPPING}),
        OrderStatus.SHIPPING,
        "ORDER_011",
    ),
    "mark_delivered": Transition(Role.SHIPPER, frozenset({OrderStatus.SHIPPING}), OrderStatus.DELIVERED, "ORDER_015"),
}

_STATUS_TIMESTAMPS = {
    OrderStatus.CONFIRMED: "confirmed_at",
    OrderStatus.PREPARING: "preparing_at",
    OrderStatus.READY: "ready_at",
    OrderStatus.SHIPPING: "shipping_at",
    OrderStatus.DELIVERED: "delivered_at",
    OrderStatus.CANCELLED: "cancelled_at",
}

_ORDER_NUMBER_ALPHABET = string.digits + string.ascii_uppercase


def generate_order_number(now: datetime) -> str:
    """``ORD-<epoch millis>-<6 random base36 characters>``."""
    suffix = "".join(secrets.choice(_ORDER_NUMBER_ALPHABET) for _ in range(6))
    return f"ORD-{int(now.timestamp() * 1000)}-{suffix}"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@delivery.value_object(part_of="Order")
class DeliveryAddress:
    """Where the order goes, captured when it is placed."""

    label = String(max_length=100)
    full_address = String(required=True, max_length=500)
    building = String(max_length=100)
    room = String(max_length=50)
    note = String(max_length=500)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@delivery.entity(part_of="Order")
class OrderItem:
    """A line item frozen at the moment the order was placed."""

    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    product_image = String(max_length=1000)
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)
    subtotal = Float(required=True, min_value=0.0)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@delivery.aggregate
class Order:
    order_number = String(required=True, max_length=50)
    customer_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    shop_name = String(max_length=255)
    # Written as None on every new order; unassigned means present-and-None
    shipper_id = Identifier()
    items = HasMany(OrderItem)
    subtotal = Float(default=0.0)
    ship_fee = Float(default=0.0)
    discount = Float(default=0.0)
    total = Float(default=0.0)
    voucher_code = String(max_length=50)
    voucher_id = Identifier()
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.UNPAID.value)
    payment_method = String(choices=PaymentMethod, default=PaymentMethod.COD.value)
    delivery_address = ValueObject(DeliveryAddress)
    delivery_note = Text()
    cancel_reason = String(max_length=500)
    cancelled_by = String(choices=CancelledBy)
    cancelled_at = DateTime()
    confirmed_at = DateTime()
    preparing_at = DateTime()
    ready_at = DateTime()
    shipping_at = DateTime()
    delivered_at = DateTime()
    review_id = Identifier()
    reviewed_at = DateTime()
    # Set once the delivered quantities have been added to the products' sold counts
    sold_count_applied = Boolean(default=False)
    paid_out = Boolean(default=False)
    paid_out_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        customer_id,
        shop,
        items_data,
        delivery_address,
        payment_method,
        discount=0.0,
        voucher=None,
        delivery_note=None,
    ):
        """Create a PENDING order for one shop.

        Args:
            customer_id: The customer placing the order.
            shop: The Shop being ordered from; supplies the name and flat ship fee.
            items_data: List of dicts with product_id, product_name,
                        product_image, quantity and price.
            delivery_address: Dict with label, full_address, building, room, note.
            payment_method: One of PaymentMethod values.
            discount: Voucher discount already computed for this subtotal.
            voucher: The applied Voucher, if any.
        """
        if payment_method not in {m.value for m in PaymentMethod}:
            raise InvalidRequestError("ORDER_INVALID_PAYMENT_METHOD", f"Unsupported payment method: {payment_method}")
        if not delivery_address or not (delivery_address.get("full_address") or "").strip():
            raise InvalidRequestError("ORDER_INVALID_ADDRESS", "A delivery address is required")

        now = datetime.now(UTC)
        items = [
            OrderItem(
                product_id=item["product_id"],
                product_name=item["product_name"],
                product_image=item.get("product_image"),
                quantity=item["quantity"],
                price=item["price"],
                subtotal=item["price"] * item["quantity"],
            )
            for item in items_data
        ]
        subtotal = sum(item.subtotal for item in items)
        ship_fee = shop.ship_fee_per_order or 0.0

        order = cls(
            order_number=generate_order_number(now),
            customer_id=customer_id,
            shop_id=shop.id,
            shop_name=shop.name,
            shipper_id=None,
            items=items,
            subtotal=subtotal,
            ship_fee=ship_fee,
            discount=discount,
            total=max(subtotal + ship_fee - discount, 0.0),
            voucher_code=voucher.code if voucher else None,
            voucher_id=voucher.id if voucher else None,
            status=OrderStatus.PENDING.value,
            payment_status=PaymentStatus.UNPAID.value,
            payment_method=payment_method,
            delivery_address=DeliveryAddress(**delivery_address),
            delivery_note=delivery_note,
            paid_out=False,
            created_at=now,
            updated_at=now,
        )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order.order_number,
                customer_id=str(customer_id),
                shop_id=str(shop.id),
                total=order.total,
                payment_method=payment_method,
                voucher_code=order.voucher_code,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Guards
    # -------------------------------------------------------------------
    def _check_claim(self, operation, actor, shop_owner_id=None, shipper_shop_id=None):
        """Raise ForbiddenError unless ``actor`` has a stake in this order for ``operation``."""
        role = Role(actor.role)
        if role == Role.CUSTOMER and str(self.customer_id) != str(actor.user_id):
            raise ForbiddenError("ORDER_007", "You do not have access to this order")
        if role == Role.OWNER and str(shop_owner_id) != str(actor.user_id):
            raise ForbiddenError("ORDER_008", "You do not own the shop for this order")
        if role == Role.SHIPPER:
            if operation == "accept":
                if str(shipper_shop_id) != str(self.shop_id):
                    raise ForbiddenError("ORDER_016", "You do not deliver for this shop")
            elif self.shipper_id is None or str(self.shipper_id) != str(actor.user_id):
                raise ForbiddenError("ORDER_016", "You are not assigned to this order")

    def _assert_can_apply(self, operation, actor: Actor, shop_owner_id=None, shipper_shop_id=None) -> Transition:
        transition = TRANSITIONS[operation]
        actor.require(transition.role)
        self._check_claim(operation, actor, shop_owner_id=shop_owner_id, shipper_shop_id=shipper_shop_id)

        current = OrderStatus(self.status)
        if operation == "accept" and self.shipper_id is not None:
            raise ConflictError("ORDER_020", "Order has already been assigned to a shipper")
        if current not in transition.allowed_from:
            raise ConflictError(
                transition.conflict_code,
                f"Cannot {operation.replace('_', ' ')} an order in {current.value} status",
                details={"status": current.value},
            )
        return transition

    def _move_to(self, transition: Transition, actor: Actor, now: datetime):
        previous = self.status
        self.status = transition.target.value
        stamp = _STATUS_TIMESTAMPS[transition.target]
        if getattr(self, stamp) is None:
            setattr(self, stamp, now)
        self.updated_at = now

        if previous != self.status:
            self.raise_(
                OrderStatusChanged(
                    order_id=str(self.id),
                    previous_status=previous,
                    status=self.status,
                    actor_id=str(actor.user_id),
                    actor_role=actor.role,
                    changed_at=now,
                )
            )

    def can(self, operation, actor: Actor, shop_owner_id=None, shipper_shop_id=None) -> bool:
        """Whether ``operation`` would be accepted, without applying it."""
        try:
            self._assert_can_apply(operation, actor, shop_owner_id=shop_owner_id, shipper_shop_id=shipper_shop_id)
        except (ConflictError, ForbiddenError):
            return False
        return True

    # -------------------------------------------------------------------
    # Owner transitions
    # -------------------------------------------------------------------
    def confirm(self, actor, shop_owner_id):
        transition = self._assert_can_apply("confirm", actor, shop_owner_id=shop_owner_id)
        self._move_to(transition, actor, datetime.now(UTC))

    def mark_preparing(self, actor, shop_owner_id):
        transition = self._assert_can_apply("mark_preparing", actor, shop_owner_id=shop_owner_id)
        self._move_to(transition, actor, datetime.now(UTC))

    def mark_ready(self, actor, shop_owner_id):
        transition = self._assert_can_apply("mark_ready", actor, shop_owner_id=shop_owner_id)
        self._move_to(transition, actor, datetime.now(UTC))

    def owner_cancel(self, actor, shop_owner_id, reason=None):
        transition = self._assert_can_apply("owner_cancel", actor, shop_owner_id=shop_owner_id)
        self._cancel(transition, actor, CancelledBy.OWNER, reason)

    # -------------------------------------------------------------------
    # Customer transitions
    # -------------------------------------------------------------------
    def cancel(self, actor, reason=None):
        transition = self._assert_can_apply("cancel", actor)
        self._cancel(transition, actor, CancelledBy.CUSTOMER, reason)

    def _cancel(self, transition, actor, cancelled_by, reason):
        if not reason:
            reason = (
                DEFAULT_CUSTOMER_CANCEL_REASON if cancelled_by == CancelledBy.CUSTOMER else DEFAULT_OWNER_CANCEL_REASON
            )

        now = datetime.now(UTC)
        self.cancel_reason = reason
        self.cancelled_by = cancelled_by.value
        self._move_to(transition, actor, now)

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                cancelled_by=cancelled_by.value,
                reason=reason,
                cancelled_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Shipper transitions
    # -------------------------------------------------------------------
    def accept(self, actor, shipper_shop_id):
        """Assign the calling shipper to a READY order and move it straight to SHIPPING."""
        transition = self._assert_can_apply("accept", actor, shipper_shop_id=shipper_shop_id)

        now = datetime.now(UTC)
        self.shipper_id = actor.user_id
        self._move_to(transition, actor, now)

        self.raise_(
            OrderAccepted(
                order_id=str(self.id),
                shop_id=str(self.shop_id),
                shipper_id=str(actor.user_id),
                accepted_at=now,
            )
        )

    def mark_shipping(self, actor):
        transition = self._assert_can_apply("mark_shipping", actor)
        self._move_to(transition, actor, datetime.now(UTC))

    def mark_delivered(self, actor):
        transition = self._assert_can_apply("mark_delivered", actor)

        now = datetime.now(UTC)
        if self.payment_method == PaymentMethod.COD.value:
            self.payment_status = PaymentStatus.PAID.value
        self._move_to(transition, actor, now)

        self.raise_(
            OrderDelivered(
                order_id=str(self.id),
                shipper_id=str(actor.user_id),
                payment_status=self.payment_status,
                delivered_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Post-delivery bookkeeping
    # -------------------------------------------------------------------
    def claim_sold_quantities(self) -> dict[str, int]:
        """Quantities per product to add to sold counts, or nothing if already counted.

        Only a DELIVERED order counts as sold, and it is counted once.
        """
        if OrderStatus(self.status) != OrderStatus.DELIVERED or self.sold_count_applied:
            return {}

        quantities: dict[str, int] = {}
        for item in self.items:
            product_id = str(item.product_id)
            quantities[product_id] = quantities.get(product_id, 0) + item.quantity

        self.sold_count_applied = True
        return quantities

    def link_review(self, review_id):
        if OrderStatus(self.status) != OrderStatus.DELIVERED:
            raise ConflictError("REVIEW_004", "Only delivered orders can be reviewed")
        if self.review_id is not None:
            raise ConflictError("REVIEW_005", "This order has already been reviewed")

        now = datetime.now(UTC)
        self.review_id = review_id
        self.reviewed_at = now
        self.updated_at = now

        self.raise_(OrderReviewed(order_id=str(self.id), review_id=str(review_id), reviewed_at=now))

    def record_payout(self, actor):
        actor.require(Role.ADMIN)
        if OrderStatus(self.status) != OrderStatus.DELIVERED:
            raise ConflictError("ORDER_021", "Only delivered orders can be paid out")
        if self.paid_out:
            raise ConflictError("ORDER_021", "Order has already been paid out")

        now = datetime.now(UTC)
        self.paid_out = True
        self.paid_out_at = now
        self.updated_at = now

        self.raise_(
            OrderPaidOut(
                order_id=str(self.id),
                shop_id=str(self.shop_id),
                total=self.total,
                paid_out_at=now,
            )
        )
