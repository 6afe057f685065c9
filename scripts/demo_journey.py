"""Demo: Walk one order through the whole delivery lifecycle in-process.

Seeds a small catalogue (two shops, their products and shippers), fills a
customer's cart from both shops, orders from one of them and drives the order
from PENDING to DELIVERED, optionally finishing with a review and a payout.
Everything runs against the in-memory providers, so nothing needs to be
running beforehand.

Usage:
    # Full journey, COD payment, with review
    python scripts/demo_journey.py

    # Pay with MoMo, apply a voucher, skip the review
    python scripts/demo_journey.py --payment MOMO --voucher GIAM10K --no-review

    # Stop once the order is READY and list what shippers can pick up
    python scripts/demo_journey.py --stop-at READY
"""

import argparse
import json
import sys

# Add src/ to path so we can import domain modules
sys.path.insert(0, "src")

STOP_POINTS = ["PENDING", "CONFIRMED", "PREPARING", "READY", "SHIPPING", "DELIVERED"]


def _seed(process):
    from delivery.catalogue.registration import RegisterProduct, RegisterShipper, RegisterShop
    from delivery.voucher.management import CreateVoucher

    process(RegisterShop(shop_id="shop-001", name="Com Tam Ba Ghien", owner_id="owner-001", ship_fee_per_order=15000.0))
    process(RegisterShop(shop_id="shop-002", name="Banh Mi Huynh Hoa", owner_id="owner-002", ship_fee_per_order=10000.0))
    process(RegisterProduct(product_id="prod-001", shop_id="shop-001", name="Com suon bi cha", price=50000.0))
    process(RegisterProduct(product_id="prod-002", shop_id="shop-001", name="Canh chua", price=20000.0))
    process(RegisterProduct(product_id="prod-101", shop_id="shop-002", name="Banh mi dac biet", price=35000.0))
    process(RegisterShipper(user_id="shipper-001", shop_id="shop-001", name="Minh"))
    process(CreateVoucher(code="GIAM10K", value=10000.0, min_subtotal=50000.0))


def main():
    parser = argparse.ArgumentParser(
        description="Walk one order through the delivery lifecycle",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                                   # COD order, delivered and reviewed
  %(prog)s --payment ZALOPAY --no-review     # Prepaid order, no review
  %(prog)s --stop-at READY                   # Stop before a shipper accepts
        """,
    )
    parser.add_argument("--payment", choices=["COD", "ZALOPAY", "MOMO", "SEPAY"], default="COD")
    parser.add_argument("--voucher", default=None, help="Voucher code to apply (seeded: GIAM10K)")
    parser.add_argument("--stop-at", choices=STOP_POINTS, default="DELIVERED", help="Last status to reach")
    parser.add_argument("--rating", type=int, default=5, help="Rating given in the review (default: 5)")
    parser.add_argument("--no-review", action="store_true", help="Skip the review and payout")
    args = parser.parse_args()

    from delivery.cart.items import add_to_cart
    from delivery.domain import delivery
    from delivery.order.owner import ConfirmOrder, MarkPreparing, MarkReady
    from delivery.order.payout import RecordPayout
    from delivery.order.placement import PlaceOrder
    from delivery.order.queries import get_order_detail, get_shipper_orders_available
    from delivery.order.shipper import MarkDelivered, accept_order
    from delivery.review.submission import SubmitReview
    from delivery.shared.actor import Actor, Role
    from delivery.shared.errors import DeliveryError

    delivery.init()

    customer = Actor(user_id="cust-001", role=Role.CUSTOMER.value)
    owner = Actor(user_id="owner-001", role=Role.OWNER.value)
    shipper = Actor(user_id="shipper-001", role=Role.SHIPPER.value)
    admin = Actor(user_id="admin-001", role=Role.ADMIN.value)

    with delivery.domain_context():

        def process(command):
            return delivery.process(command, asynchronous=False)

        def step(command_cls, order_id, actor):
            process(command_cls(order_id=order_id, actor_id=actor.user_id, actor_role=actor.role))

        _seed(process)

        add_to_cart(customer.user_id, "prod-001", 1)
        add_to_cart(customer.user_id, "prod-002", 1)
        cart = add_to_cart(customer.user_id, "prod-101", 2)
        print(f"Cart: {cart['total_items']} items in {len(cart['groups'])} shops, total {cart['total_amount']:,.0f}")

        try:
            order_id = process(
                PlaceOrder(
                    customer_id=customer.user_id,
                    shop_id="shop-001",
                    delivery_address=json.dumps({"label": "Dorm", "full_address": "KTX Khu B, Thu Duc"}),
                    payment_method=args.payment,
                    voucher_code=args.voucher,
                )
            )
        except DeliveryError as exc:
            print(f"Order rejected: {exc.code} {exc.message}")
            sys.exit(1)

        detail = get_order_detail(customer, order_id)
        print(f"Placed {detail['order_number']}: total {detail['total']:,.0f} ({detail['payment_method']})")

        stop = STOP_POINTS.index(args.stop_at)
        transitions = [
            lambda: step(ConfirmOrder, order_id, owner),
            lambda: step(MarkPreparing, order_id, owner),
            lambda: step(MarkReady, order_id, owner),
            lambda: accept_order(order_id, shipper),
            lambda: step(MarkDelivered, order_id, shipper),
        ]
        for index, transition in enumerate(transitions[:stop], start=1):
            transition()
            print(f"  -> {STOP_POINTS[index]}")

        if args.stop_at == "READY":
            available = get_shipper_orders_available(shipper)
            print(f"Orders waiting for a shipper: {available['total']}")

        if args.stop_at == "DELIVERED" and not args.no_review:
            process(
                SubmitReview(
                    order_id=order_id,
                    actor_id=customer.user_id,
                    actor_role=customer.role,
                    rating=args.rating,
                    product_ratings=json.dumps([{"product_id": "prod-001", "rating": args.rating}]),
                )
            )
            step(RecordPayout, order_id, admin)

        detail = get_order_detail(customer, order_id)
        print(
            f"Final: {detail['status']} / {detail['payment_status']}, shipper={detail['shipper_id']}, "
            f"reviewed={detail['review_id'] is not None}, paid_out={detail['paid_out']}"
        )


if __name__ == "__main__":
    main()
