"""Voucher aggregate: a discount code redeemable on orders."""

from enum import Enum

from protean.fields import Boolean, Float, Identifier, Integer, String

from delivery.domain import delivery
from delivery.shared.errors import InvalidRequestError


class DiscountType(Enum):
    FIXED = "FIXED"
    PERCENT = "PERCENT"


@delivery.aggregate
class Voucher:
    code = String(required=True, max_length=50)
    # None means the voucher is valid at every shop
    shop_id = Identifier()
    discount_type = String(choices=DiscountType, default=DiscountType.FIXED.value)
    value = Float(required=True, min_value=0.0)
    max_discount = Float(min_value=0.0)
    min_subtotal = Float(default=0.0, min_value=0.0)
    usage_limit = Integer(min_value=1)
    used_count = Integer(default=0)
    is_active = Boolean(default=True)

    def discount_for(self, shop_id, subtotal) -> float:
        """The discount this voucher grants on ``subtotal`` at ``shop_id``.

        Raises InvalidRequestError when the voucher cannot be applied.
        """
        if not self.is_active:
            raise InvalidRequestError("VOUCHER_INACTIVE", f"Voucher {self.code} is no longer active")
        if self.shop_id is not None and str(self.shop_id) != str(shop_id):
            raise InvalidRequestError("VOUCHER_SHOP_MISMATCH", f"Voucher {self.code} is not valid for this shop")
        if self.usage_limit is not None and (self.used_count or 0) >= self.usage_limit:
            raise InvalidRequestError("VOUCHER_EXHAUSTED", f"Voucher {self.code} has been fully redeemed")
        if subtotal < (self.min_subtotal or 0.0):
            raise InvalidRequestError(
                "VOUCHER_MIN_SUBTOTAL",
                f"Voucher {self.code} requires a subtotal of at least {self.min_subtotal:g}",
            )

        if self.discount_type == DiscountType.PERCENT.value:
            discount = subtotal * self.value / 100
            if self.max_discount is not None:
                discount = min(discount, self.max_discount)
        else:
            discount = self.value

        return min(discount, subtotal)

    def redeem(self):
        self.used_count = (self.used_count or 0) + 1
