"""Voucher issuing and deactivation: commands and handler."""

from protean import handle
from protean.fields import Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from delivery.domain import delivery
from delivery.shared.errors import ConflictError, NotFoundError
from delivery.voucher.voucher import DiscountType, Voucher


@delivery.command(part_of="Voucher")
class CreateVoucher:
    code = String(required=True, max_length=50)
    shop_id = Identifier()
    discount_type = String(choices=DiscountType, default=DiscountType.FIXED.value)
    value = Float(required=True, min_value=0.0)
    max_discount = Float(min_value=0.0)
    min_subtotal = Float(default=0.0, min_value=0.0)
    usage_limit = Integer(min_value=1)


@delivery.command(part_of="Voucher")
class DeactivateVoucher:
    code = String(required=True, max_length=50)


@delivery.command_handler(part_of=Voucher)
class VoucherManagementHandler:
    @handle(CreateVoucher)
    def create_voucher(self, command):
        repo = current_domain.repository_for(Voucher)
        code = command.code.strip().upper()
        if repo.find_by_code(code) is not None:
            raise ConflictError("VOUCHER_EXISTS", f"Voucher {code} already exists")

        voucher = Voucher(
            code=code,
            shop_id=command.shop_id,
            discount_type=command.discount_type,
            value=command.value,
            max_discount=command.max_discount,
            min_subtotal=command.min_subtotal or 0.0,
            usage_limit=command.usage_limit,
        )
        repo.add(voucher)
        return str(voucher.id)

    @handle(DeactivateVoucher)
    def deactivate_voucher(self, command):
        repo = current_domain.repository_for(Voucher)
        voucher = repo.find_by_code(command.code)
        if voucher is None:
            raise NotFoundError("VOUCHER_NOT_FOUND", f"Voucher {command.code} does not exist")

        voucher.is_active = False
        repo.add(voucher)
