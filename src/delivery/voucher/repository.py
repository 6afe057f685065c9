"""Repository for the Voucher aggregate."""

from delivery.domain import delivery
from delivery.voucher.voucher import Voucher


@delivery.repository(part_of=Voucher)
class VoucherRepository:
    def find_by_code(self, code: str) -> Voucher | None:
        """Find a voucher by its code, case-insensitively."""
        return self._dao.query.filter(code=code.strip().upper()).all().first
