"""Read-only catalogue accessors used by the cart, order and review flows."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from delivery.catalogue.product import Product
from delivery.catalogue.shipper import ShipperProfile
from delivery.catalogue.shop import Shop


def _get_or_none(aggregate_cls, identifier):
    if not identifier:
        return None
    try:
        return current_domain.repository_for(aggregate_cls).get(identifier)
    except ObjectNotFoundError:
        return None


def find_shop(shop_id) -> Shop | None:
    return _get_or_none(Shop, shop_id)


def find_product(product_id) -> Product | None:
    return _get_or_none(Product, product_id)


def find_shipper(user_id) -> ShipperProfile | None:
    return _get_or_none(ShipperProfile, user_id)


def shops_by_id(shop_ids) -> dict[str, Shop]:
    """Fetch each distinct shop once; ids that no longer resolve are left out."""
    shops = {}
    for shop_id in dict.fromkeys(str(s) for s in shop_ids):
        shop = find_shop(shop_id)
        if shop is not None:
            shops[shop_id] = shop
    return shops


def shop_owned_by(owner_id) -> Shop | None:
    return current_domain.repository_for(Shop)._dao.query.filter(owner_id=str(owner_id)).all().first
