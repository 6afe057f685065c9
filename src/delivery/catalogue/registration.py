"""Catalogue registration and maintenance commands and handlers.

The catalogue is administered outside this service; these commands let the
demo seed script and the tests put shops, products and shippers in place.
"""

from protean import handle
from protean.fields import Boolean, Float, Identifier, String
from protean.utils.globals import current_domain

from delivery.catalogue.product import Product
from delivery.catalogue.shipper import ShipperProfile, ShipperStatus
from delivery.catalogue.shop import Shop, ShopStatus
from delivery.domain import delivery


@delivery.command(part_of="Shop")
class RegisterShop:
    shop_id = Identifier()
    name = String(required=True, max_length=255)
    owner_id = Identifier(required=True)
    address = String(max_length=500)
    ship_fee_per_order = Float(default=0.0, min_value=0.0)
    is_open = Boolean(default=True)


@delivery.command(part_of="Shop")
class OpenShop:
    shop_id = Identifier(required=True)


@delivery.command(part_of="Shop")
class CloseShop:
    shop_id = Identifier(required=True)


@delivery.command(part_of="Product")
class RegisterProduct:
    product_id = Identifier()
    shop_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)
    image_url = String(max_length=1000)
    is_available = Boolean(default=True)


@delivery.command(part_of="Product")
class UpdateProductPrice:
    product_id = Identifier(required=True)
    price = Float(required=True, min_value=0.0)


@delivery.command(part_of="Product")
class SetProductAvailability:
    product_id = Identifier(required=True)
    is_available = Boolean(required=True)


@delivery.command(part_of="Product")
class DeleteProduct:
    product_id = Identifier(required=True)


@delivery.command(part_of="ShipperProfile")
class RegisterShipper:
    user_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    name = String(max_length=255)
    status = String(choices=ShipperStatus, default=ShipperStatus.AVAILABLE.value)


@delivery.command(part_of="ShipperProfile")
class ChangeShipperStatus:
    user_id = Identifier(required=True)
    status = String(required=True, choices=ShipperStatus)


@delivery.command_handler(part_of=Shop)
class ShopRegistrationHandler:
    @handle(RegisterShop)
    def register_shop(self, command):
        identity = {"id": command.shop_id} if command.shop_id else {}
        shop = Shop(
            **identity,
            name=command.name,
            owner_id=command.owner_id,
            address=command.address,
            ship_fee_per_order=command.ship_fee_per_order or 0.0,
            is_open=command.is_open,
            status=ShopStatus.OPEN.value if command.is_open else ShopStatus.CLOSED.value,
        )
        current_domain.repository_for(Shop).add(shop)
        return str(shop.id)

    @handle(OpenShop)
    def open_shop(self, command):
        repo = current_domain.repository_for(Shop)
        shop = repo.get(command.shop_id)
        shop.open()
        repo.add(shop)

    @handle(CloseShop)
    def close_shop(self, command):
        repo = current_domain.repository_for(Shop)
        shop = repo.get(command.shop_id)
        shop.close()
        repo.add(shop)


@delivery.command_handler(part_of=Product)
class ProductRegistrationHandler:
    @handle(RegisterProduct)
    def register_product(self, command):
        # Raises ObjectNotFoundError for an unknown shop
        current_domain.repository_for(Shop).get(command.shop_id)

        identity = {"id": command.product_id} if command.product_id else {}
        product = Product(
            **identity,
            shop_id=command.shop_id,
            name=command.name,
            price=command.price,
            image_url=command.image_url,
            is_available=command.is_available,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(UpdateProductPrice)
    def update_price(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.change_price(command.price)
        repo.add(product)

    @handle(SetProductAvailability)
    def set_availability(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.set_availability(command.is_available)
        repo.add(product)

    @handle(DeleteProduct)
    def delete_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.soft_delete()
        repo.add(product)


@delivery.command_handler(part_of=ShipperProfile)
class ShipperRegistrationHandler:
    @handle(RegisterShipper)
    def register_shipper(self, command):
        current_domain.repository_for(Shop).get(command.shop_id)

        profile = ShipperProfile(
            user_id=command.user_id,
            shop_id=command.shop_id,
            name=command.name,
            status=command.status or ShipperStatus.AVAILABLE.value,
        )
        current_domain.repository_for(ShipperProfile).add(profile)
        return str(profile.user_id)

    @handle(ChangeShipperStatus)
    def change_status(self, command):
        repo = current_domain.repository_for(ShipperProfile)
        profile = repo.get(command.user_id)
        profile.change_status(command.status)
        repo.add(profile)
