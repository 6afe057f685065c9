"""Product aggregate: a menu entry sold by one shop."""

from protean.fields import Boolean, Float, Identifier, Integer, String

from delivery.catalogue.ratings import running_average
from delivery.domain import delivery


@delivery.aggregate
class Product:
    shop_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)
    image_url = String(max_length=1000)
    is_available = Boolean(default=True)
    is_deleted = Boolean(default=False)
    rating = Float(default=0.0)
    total_ratings = Integer(default=0)
    sold_count = Integer(default=0, min_value=0)

    @property
    def is_orderable(self) -> bool:
        return bool(self.is_available) and not self.is_deleted

    def change_price(self, price):
        self.price = price

    def set_availability(self, is_available):
        self.is_available = is_available

    def soft_delete(self):
        self.is_deleted = True
        self.is_available = False

    def record_sale(self, quantity):
        self.sold_count = (self.sold_count or 0) + quantity

    def record_rating(self, rating):
        self.rating = running_average(self.rating, self.total_ratings, rating)
        self.total_ratings = (self.total_ratings or 0) + 1
