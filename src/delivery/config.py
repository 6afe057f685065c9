"""Business constants for the delivery domain."""

MAX_CART_ITEM_QUANTITY = 999

# Add-to-cart is a read-modify-write on the cart version; a stale save is retried.
ADD_TO_CART_ATTEMPTS = 3

MAX_PAGE_LIMIT = 50
CUSTOMER_PAGE_LIMIT = 10
SHOP_PAGE_LIMIT = 20
SHIPPER_PAGE_LIMIT = 10

# Rows read per query when a list is filtered in memory after the query
SCAN_BATCH_SIZE = 200

ORDER_ITEMS_PREVIEW = 3

DEFAULT_CUSTOMER_CANCEL_REASON = "Cancelled by customer"
DEFAULT_OWNER_CANCEL_REASON = "Cancelled by owner"
