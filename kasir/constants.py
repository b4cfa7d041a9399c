SUCCESS_CODE = 1000
ERROR_CODE = 2000

ERR_CATEGORY_NOT_FOUND = "category not found"
ERR_INVALID_CATEGORY_ID = "invalid category id"
ERR_INVALID_CATEGORY_REQUEST = "invalid category request"

ERR_PRODUCT_NOT_FOUND = "product not found"
ERR_INVALID_PRODUCT_ID = "invalid product id"
ERR_INVALID_PRODUCT_REQUEST = "invalid product request"

# path segment -> (malformed id message, malformed body message)
INVALID_REQUEST_MESSAGES = {
    "categories": (ERR_INVALID_CATEGORY_ID, ERR_INVALID_CATEGORY_REQUEST),
    "products": (ERR_INVALID_PRODUCT_ID, ERR_INVALID_PRODUCT_REQUEST),
}
