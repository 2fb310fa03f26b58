"""
In-memory stand-ins shared by the storefront tests
"""


class MemoryStorage:
    """Key/value storage with the same interface as StorageRepository"""

    def __init__(self, initial=None, fail_writes=False):
        self.data = dict(initial or {})
        self.fail_writes = fail_writes

    def get_item(self, key):
        return self.data.get(key)

    def set_item(self, key, value):
        if self.fail_writes:
            return False
        self.data[key] = value
        return True

    def remove_item(self, key):
        self.data.pop(key, None)
        return True


def make_product(product_id="1", name="Apex Pro Mechanical Keyboard", price=50.0, stock=10, status="active"):
    return {
        "id": product_id,
        "name": name,
        "category": "Keyboards",
        "brand": "SteelSeries",
        "price": price,
        "stock": stock,
        "status": status,
        "image": "/images/apex-pro.jpg"
    }


VALID_DETAILS = {
    "firstName": "Ada",
    "lastName": "Lovelace",
    "email": "ada@example.com",
    "phone": "(555) 123-4567",
    "address": "12 Analytical Engine Way"
}

VALID_PAYMENT = {
    "accountNumber": "1234 5678",
    "accountHolderName": "Ada Lovelace",
    "accountType": "checking",
    "bankName": "First Bank"
}
