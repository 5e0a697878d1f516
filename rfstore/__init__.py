"""
Client-side state for the Romanian Football Store.

Optimistic, server-reconciled copies of the cart, the wishlist and the
admin inventory, on top of the store's REST API.
"""
