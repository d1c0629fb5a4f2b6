"""auth/ -- Authentication and authorization package for Shelf.

Credential store, password hashing, token codec, the authenticator that
ties them together, and the request admission gate.

Layer rule: auth/ imports only core/, stdlib and third-party libraries.
It does NOT import from api/ or bookmarks/.
api/ imports from auth/, not the other way around.
"""
