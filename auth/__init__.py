"""auth/ -- API key gate for the ranking service.

Layer rule: auth/ imports only stdlib, third-party libraries, and core/.
It does NOT import from api/ or web/.
api/ imports from auth/, not the other way around.
"""
