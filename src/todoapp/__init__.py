"""todoapp — per-user todo lists and items behind a JWT-authenticated API.

Users sign up and sign in to get a bearer token. Every list and item
operation is scoped to the lists the token's user owns.
"""

__version__ = "0.1.0"
