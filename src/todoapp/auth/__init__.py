"""Authentication and authorization.

Learn: users sign in with username/password and receive a signed JWT.
Every protected route resolves that token back to a user id, which is
the only identity the repositories ever trust.
"""
