"""
auth — account credentials.

Provides:
  • Salted PBKDF2 password hashing (``auth.password``)
  • ``UserStore`` interface and an in-memory implementation
  • ``CredentialService`` signup / signin
  • Signup / signin API routes
"""
