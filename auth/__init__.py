"""
auth — User authentication module.

Provides:
  • Signed session-token creation & verification (HMAC-SHA256, 24 h expiry)
  • Password hashing (bcrypt, 10 rounds)
  • ``AuthService`` — signup / login / profile
  • Signup / login / profile API routes
  • ``get_current_user_id`` FastAPI dependency
"""
