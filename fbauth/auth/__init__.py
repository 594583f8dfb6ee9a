"""
Authentication Package

This package handles the Facebook OAuth 2.0 login flow.

Modules:
- facebook: Login handler (redirect to Facebook, code exchange, profile fetch)
- session: Session JWT creation and validation for the demo application
- routes: Login and callback endpoints (/auth/facebook, /auth/callback/facebook)

The authentication flow:
1. Client opens /auth/facebook and is redirected to the Facebook login dialog
2. User authenticates with Facebook
3. Facebook redirects back to /auth/callback/facebook with a code
4. The handler exchanges the code for tokens and fetches the user's profile
5. The route issues a session cookie, or answers 500 if any step failed
"""

from .routes import auth_router

__all__ = [
    "auth_router",
]
