"""
Authentication Package

This package handles Google sign-in for the service.

Key responsibilities:
- Telling Google access tokens from Google ID tokens
- Verifying access tokens at Google's user-info endpoint
- Verifying ID tokens against Google's published signing keys (JWKS)
- Resolving the verified payload to a canonical identity
- Session JWT issuance and validation for client applications

Modules:
- classifier: access token vs. ID token decision
- jwks: signing key sources (HTTP JWKS with caching, static keys)
- verifiers: AccessTokenVerifier and IdTokenVerifier
- utils: identity resolution and header helpers
- session: session JWT creation and validation
- service: the sign-in pipeline (GoogleAuthenticator)
- routes: public authentication endpoints (/auth/google, /auth/me)

The authentication flow:
1. Client obtains a Google credential (access token or ID token)
2. Client posts it to /auth/google
3. Service verifies it with Google and finds or creates the local user
4. Service returns a session JWT valid for 30 days
5. Client uses the session JWT for subsequent API requests
"""
