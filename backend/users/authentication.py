from rest_framework_simplejwt.authentication import JWTStatelessUserAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken

from .context import AuthorizationContext


class ClaimsJWTAuthentication(JWTStatelessUserAuthentication):
    """
    Stateless JWT authentication for tokens issued by the auth service.

    No user row is loaded: the token's claims are the identity. The
    authorization context built from them (`role`, `tenant`, `sub`) is
    attached to the request as `request.authorization`.
    """

    def authenticate(self, request):
        result = super().authenticate(request)
        if result is None:
            return None

        user, validated_token = result
        if not validated_token.get("role"):
            raise InvalidToken("Token contained no role claim")

        request.authorization = AuthorizationContext.from_claims(validated_token)
        return user, validated_token


def get_authorization_context(request) -> AuthorizationContext:
    """
    Returns the caller's AuthorizationContext.

    DRF authenticates lazily, so the context is rebuilt from `request.auth`
    when the authenticator has not stored it on the underlying request.
    """
    context = getattr(request, "authorization", None)
    if context is not None:
        return context
    return AuthorizationContext.from_claims(request.auth or {})
