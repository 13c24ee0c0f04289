from functools import wraps

from jose import jwt
from flask import g, request, current_app as app, Flask
from werkzeug.exceptions import Unauthorized

from ..config.logging import get_logger

logger = get_logger(__name__)


### Main auth utility functions ###
def validate_api_auth(app: Flask):
    """
    Assert that all URLs in `app`'s API are explicitly marked with either
    `requires_auth` or `public`.
    """
    unmarked_endpoints = []
    for label, endpoint in app.view_functions.items():
        if not hasattr(endpoint, "is_protected"):
            unmarked_endpoints.append(label)

    assert len(unmarked_endpoints) == 0, (
        "All endpoints must use either the `requires_auth` or `public` decorator "
        "to explicitly specify their auth configuration. Missing from the following "
        "endpoints: " + ", ".join(unmarked_endpoints)
    )


def requires_auth(resource: str):
    """
    A decorator that restricts an endpoint to requests carrying a valid admin token.
    """

    def decorator(endpoint):
        # Store metadata on this function stating that it is protected by authentication
        endpoint.is_protected = True

        @wraps(endpoint)
        def wrapped(*args, **kwargs):
            is_authorized = check_auth(resource, request.method)
            if not is_authorized:
                raise Unauthorized("Please provide proper credentials")
            return endpoint(*args, **kwargs)

        return wrapped

    return decorator


def public(endpoint):
    """Declare an endpoint to be public, i.e., not requiring auth."""
    # Store metadata on this function stating that it is unprotected
    endpoint.is_protected = False

    return endpoint


def check_auth(resource: str, method: str) -> bool:
    """
    Perform authentication and authorization for the current request.

    Args:
        resource: the resource targeted by this request
        method: the HTTP method of this request
    Returns:
        bool, `True` if the request carries a valid admin token.
    """
    claims = authenticate()
    is_authorized = claims.get("role") == app.config["ADMIN_ROLE"]

    logger.info(
        f"{'authorized' if is_authorized else 'unauthorized'} {method} on {resource} "
        f"by {claims.get('sub')}"
    )
    if is_authorized:
        setattr(g, CURRENT_ADMIN_KEY, claims.get("sub"))

    return is_authorized


### Current admin management ###
CURRENT_ADMIN_KEY = "current_admin"


def get_current_admin() -> str:
    """Returns the subject of the admin token that authorized the current request."""
    current_admin = g.get(CURRENT_ADMIN_KEY)

    assert current_admin, (
        "There is no admin associated with the current request.\n"
        "Decorate your handler with `auth.requires_auth` to authenticate the request "
        "before calling `auth.get_current_admin`."
    )

    return current_admin


### Authentication logic ###
def authenticate() -> dict:
    """Decode and verify the current request's bearer token, returning its claims."""
    token = _extract_token()

    secret = app.config["AUTH_JWT_SECRET"]
    if not secret:
        raise Unauthorized("Admin authentication is not configured")

    try:
        return jwt.decode(token, secret, algorithms=app.config["ALGORITHMS"])
    except jwt.ExpiredSignatureError:
        raise Unauthorized("Token is expired")
    except jwt.JWTClaimsError as e:
        raise Unauthorized(str(e))
    except jwt.JWTError as e:
        raise Unauthorized(str(e))


def _extract_token() -> str:
    """Extract a token from the current request's authorization header."""
    auth_header = request.headers.get("Authorization") or ""
    bearer, _, token = auth_header.partition(" ")
    if bearer.lower() != "bearer" or not token:
        raise Unauthorized(
            "Authorization header must be set with structure 'Authorization: Bearer <token>'"
        )

    return token
