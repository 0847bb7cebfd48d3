from fastapi import Response

from changelogs.domain.auth.service.session import CookieDirective


def apply_cookie(response: Response, directive: CookieDirective) -> None:
    """Write a CookieDirective onto a response as Set-Cookie."""
    if directive.is_clear:
        response.delete_cookie(
            directive.name,
            path=directive.path,
            secure=directive.secure,
            httponly=directive.http_only,
            samesite=directive.same_site,
        )
        return

    response.set_cookie(
        directive.name,
        directive.value,
        max_age=directive.max_age,
        path=directive.path,
        secure=directive.secure,
        httponly=directive.http_only,
        samesite=directive.same_site,
    )
