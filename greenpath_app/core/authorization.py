"""Role-based access decisions for pages and API routes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Union

from greenpath_app.constants.network_constants import AUTH_PATH, HOME_PATH
from greenpath_app.constants.role_constants import ROLE_HOME_PATHS


@dataclass(frozen=True, slots=True)
class Allow:
    """Access granted."""


@dataclass(frozen=True, slots=True)
class RedirectTo:
    path: str


Decision = Union[Allow, RedirectTo]


def authorize(
    role: str | None,
    allowed_roles: Iterable[str] | None = None,
    redirect_to: str = HOME_PATH,
) -> Decision:
    """Decide whether a user holding ``role`` may open a guarded resource.

    ``role`` is ``None`` for anonymous users, who are sent to the sign-in
    page. ``allowed_roles`` of ``None`` admits every signed-in user. Faculty
    and admins who are refused land on their own dashboard; anyone else goes
    to ``redirect_to``.
    """
    if role is None:
        return RedirectTo(AUTH_PATH)
    if allowed_roles is None:
        return Allow()
    if role in set(allowed_roles):
        return Allow()
    return RedirectTo(ROLE_HOME_PATHS.get(role, redirect_to))
