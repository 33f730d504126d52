"""Account roles and their landing pages."""

ROLE_STUDENT: str = "student"
ROLE_FACULTY: str = "faculty"
ROLE_ADMIN: str = "admin"
ALL_ROLES: tuple[str, ...] = (ROLE_STUDENT, ROLE_FACULTY, ROLE_ADMIN)
STAFF_ROLES: tuple[str, ...] = (ROLE_FACULTY, ROLE_ADMIN)

# Users who land on a page their role may not open are sent to their own dashboard.
ROLE_HOME_PATHS: dict[str, str] = {
    ROLE_FACULTY: "/faculty",
    ROLE_ADMIN: "/admin",
}
