from enum import Enum as PyEnum


class Role(str, PyEnum):
    """The two kinds of principal. Each has its own table and email namespace."""
    STUDENT = "student"
    STAFF = "staff"

    @property
    def label(self) -> str:
        return ROLE_LABELS[self]


ROLE_LABELS = {
    Role.STUDENT: "Student",
    Role.STAFF: "Staff",
}
