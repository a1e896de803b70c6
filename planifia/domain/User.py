"""User domain entity: the single signed-in account (id, email)."""
import uuid


class User:
    def __init__(self, id: str = "", email: str = ""):
        self.id = id
        self.email = email

    @staticmethod
    def for_email(email: str) -> "User":
        '''Builds the user for an email; the same address always maps to the same id.'''
        normalized = (email or "").strip().lower()
        return User(id=uuid.uuid5(uuid.NAMESPACE_URL, f"mailto:{normalized}").hex, email=email.strip())

    def __str__(self) -> str:
        return f"User {self.email} ({self.id})"

    __repr__ = __str__

    def __eq__(self, other) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return self.id == other.id and self.email == other.email

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        return User(id=str(d.get("id", "")), email=d.get("email", ""))

    def to_dict(self):
        return {"id": self.id, "email": self.email}
