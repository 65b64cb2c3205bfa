from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from urllib.parse import quote_plus

CLAUSE_SEPARATOR = "|"
VALUE_SEPARATOR = ","
OPERATOR = "::"

RECIPIENT_EMAIL = "recipient_email_all"
REPORTING_TAGS = "badge_templates[reporting_tags]"
TEMPLATE_ID = "badge_template_id"


@dataclass(frozen=True)
class BadgeFilter:
    """Builds the ``filter`` query value of the badge list endpoint.

    Clauses render as ``field::value`` joined by ``|``. The leading field and
    its operator stay literal; everything after them is escaped as one value,
    so ``recipient_email_all::a@b.com|badge_template_id::t1`` is sent as
    ``recipient_email_all::a%40b.com%7Cbadge_template_id%3A%3At1``.
    """

    clauses: tuple[tuple[str, str], ...] = field(default_factory=tuple)

    @classmethod
    def recipient_email(cls, email: str) -> "BadgeFilter":
        return cls(((RECIPIENT_EMAIL, email),))

    def where(self, name: str, value: str) -> "BadgeFilter":
        return replace(self, clauses=self.clauses + ((name, value),))

    def with_reporting_tags(self, tags: Iterable[str] | None) -> "BadgeFilter":
        if isinstance(tags, str):
            raise TypeError("reporting tags must be a collection of strings, not a single string")
        tags = list(tags or [])
        if not tags:
            return self
        return self.where(REPORTING_TAGS, VALUE_SEPARATOR.join(tags))

    def with_template_id(self, template_id: str) -> "BadgeFilter":
        return self.where(TEMPLATE_ID, template_id)

    def render(self) -> str:
        if not self.clauses:
            raise ValueError("a badge filter needs at least one clause")
        (first_name, first_value), rest = self.clauses[0], self.clauses[1:]
        tail = first_value + "".join(
            f"{CLAUSE_SEPARATOR}{name}{OPERATOR}{value}" for name, value in rest
        )
        return f"{first_name}{OPERATOR}{quote_plus(tail)}"

    def query(self) -> str:
        return f"filter={self.render()}"
