"""Email address normalization and structural validation."""


_FORBIDDEN = (";", ",", "(", ")", '"', ":", "<", ">", "[", "]", "\\")


def normalize_email(raw: str) -> str:
    """Trim and lower-case an email address so lookups are case-insensitive."""
    return raw.strip().lower()


def is_valid_email(email: str) -> bool:
    """Structural check: one @, sane local and domain parts, no forbidden characters."""
    if not email or len(email) > 254:
        return False

    if any(ch.isspace() for ch in email):
        return False

    if email.count("@") != 1:
        return False

    local_part, domain_part = email.split("@", 1)

    if not local_part or local_part.startswith(".") or local_part.endswith("."):
        return False

    if not domain_part or domain_part.startswith(".") or domain_part.endswith("."):
        return False

    if "." not in domain_part:
        return False

    for label in domain_part.split("."):
        if label.startswith("-") or label.endswith("-"):
            return False

    if ".." in local_part or ".." in domain_part:
        return False

    return not any(ch in email for ch in _FORBIDDEN)
