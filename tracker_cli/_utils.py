"""
Shared pure-utility functions for tracker-cli.

These helpers have no business logic and no side effects.
"""


def _get_field(d, *keys):
    """Return the value of the first key present in *d* (API key variants)."""
    for key in keys:
        if key in d:
            return d.get(key)
    return None


def person_name(value):
    """Render a person reference that may be a plain name or a person object."""
    if isinstance(value, dict):
        return value.get("name") or value.get("initials") or value.get("username") or ""
    return "" if value is None else str(value)


def label_names(value):
    """Normalize labels given as "a,b", ["a", "b"], or [{"name": "a"}, ...]."""
    if not value:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    names = []
    for item in value:
        name = item.get("name") if isinstance(item, dict) else item
        if name:
            names.append(str(name))
    return names
