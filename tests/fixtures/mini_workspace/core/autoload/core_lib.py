"""Helpers every workspace gets."""

# @autodef
def greet(name, greeting="hello"):
    """Return GREETING addressed to NAME."""
    return f"{greeting}, {name}"


# @autodef
shout = str.upper


def _not_exported():
    return None
