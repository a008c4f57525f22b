# buddhabrot/utils.py


def parse_complex(s: str) -> complex:
    """
    Parse strings like '-0.5+0j', '0.3-0.5j' or a plain real '1.5' into a complex number.
    """
    s = s.strip().lower().replace(" ", "")
    if s.endswith("j"):
        try:
            return complex(s)
        except ValueError as e:
            raise ValueError(f"Cannot parse complex number: {s!r}") from e
    try:
        return complex(float(s), 0.0)
    except ValueError as e:
        raise ValueError(f"Cannot parse complex number: {s!r}") from e
