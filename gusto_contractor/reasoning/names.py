"""Full name -> first / last name"""

from collections import namedtuple

ParsedName = namedtuple("ParsedName", ["first_name", "last_name"])

SUFFIXES = {"jr", "jr.", "sr", "sr.", "ii", "iii", "iv", "v", "vi", "vii", "viii"}

PARTICLES = {
    "de", "la", "del", "di", "da", "el", "al", "van", "von",
    "bin", "ben", "le", "du", "dos", "das",
}


def parse_full_name(full_name):
    """
    Split a legal full name into first name and last name only.

    Middle names and initials are dropped - Gusto only takes first + last.

      "Caden Lepple"                     -> Caden / Lepple
      "Coen Troy Collins"                -> Coen / Collins
      "Frank Clinton Elcan IV"           -> Frank / Elcan IV
      "Ricardo Perez Jr"                 -> Ricardo / Perez Jr
      "Madison Sullivan-Westover"        -> Madison / Sullivan-Westover
      "Adelina de la Rosa"               -> Adelina / de la Rosa
      "Cheyanne"                         -> Cheyanne / ""

    Case and diacritics are left untouched.
    """
    parts = (full_name or "").split()

    if not parts:
        return ParsedName("", "")
    if len(parts) == 1:
        return ParsedName(parts[0], "")

    first_name = parts[0]

    # Suffix sticks to the surname token right before it
    if len(parts) >= 3 and parts[-1].lower() in SUFFIXES:
        return ParsedName(first_name, f"{parts[-2]} {parts[-1]}")

    # Walk back over particles, never into the first name
    start = len(parts) - 1
    while start > 1 and parts[start - 1].lower() in PARTICLES:
        start -= 1

    return ParsedName(first_name, " ".join(parts[start:]))
