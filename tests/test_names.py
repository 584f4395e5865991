import pytest

from gusto_contractor.models import Contractor
from gusto_contractor.reasoning.names import parse_full_name
from gusto_contractor.reasoning.normalize import contains_all, normalize_text, same_value


@pytest.mark.parametrize(
    "full_name, first, last",
    [
        ("Caden Lepple", "Caden", "Lepple"),
        ("Coen Troy Collins", "Coen", "Collins"),
        ("Mary Ann B. Smith", "Mary", "Smith"),
        ("Frank Clinton Elcan IV", "Frank", "Elcan IV"),
        ("Ricardo Perez Jr", "Ricardo", "Perez Jr"),
        ("Ricardo Perez Jr.", "Ricardo", "Perez Jr."),
        ("Madison Sullivan-Westover", "Madison", "Sullivan-Westover"),
        ("Adelina de la Rosa", "Adelina", "de la Rosa"),
        ("Ludwig van Beethoven", "Ludwig", "van Beethoven"),
        ("Cheyanne", "Cheyanne", ""),
        ("José Núñez", "José", "Núñez"),
    ],
)
def test_parse_full_name(full_name, first, last):
    assert parse_full_name(full_name) == (first, last)


def test_parse_full_name_empty_and_whitespace():
    assert parse_full_name("") == ("", "")
    assert parse_full_name(None) == ("", "")
    assert parse_full_name("   Caden    Lepple  ") == ("Caden", "Lepple")


def test_particle_walk_never_consumes_first_name():
    # "De" at index 0 is the given name, not a particle
    assert parse_full_name("De Rosa") == ("De", "Rosa")
    assert parse_full_name("Van de Berg") == ("Van", "de Berg")


def test_two_token_suffix_is_not_split():
    assert parse_full_name("Ricardo Jr") == ("Ricardo", "Jr")


def test_contractor_from_row_strips_and_parses():
    contractor = Contractor.from_row(7, " Coen Troy Collins ", " coen@example.com ")

    assert contractor.first_name == "Coen"
    assert contractor.last_name == "Collins"
    assert contractor.email == "coen@example.com"
    assert contractor.full_name == "Coen Troy Collins"
    assert contractor.display_name == "Coen Collins"
    assert contractor.row == 7


def test_normalize_helpers():
    assert normalize_text("  Save   and\nContinue ") == "save and continue"
    assert normalize_text(None) == ""
    assert contains_all("Save and continue", ("save", "continue"))
    assert not contains_all("Continue", ("save", "continue"))
    assert same_value(" yes ", "YES")
    assert not same_value("Yes", "No")
