import pytest

from gusto_contractor.sheets.cells import CellIO, CellNavigationError, cell_ref, looks_like_address

from conftest import FakeClock, FakeSheetSurface, make_sheet


def test_cell_ref_and_address_shape():
    assert cell_ref("o", 12) == "O12"
    assert looks_like_address("P5")
    assert looks_like_address("$AB$120")
    assert not looks_like_address("Yes")
    assert not looks_like_address("Caden Lepple")


class TestRead:
    def test_reads_formula_bar_after_escape_and_go_to(self):
        surface = FakeSheetSurface({"D2": "Caden Lepple"})

        assert CellIO(surface, FakeClock()).read("D", 2) == "Caden Lepple"
        assert surface.go_to_calls == ["D2"]
        assert surface.escapes == 1

    def test_blank_cell_reads_empty(self):
        assert CellIO(FakeSheetSurface(), FakeClock()).read("F", 9) == ""

    def test_address_echo_is_reread(self):
        surface = FakeSheetSurface({"D2": "Caden Lepple"}, echo_reads={"D2": 1})

        assert CellIO(surface, FakeClock()).read("D", 2) == "Caden Lepple"

    def test_persistent_address_echo_reads_as_empty(self):
        surface = FakeSheetSurface({"D2": "Caden Lepple"}, echo_reads={"D2": 5})

        assert CellIO(surface, FakeClock()).read("D", 2) == ""

    def test_missed_navigation_is_retried_once(self):
        surface = FakeSheetSurface({"F3": "coen@example.com"}, stale_jumps=1)

        assert CellIO(surface, FakeClock()).read("F", 3) == "coen@example.com"
        assert surface.go_to_calls == ["F3", "F3"]

    def test_navigation_that_never_lands_raises(self):
        surface = FakeSheetSurface({"F3": "coen@example.com"}, always_stale=True)

        with pytest.raises(CellNavigationError):
            CellIO(surface, FakeClock()).read("F", 3)


class TestWrite:
    def test_converging_write_returns_true(self):
        surface = FakeSheetSurface({"O2": "", "O3": "Yes", "P2": "NO"})

        assert CellIO(surface, FakeClock()).write("O", 2, "Yes") is True
        assert surface.cells == {"O2": "Yes", "O3": "Yes", "P2": "NO"}
        assert surface.commits == [("O2", "Yes")]

    def test_write_replaces_existing_text(self):
        surface = FakeSheetSurface({"O2": "Pending"})

        assert CellIO(surface, FakeClock()).write("O", 2, "Yes") is True
        assert surface.cells["O2"] == "Yes"

    def test_dropped_commit_is_retried_with_backoff(self):
        clock = FakeClock()
        surface = FakeSheetSurface({"O2": ""}, dropped_commits={"O2": 1})

        assert CellIO(surface, clock).write("O", 2, "Yes") is True
        assert surface.cells["O2"] == "Yes"
        assert clock.sleeps == [0.3]

    def test_non_converging_write_gives_up_without_touching_other_cells(self):
        clock = FakeClock()
        before = {"O2": "", "O3": "Yes", "D2": "Caden Lepple", "P2": ""}
        surface = FakeSheetSurface(dict(before), stuck=("O2",))

        assert CellIO(surface, clock).write("O", 2, "Yes") is False
        assert surface.cells == before
        assert surface.commits == []
        assert clock.sleeps == [0.3, 0.45]

    def test_max_retries_overrides_policy(self):
        clock = FakeClock()
        surface = FakeSheetSurface(stuck=("O2",))

        assert CellIO(surface, clock).write("O", 2, "Yes", max_retries=1) is False
        assert surface.go_to_calls == ["O2", "O2"]
        assert clock.sleeps == []

    def test_zero_retries_still_makes_one_attempt(self):
        surface = FakeSheetSurface()
        assert CellIO(surface, FakeClock()).write("O", 2, "Yes", max_retries=0) is True
        assert surface.commits == [("O2", "Yes")]

        stuck = FakeSheetSurface(stuck=("O2",))
        assert CellIO(stuck, FakeClock()).write("O", 2, "Yes", max_retries=0) is False
        assert stuck.go_to_calls == ["O2", "O2"]

    def test_navigation_failure_counts_as_failed_attempt(self):
        surface = FakeSheetSurface(always_stale=True)

        assert CellIO(surface, FakeClock()).write("O", 2, "Yes") is False
        assert surface.commits == []

    def test_write_fast_skips_read_back(self):
        surface = FakeSheetSurface()

        CellIO(surface, FakeClock()).write_fast("P", 4, "YES")

        assert surface.cells == {"P4": "YES"}
        assert surface.go_to_calls == ["P4"]


class TestContractorSheet:
    def test_reads_contractor_from_profile_columns(self):
        surface = FakeSheetSurface({"D5": "Frank Clinton Elcan IV", "F5": "frank@example.com"})

        contractor = make_sheet(surface, FakeClock()).read_contractor_row(5)

        assert (contractor.first_name, contractor.last_name) == ("Frank", "Elcan IV")
        assert contractor.email == "frank@example.com"
        assert contractor.row == 5

    def test_missing_email_is_no_contractor(self):
        surface = FakeSheetSurface({"D5": "Frank Clinton Elcan IV"})

        assert make_sheet(surface, FakeClock()).read_contractor_row(5) is None

    def test_profile_b_columns(self):
        surface = FakeSheetSurface({"C8": "Caden Lepple", "E8": "caden@example.com", "M8": "yes"})
        sheet = make_sheet(surface, FakeClock(), profile_key="b")

        assert sheet.is_row_completed(8)
        assert sheet.read_contractor_row(8).email == "caden@example.com"

    def test_mark_row_completed_writes_status_value(self):
        surface = FakeSheetSurface()

        assert make_sheet(surface, FakeClock()).mark_row_completed(3) is True
        assert surface.cells == {"O3": "Yes"}

    def test_status_match_ignores_case(self):
        sheet = make_sheet(FakeSheetSurface(), FakeClock())

        assert sheet.is_done("YES")
        assert sheet.is_done(" yes ")
        assert not sheet.is_done("")

    def test_verification_values(self):
        surface = FakeSheetSurface()
        sheet = make_sheet(surface, FakeClock())

        sheet.write_verification(6, sheet.verification_value(False))

        assert surface.cells == {"P6": "NO"}
        assert sheet.verification_value(True) == "YES"
