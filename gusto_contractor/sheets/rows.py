"""Contractor rows on the active sheet profile"""

from gusto_contractor.models import Contractor
from gusto_contractor.reasoning.normalize import same_value
from gusto_contractor.utils.logging import log


class ContractorSheet:
    def __init__(self, cells, profile):
        self.cells = cells
        self.profile = profile
        self.columns = profile["columns"]

    @property
    def status_value(self):
        return self.profile["status_value"]

    def bring_to_front(self):
        self.cells.surface.bring_to_front()

    def read_status(self, row):
        return self.cells.read(self.columns["status"], row)

    def is_done(self, value):
        return same_value(value, self.status_value)

    def is_row_completed(self, row):
        done = self.is_done(self.read_status(row))
        if done:
            log("info", f"Row {row} already marked \"{self.status_value}\", skipping")
        return done

    def read_full_name(self, row):
        return self.cells.read(self.columns["full_name"], row)

    def read_contractor_row(self, row):
        """Contractor for the row, or None when name or email is missing"""
        full_name = self.read_full_name(row)
        email = self.cells.read(self.columns["email"], row)

        if not full_name or not email:
            log("warn", f"Row {row}: missing data (name=\"{full_name}\", email=\"{email}\")")
            return None

        contractor = Contractor.from_row(row, full_name, email)
        log(
            "data",
            f"Row {row}: first=\"{contractor.first_name}\" last=\"{contractor.last_name}\", "
            f"email=\"{contractor.email}\"",
        )
        return contractor

    def mark_row_completed(self, row):
        return self.cells.write(self.columns["status"], row, self.status_value)

    def read_verification(self, row):
        return self.cells.read(self.columns["verification"], row)

    def verification_value(self, verdict_yes):
        return self.profile["completed_yes"] if verdict_yes else self.profile["completed_no"]

    def write_verification(self, row, value):
        self.cells.write_fast(self.columns["verification"], row, value)
