"""
Parse and merge stages of the spreadsheet migration.

Nothing here touches the database: build_import_plan() turns workbook
rows into merged influencers, collapsed campaigns, assignments and a list
of rejected rows. apply.py writes the plan in one transaction.
"""
import logging
import zipfile

from influencer_os.services.importer.layouts import DEFAULT_LAYOUTS, RejectedRow
from influencer_os.services.importer.merge import collapse_campaigns, merge_influencers
from influencer_os.services.pipeline import validate_stage, validate_status

logger = logging.getLogger(__name__)


class WorkbookError(Exception):
    """The workbook itself could not be opened or read."""


def read_workbook(path):
    """Load every tab as a list of rows of raw cell values."""
    from openpyxl import load_workbook
    from openpyxl.utils.exceptions import InvalidFileException

    try:
        workbook = load_workbook(path, read_only=True, data_only=True)
    except (OSError, InvalidFileException, zipfile.BadZipFile) as exc:
        raise WorkbookError(f"Cannot read workbook {path}: {exc}") from exc

    try:
        return {
            name: [list(row) for row in workbook[name].iter_rows(values_only=True)]
            for name in workbook.sheetnames
        }
    finally:
        workbook.close()


class ImportPlan:
    def __init__(self):
        self.influencers = []
        self.assignments = []
        self.campaigns = {}
        self.rejected = []
        self.sheet_counts = {}

    @property
    def source_influencer_count(self):
        return sum(counts['influencers'] for counts in self.sheet_counts.values())


def _validate_assignment(assignment):
    validate_stage(assignment['pipeline_stage'])
    for field in ('w9_status', 'invoice_status', 'payment_status'):
        validate_status(field, assignment[field])


def build_import_plan(sheets, layouts=DEFAULT_LAYOUTS):
    """parse-all -> validate-all -> merge."""
    plan = ImportPlan()
    influencer_records = []

    for layout in layouts:
        rows = sheets.get(layout.sheet)
        if rows is None:
            logger.warning("Sheet %r not found in workbook", layout.sheet)
            plan.rejected.append(RejectedRow(layout.sheet, None, 'sheet not found'))
            plan.sheet_counts[layout.sheet] = {"influencers": 0, "assignments": 0}
            continue

        parsed = layout.parse(rows)
        plan.rejected.extend(parsed.rejected)
        influencer_records.extend(parsed.influencers)

        valid = []
        for assignment in parsed.assignments:
            try:
                _validate_assignment(assignment)
            except ValueError as exc:
                plan.rejected.append(RejectedRow(layout.sheet, assignment.get('row'), str(exc)))
                continue
            valid.append(assignment)
        plan.assignments.extend(valid)

        plan.sheet_counts[layout.sheet] = {
            "influencers": len(parsed.influencers),
            "assignments": len(valid),
        }
        logger.debug("Parsed %s: %d influencers, %d assignments, %d rejected",
                     layout.sheet, len(parsed.influencers), len(valid), len(parsed.rejected))

    plan.influencers = merge_influencers(influencer_records)
    plan.campaigns = collapse_campaigns(plan.assignments)
    return plan
