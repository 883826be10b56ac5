"""
Spreadsheet migration: parse-all -> validate-all -> merge -> transactional apply.
"""
from influencer_os.services.importer.apply import ImportAborted, ImportReport, apply_import
from influencer_os.services.importer.layouts import DEFAULT_LAYOUTS, RejectedRow, RosterLayout, TrackerLayout
from influencer_os.services.importer.plan import ImportPlan, WorkbookError, build_import_plan, read_workbook

__all__ = [
    'DEFAULT_LAYOUTS',
    'ImportAborted',
    'ImportPlan',
    'ImportReport',
    'RejectedRow',
    'RosterLayout',
    'TrackerLayout',
    'WorkbookError',
    'apply_import',
    'build_import_plan',
    'read_workbook',
]
