"""
Spreadsheet export of a course's progress report.
"""
from io import BytesIO

import openpyxl
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter


SUMMARY_HEADERS = ['User ID', 'Username', 'Name', 'Email', 'Enrolled At', 'Completed At', 'Progress %']


def _naive(value):
    # openpyxl cannot write timezone-aware datetimes
    if value is not None and getattr(value, 'tzinfo', None) is not None:
        return value.replace(tzinfo=None)
    return value


def build_course_progress_workbook(report):
    """
    Render the admin course-progress report as an .xlsx file.

    Sheet "Summary" has one row per enrolled student, sheet "Modules" one
    row per (student, module). Returns the file content as bytes.
    """
    wb = openpyxl.Workbook()
    summary = wb.active
    summary.title = 'Summary'
    summary.append([f"{report['courseTitle']} (course {report['courseId']})"])
    summary['A1'].font = Font(bold=True, size=13)
    summary.append([])
    summary.append(SUMMARY_HEADERS)
    for cell in summary[3]:
        cell.font = Font(bold=True)

    modules = wb.create_sheet('Modules')
    modules.append(['User ID', 'Username', 'Module', 'Completed Lessons', 'Total Lessons', 'Progress %'])
    for cell in modules[1]:
        cell.font = Font(bold=True)

    for row in report['progressDetails']:
        summary.append([
            row['userId'],
            row['username'],
            row['name'],
            row['email'],
            _naive(row['enrolledAt']),
            _naive(row['completedAt']),
            row['overallProgress'],
        ])
        for module in row['moduleProgress']:
            modules.append([
                row['userId'],
                row['username'],
                module['moduleName'],
                module['completedLessons'],
                module['totalLessons'],
                module['progress'],
            ])

    for sheet in (summary, modules):
        for index in range(1, sheet.max_column + 1):
            sheet.column_dimensions[get_column_letter(index)].width = 20

    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()
