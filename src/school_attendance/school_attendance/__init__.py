"""School Attendance package.

Feature modules (attendance, reports) sit on top of small core/common
layers. Record data comes from the school REST backend through the
collaborator protocols in ``attendance.repository``; a thin Flask
controller exposes the reports.
"""
