"""School Attendance package.

Feature modules (classes, teachers, students, attendance) sit behind a thin
Flask controller layer, with service and repository layers underneath.
"""
