"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

STUDENT_ID_PREFIX = "STU"
STUDENT_COUNTER_PREFIX = "Student"
STUDENT_SEQ_WIDTH = 4

DEFAULT_STUDENT_ROLE = "student"
MIN_PASSWORD_LENGTH = 6
MIN_ADMISSION_YEAR = 1900
MAX_ADMISSION_YEAR = 2100

# Fields a partial profile update may touch. studentId is never among them.
UPDATABLE_STUDENT_FIELDS = ("name", "email", "contact", "address", "batches")

# MySQL error number for a duplicate key on INSERT/UPDATE.
ER_DUP_ENTRY = 1062
