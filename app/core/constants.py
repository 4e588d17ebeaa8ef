# app/core/constants.py

# Allowed question point values, in the order exams are composed.
POINT_VALUES = (1, 2, 3, 4, 5, 10)

ROLE_ADMIN = "admin"
ROLE_TEACHER = "teacher"
ROLE_STUDENT = "student"
