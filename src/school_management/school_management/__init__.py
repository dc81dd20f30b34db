"""School management backend package.

Feature modules (students, attendance, subjects, counters) each carry a model,
a repository interface with its MySQL implementation, a service and, where the
feature is exposed over HTTP, a thin Flask controller.
"""
