"""Punch System package.

Feature modules (shifts, attendance, breaks, payroll, ...) keep their domain
models, repository protocols and services side by side. The time-zone, event
time, shift resolution and payroll calculator modules are pure and take the
current instant as an argument.
"""
