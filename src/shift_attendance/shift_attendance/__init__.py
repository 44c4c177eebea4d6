"""Shift scheduling & attendance package.

Organized by feature modules (shifts, schedules, attendance, sweeps, reports)
with a thin Flask controller layer over service/repository layers. Every
time-window rule reads "now" from an injected ``Clock``.
"""
