from __future__ import annotations

import click
from flask import Flask, jsonify

from ..common.serializers import assignment_to_dict, record_to_dict
from ..common.web import admin_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    sweeps = container.sweep_service

    @app.route("/api/sweeps/run", methods=["POST"], endpoint="api_sweeps_run")
    @admin_required
    def run_sweeps(actor):
        report = sweeps.run_all()
        return jsonify(
            {
                "rejected": [assignment_to_dict(a) for a in report.rejected],
                "marked_absent": [record_to_dict(r) for r in report.marked_absent],
            }
        )

    # Entry points for an external timer: auto-reject every 5 minutes,
    # absence marking at 23:59.
    @app.cli.command("auto-reject")
    def auto_reject_command():
        rejected = sweeps.auto_reject()
        click.echo(f"Rejected {len(rejected)} schedule(s)")

    @app.cli.command("mark-absent")
    def mark_absent_command():
        created = sweeps.mark_absent()
        click.echo(f"Marked {len(created)} staff absent")

    @app.cli.command("run-sweeps")
    def run_sweeps_command():
        report = sweeps.run_all()
        click.echo(f"Rejected {len(report.rejected)} schedule(s), marked {len(report.marked_absent)} staff absent")
