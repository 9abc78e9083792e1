# bontemp/cli.py
"""
Flask CLI commands for running the background handlers on demand.

    flask --app run daily-winner [--now 2024-05-01T21:59:00Z]
    flask --app run sync-likes POST_ID
"""

import json
from dataclasses import asdict

import click
from flask import Flask, current_app

from bontemp.utils.datetime_utils import DateTimeUtils


def _parse_now(ctx, param, value):
    if value is None:
        return None
    try:
        return DateTimeUtils.parse_iso_datetime(value)
    except ValueError as e:
        raise click.BadParameter(str(e))


def register_commands(app: Flask) -> None:

    @app.cli.command('daily-winner')
    @click.option('--now', default=None, callback=_parse_now, help='End of the 24h window (ISO 8601). Defaults to the current time.')
    def daily_winner_command(now):
        """Calculates and stores the daily winner once."""
        result = current_app.services['daily_winner'].calculate_daily_winner(now=now)
        if result is None:
            raise click.ClickException("Daily winner calculation failed, see the log.")
        payload = {"hasWinner": result.has_winner}
        if result.has_winner:
            payload["winner"] = DateTimeUtils.to_json_safe(asdict(result.winner))
        else:
            payload["message"] = result.message
        click.echo(json.dumps(payload, ensure_ascii=False, indent=2))

    @app.cli.command('sync-likes')
    @click.argument('post_ids', nargs=-1, required=True)
    def sync_likes_command(post_ids):
        """Recounts the likes of the given posts."""
        like_service = current_app.services['likes']
        failed = 0
        for post_id in post_ids:
            likes_count = like_service.sync_like_count(post_id)
            if likes_count is None:
                failed += 1
                click.echo(f"{post_id}: failed", err=True)
            else:
                click.echo(f"{post_id}: {likes_count}")
        if failed:
            raise click.ClickException(f"{failed} post(s) could not be updated.")
