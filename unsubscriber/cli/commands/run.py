"""
Run command for the inbox unsubscriber.

Parses saved messages, classifies them with the rule-based classifier and
runs the unsubscribe engine for each marketing email.
"""

import json
import signal
import threading
from pathlib import Path

import click

from unsubscriber.classifier import RuleBasedClassifier
from unsubscriber.config import Config
from unsubscriber.email_processor.message_parser import parse_gmail_message, parse_rfc822
from unsubscriber.email_processor.unsubscribe.logging import configure_unsubscribe_logging
from unsubscriber.engine import UnsubscribeEngine
from unsubscriber.orchestrator import BatchProcessor
from unsubscriber.safety import WhitelistStore


def load_emails(paths, fmt='eml'):
    """Parse each file as .eml or as Gmail API message JSON (one message or a list)."""
    for path in paths:
        if fmt == 'gmail-json':
            messages = json.loads(Path(path).read_text(encoding='utf-8'))
            if isinstance(messages, dict):
                messages = [messages]
            for message in messages:
                yield parse_gmail_message(message)
        else:
            yield parse_rfc822(Path(path).read_bytes(), fallback_id=Path(path).name)


def print_report(report, dry_run):
    click.echo(f"Processing: {report.sender}")
    click.echo(f"  Subject: {report.subject}")
    click.echo(f"  Confidence: {report.classification.confidence * 100:.1f}%")
    for warning in report.verdict.warnings:
        click.secho(f"  ⚠ {warning}", fg='yellow')

    outcome = report.outcome
    if outcome.success:
        if dry_run:
            click.secho(f"  ✓ Would unsubscribe ({len(outcome.candidates)} candidate(s))", fg='green')
            for candidate in outcome.candidates:
                click.echo(f"    - [{candidate.method}] {candidate.url}")
        else:
            click.secho(f"  ✓ Unsubscribed via {outcome.method_used}", fg='green')
    else:
        click.secho(f"  ✗ Failed: {outcome.failure_reason}", fg='red')
        for attempt in outcome.attempts:
            click.echo(f"    - [{attempt.method}] {attempt.candidate.url}: {attempt.error or attempt.status_code}")


@click.command('run')
@click.argument('files', nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option('--live/--dry-run', 'live', default=None,
              help='Execute unsubscribes (default follows DRY_RUN, which defaults to dry run)')
@click.option('--min-confidence', type=float, default=None, help='Minimum classifier confidence')
@click.option('--format', 'fmt', type=click.Choice(['eml', 'gmail-json']), default='eml',
              help='Input format: raw .eml files or Gmail API message JSON')
@click.option('--log-level', default='WARNING', help='Log level for structured logs')
@click.option('--json-output', 'json_output', type=click.Path(dir_okay=False), default=None,
              help='Write the full reports to this JSON file')
@click.pass_context
def run(ctx, files, live, min_confidence, fmt, log_level, json_output):
    """
    Unsubscribe from the marketing emails in FILES (.eml or Gmail JSON).

    Example:
        unsubscriber run inbox/*.eml
        unsubscriber run --live inbox/*.eml
        unsubscriber run --format gmail-json messages.json
    """
    configure_unsubscribe_logging(level=log_level, format='standard')

    dry_run = Config.DRY_RUN if live is None else not live
    min_confidence = Config.MIN_CONFIDENCE if min_confidence is None else min_confidence

    with ctx.obj['session_manager'].get_session() as session:
        whitelist = WhitelistStore(session).snapshot()

    processor = BatchProcessor(
        engine=UnsubscribeEngine.from_config(simulate=dry_run),
        classify=RuleBasedClassifier(),
        is_whitelisted=whitelist,
        min_confidence=min_confidence
    )

    click.echo(f"Mode: {'DRY RUN' if dry_run else 'LIVE'}\n")

    cancel_requested = threading.Event()

    def request_cancel(signum, frame):
        click.secho("\nStopping after the current email...", fg='yellow')
        cancel_requested.set()

    previous_handler = signal.signal(signal.SIGINT, request_cancel)
    try:
        summary = processor.process(load_emails(files, fmt), should_cancel=cancel_requested.is_set)
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    for report in summary.reports:
        print_report(report, dry_run)
        click.echo('')

    click.echo("Summary:")
    click.echo(f"  Total emails processed: {summary.processed}")
    click.echo(f"  Marketing emails found: {summary.candidates}")
    click.echo(f"  Blocked by safety gate: {summary.blocked}")
    click.echo(f"  Successful unsubscribes: {summary.succeeded}")
    click.echo(f"  Failed: {summary.failed}")
    if summary.cancelled:
        click.secho("  Run cancelled before all emails were processed", fg='yellow')

    if json_output:
        Path(json_output).write_text(json.dumps([r.to_dict() for r in summary.reports], indent=2))
        click.echo(f"\nReports written to {json_output}")

    if dry_run:
        click.secho("\n⚠ This was a DRY RUN. No emails were actually unsubscribed.", fg='yellow')
        click.echo("Use --live or set DRY_RUN=false to enable live mode.")
