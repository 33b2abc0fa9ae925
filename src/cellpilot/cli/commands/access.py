"""Feature access command."""

from __future__ import annotations

import click

from cellpilot.cli.decorators import handle_errors
from cellpilot.cli.handlers import AccessHandler
from cellpilot.cli.output import OutputFormatter
from cellpilot.utils.config import get_config

out = OutputFormatter()


@click.command(name="access")
@click.argument("feature")
@click.option("--tier", default="free", show_default=True, help="Subscription tier")
@click.option(
    "--beta-join-date",
    type=str,
    help="ISO date the user joined the beta (e.g. 2025-06-01)",
)
@click.option(
    "--at",
    "at",
    type=click.DateTime(),
    help="Evaluate at this date instead of now",
)
@handle_errors
def access_cmd(feature, tier, beta_join_date, at):
    """Check whether a user may use FEATURE.

    \b
    Examples:
        cellpilot access automation --tier starter
        cellpilot access formula_builder --beta-join-date 2025-06-01
    """
    handler = AccessHandler(get_config())
    result = handler.check(feature, tier=tier, beta_join_date=beta_join_date, now=at)

    decision = result["decision"]
    if decision["allowed"]:
        out.success(f"{feature}: allowed ({decision['reason']})")
    else:
        out.error(f"{feature}: denied ({decision['reason']})")
    out.line(decision["message"])

    beta = result["beta_status"]
    out.section("🧪 Beta:")
    out.line(beta["message"])

    prompt = result["upgrade_prompt"]
    if prompt:
        out.section(f"⭐ {prompt['title']}: {prompt['description']}")
        out.list_items(prompt["benefits"])
        out.line(prompt["cta"])
