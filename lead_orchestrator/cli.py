"""Command line entry point: ``create-lead`` / ``python -m lead_orchestrator``."""
from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Optional, Sequence

from dotenv import find_dotenv, load_dotenv

from common.errors import (
    ConfigIncomplete,
    ConfigInvalid,
    ConfigMissing,
    SalesforceError,
    TemplateInvalid,
    TemplateMissing,
)
from common.logging import configure_logging

from .engine import LeadWorkflow

CONFIG_HELP = """
Error: Configuration file not found ({path}).

Please create it with the following content:

{{
  "grant_type": "password",
  "client_id": "your_client_id_here",
  "client_secret": "your_client_secret_here",
  "username": "your_salesforce_username_here",
  "password": "your_salesforce_password_and_security_token_here"
}}
"""

TEMPLATE_HELP = """
Error: {path} not found. Please create the file with lead data, e.g.:

{{
  "FirstName": "Ada",
  "LastName": "Lovelace",
  "Company": "Analytical Engines Ltd"
}}
"""


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(
        description="Authenticate to Salesforce, create a Lead from a template and save the read-back record"
    )
    ap.add_argument("--config", help="credential JSON (default: $CRM_CONFIG_PATH or ./config.json)")
    ap.add_argument("--template", help="record template JSON (default: $CRM_TEMPLATE_PATH or ./leadModel.json)")
    ap.add_argument("--output-dir", help="where lead-<timestamp>.json is written (default: $CRM_OUTPUT_DIR or cwd)")
    ap.add_argument("--log-format", choices=["text", "json"], help="defaults to $LOG_FORMAT or text")
    return ap.parse_args(argv)


def remediation(error: SalesforceError) -> str:
    """Multi-line help for errors raised before any record call."""

    if isinstance(error, ConfigMissing):
        return CONFIG_HELP.format(path=error.path)
    if isinstance(error, ConfigInvalid):
        return f"\nError reading configuration file: {error}\n"
    if isinstance(error, ConfigIncomplete):
        return f'\nError: Missing required field "{error.field}" in configuration file.\n'
    if isinstance(error, TemplateMissing):
        return TEMPLATE_HELP.format(path=error.path)
    if isinstance(error, TemplateInvalid):
        return f"\nError reading record template: {error}\n"
    return f"\nError: {error}\n"


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    # .env sits next to config.json in the working directory
    load_dotenv(find_dotenv(usecwd=True), override=False)
    configure_logging(args.log_format, service_name="lead_orchestrator")

    workflow = LeadWorkflow(
        config_path=args.config,
        template_file=args.template,
        output_dir=args.output_dir,
    )
    result = asyncio.run(workflow.run())

    if result.ok:
        print(result.output_path)
        return 0
    if result.error is not None and result.error.preflight:
        print(remediation(result.error), file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
