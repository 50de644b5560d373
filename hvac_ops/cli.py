#!/usr/bin/env python3
"""
Command-line front end for the HVAC operations data layer.

Examples:
    hvac-ops status
    hvac-ops dashboard
    hvac-ops projects --status in-progress --year 2025
    hvac-ops add-payment --project 12 --date 2025-01-05 --amount 1500 --method Zelle
"""

import argparse
import asyncio
import getpass
import logging
import sys
from typing import List, Optional

from dotenv import load_dotenv

from .core import screens
from .core.schedule import group_work_days_by_date, sort_by_date_desc
from .core.search import (
    customer_matches,
    customer_name,
    customer_name_for_project,
    filter_records,
    payment_matches,
    project_matches,
    project_name,
    work_day_matches,
)
from .core.validation import ValidationError, validate_required
from .logging_conf import configure_logging
from .session import LocalStore, SessionContext, load_company_profile, save_company_profile
from .settings import Settings
from .sheets import Repositories, SheetsAPIError, SheetsGateway
from .sheets.models import PaymentMethod, ProjectStatus
from .sheets.services import DeletePolicy
from .utils.formatting import format_currency, format_date, format_hours, status_label


logger = logging.getLogger(__name__)

EXIT_ERROR = 1
EXIT_NOT_CONNECTED = 2

# Commands that never touch the endpoint
LOCAL_COMMANDS = {"logout", "whoami", "company"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hvac-ops", description="HVAC operations dashboard")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("status", help="Show endpoint configuration and health")
    sub.add_parser("dashboard", help="Headline stats and recent projects")

    p = sub.add_parser("customers", help="List customers")
    p.add_argument("--search", default="")

    p = sub.add_parser("projects", help="List projects")
    p.add_argument("--search", default="")
    p.add_argument("--status", choices=[s.value for s in ProjectStatus])
    p.add_argument("--year")

    p = sub.add_parser("project", help="Show one project with its records")
    p.add_argument("project_id")

    p = sub.add_parser("payments", help="List payments with totals")
    p.add_argument("--search", default="")

    p = sub.add_parser("schedule", help="Work days grouped by date")
    p.add_argument("--search", default="")

    p = sub.add_parser("add-payment", help="Record a payment on a project")
    p.add_argument("--project", required=True)
    p.add_argument("--date", required=True)
    p.add_argument("--amount", required=True)
    p.add_argument("--method", default=PaymentMethod.CHECK.value,
                   choices=[m.value for m in PaymentMethod])
    p.add_argument("--note", default="")

    p = sub.add_parser("log-hours", help="Log a work day on a project")
    p.add_argument("--project", required=True)
    p.add_argument("--date", required=True)
    p.add_argument("--hours", required=True)
    p.add_argument("--notes", default="")

    p = sub.add_parser("delete-project", help="Delete a project")
    p.add_argument("project_id")
    p.add_argument("--cascade", action="store_true",
                   help="Also delete its equipment, work days, payments and photos")
    p.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")

    p = sub.add_parser("login", help="Log in and remember the user")
    p.add_argument("--email", required=True)
    p.add_argument("--password", help="Prompted for when omitted")

    sub.add_parser("logout", help="Forget the logged-in user")
    sub.add_parser("whoami", help="Show the logged-in user")

    p = sub.add_parser("company", help="Show or edit the local company profile")
    p.add_argument("--name")
    p.add_argument("--license")
    p.add_argument("--phone")
    p.add_argument("--email")

    return parser


def _print_dashboard(view: screens.DashboardView) -> None:
    stats = view.stats
    print(f"Customers:         {stats.total_customers}")
    print(f"Active projects:   {stats.active_projects}")
    print(f"Pending estimates: {stats.pending_estimates}")
    print(f"Total revenue:     {format_currency(stats.total_revenue)}")
    print("\nRecent projects:")
    for project in stats.recent_projects:
        print(f"  {project.project_name or '':30} {status_label(project.status):12} "
              f"{format_currency(project.estimate_amount):>14}  {format_date(project.created_at)}")


async def _run(args: argparse.Namespace, repos: Repositories, session: SessionContext) -> int:
    command = args.command

    if command == "status":
        healthy = await repos.gateway.health_check()
        print(f"Endpoint: {repos.gateway.config.endpoint_url}")
        print("✅ Connected" if healthy else "❌ Endpoint did not answer correctly")
        return 0 if healthy else EXIT_ERROR

    if command == "dashboard":
        _print_dashboard(await screens.load_dashboard(repos))
        return 0

    if command == "customers":
        customers = filter_records(await repos.customers.get_all(), customer_matches, args.search)
        for c in customers:
            print(f"  {c.full_name:30} {c.email or '':30} {c.phone or '':16} {c.city or ''}")
        print(f"{len(customers)} customer(s)")
        return 0

    if command == "projects":
        view = await screens.load_projects_screen(repos)
        projects = filter_records(view.projects, project_matches, args.search, view.customers,
                                  status=args.status, year=args.year)
        for p in projects:
            print(f"  [{p.id}] {p.project_name or '':30} {customer_name(view.customers, p.customer_id):24} "
                  f"{status_label(p.status):12} {format_currency(p.contract_amount):>14}")
        print(f"{len(projects)} project(s)")
        return 0

    if command == "project":
        project = await repos.projects.get_by_id(args.project_id)
        detail = await screens.load_project_detail(repos, project)
        rollup = detail.rollup
        print(f"{project.project_name} ({status_label(project.status_category.value)})")
        print(f"  Contract:  {format_currency(project.contract_amount)}")
        print(f"  Paid:      {format_currency(rollup.total_payments)}")
        print(f"  Balance:   {format_currency(rollup.balance_remaining)}")
        print(f"  Hours:     {format_hours(rollup.total_hours)}")
        print(f"  Equipment: {len(detail.equipment.items)}  Photos: {len(detail.photos.items)}")
        for wd in sort_by_date_desc(detail.work_days.items):
            print(f"    {format_date(wd.date):14} {format_hours(wd.hours):12} {wd.notes or ''}")
        return 0

    if command == "payments":
        view = await screens.load_payments_screen(repos)
        payments = filter_records(view.payments, payment_matches, args.search,
                                  view.projects, view.customers)
        for pay in payments:
            print(f"  {format_date(pay.date):14} {project_name(view.projects, pay.project_id):28} "
                  f"{customer_name_for_project(view.projects, view.customers, pay.project_id):24} "
                  f"{format_currency(pay.amount):>12} {pay.method or ''}")
        print(f"Received:    {format_currency(view.rollup.total_received)}")
        print(f"Contracted:  {format_currency(view.rollup.total_contract_value)}")
        print(f"Outstanding: {format_currency(view.rollup.outstanding_balance)}")
        return 0

    if command == "schedule":
        view = await screens.load_schedule_screen(repos)
        matching = filter_records(view.work_days, work_day_matches, args.search,
                                  view.projects, view.customers)
        for date, group in group_work_days_by_date(matching).items():
            print(f"{format_date(date) or date}  ({format_hours(group.day_total)})")
            for wd in group.work_days:
                print(f"    {project_name(view.projects, wd.project_id):28} "
                      f"{format_hours(wd.hours):12} {wd.notes or ''}")
        print(f"Total: {format_hours(view.total_hours)}")
        return 0

    if command == "add-payment":
        record = {"projectId": args.project, "date": args.date, "amount": args.amount,
                  "method": args.method, "note": args.note}
        validate_required("payment", record)
        project = await repos.projects.get_by_id(args.project)
        detail = await screens.load_project_detail(repos, project)
        await detail.payments.add(record)
        print(f"Payment recorded. Balance remaining: {format_currency(detail.rollup.balance_remaining)}")
        return 0

    if command == "log-hours":
        record = {"projectId": args.project, "date": args.date, "hours": args.hours,
                  "notes": args.notes}
        validate_required("work_day", record)
        project = await repos.projects.get_by_id(args.project)
        detail = await screens.load_project_detail(repos, project)
        await detail.work_days.add(record)
        print(f"Hours logged. Project total: {format_hours(detail.rollup.total_hours)}")
        return 0

    if command == "delete-project":
        project = await repos.projects.get_by_id(args.project_id)
        if not args.yes:
            answer = input(f'Delete project "{project.project_name}"? [y/N] ')
            if answer.strip().lower() not in ("y", "yes"):
                print("Cancelled")
                return 0
        policy = DeletePolicy.CASCADE if args.cascade else DeletePolicy.ORPHAN
        deleted = await repos.projects.delete_project(
            args.project_id, policy=policy, children=repos.project_children())
        print(f"Deleted project {args.project_id}")
        for sheet, count in deleted.items():
            print(f"  {sheet}: {count} removed")
        return 0

    if command == "login":
        password = args.password or getpass.getpass("Password: ")
        user = await session.login(repos.users, args.email, password)
        print(f"Logged in as {user.name} <{user.email}>")
        return 0

    raise ValueError(f"Unknown command: {command}")


def _run_local(args: argparse.Namespace, store: LocalStore, session: SessionContext) -> int:
    if args.command == "logout":
        session.logout()
        print("Logged out")
        return 0

    if args.command == "whoami":
        if not session.is_authenticated:
            print("Not logged in")
            return EXIT_ERROR
        print(f"{session.current_user.name} <{session.current_user.email}>")
        return 0

    profile = load_company_profile(store)
    changes = {k: v for k, v in {
        "company_name": args.name,
        "license_number": args.license,
        "phone": args.phone,
        "email": args.email,
    }.items() if v is not None}
    if changes:
        profile = profile.model_copy(update=changes)
        save_company_profile(store, profile)
        print("Company info saved locally")
    print(f"{profile.company_name}  License {profile.license_number}")
    print(f"{profile.phone}  {profile.email}")
    return 0


async def _run_remote(args: argparse.Namespace, settings: Settings, session: SessionContext) -> int:
    async with SheetsGateway(settings.sheets_config()) as gateway:
        return await _run(args, Repositories(gateway), session)


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    settings = Settings()
    configure_logging(args.log_level or settings.LOG_LEVEL, settings.LOG_JSON)

    store = LocalStore(settings.HVAC_STATE_DIR)
    session = SessionContext(store)

    if args.command in LOCAL_COMMANDS:
        return _run_local(args, store, session)

    if not settings.sheets_config().is_connected:
        print("Not connected: set HVAC_SHEETS_ENDPOINT_URL to the spreadsheet endpoint URL",
              file=sys.stderr)
        return EXIT_NOT_CONNECTED

    try:
        return asyncio.run(_run_remote(args, settings, session))
    except ValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    except SheetsAPIError as e:
        logger.debug(f"{args.command} failed", exc_info=True)
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
